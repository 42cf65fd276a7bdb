"""
BurpNote.

- backend/: Database access, note store, configuration, logging
- plugin/: Host integration and the Textual UI panels
"""
