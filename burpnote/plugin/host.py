"""
Standalone Host.

A Textual application that plays the part of the proxy host, so the
plugin can be used on its own. Plugins register before the app runs;
each registered tab becomes a pane in the host's TabbedContent.

Usage:
    host = StandaloneHost()
    NotesExtender().register_extender_callbacks(host)
    host.run()
"""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, TabbedContent, TabPane

from burpnote.backend.core.logging import get_logger, log_with_source
from burpnote.plugin.extender import SuiteTab

logger = get_logger(__name__)


class HostLogSink:
    """Forwards plugin output lines to structlog with source='plugin'."""

    def __init__(self, level: str = "info") -> None:
        self._level = level

    def println(self, text: str) -> None:
        log_with_source(logger, "plugin", self._level, text)


class StandaloneHost(App):
    """Minimal host: one tab per registered plugin."""

    TITLE = "BurpNote"

    CSS = """
    Screen {
        layout: vertical;
    }

    #suite-tabs {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.stdout = HostLogSink("info")
        self.stderr = HostLogSink("error")
        self._tabs: list[SuiteTab] = []

    @property
    def tabs(self) -> list[SuiteTab]:
        return list(self._tabs)

    def set_extension_name(self, name: str) -> None:
        self.title = name

    def add_suite_tab(self, tab: SuiteTab) -> None:
        self._tabs.append(tab)

    def compose(self) -> ComposeResult:
        yield Header()
        with TabbedContent(id="suite-tabs"):
            for tab in self._tabs:
                with TabPane(tab.tab_caption):
                    yield tab.ui_component()
        yield Footer()
