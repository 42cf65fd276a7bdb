"""
Unit Tests for the Plugin Entry Point.

A recording fake stands in for the host.
"""

import pytest

from burpnote.backend.core.config import AppConfig, Settings
from burpnote.plugin.extender import NotesExtender


class RecordingSink:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def println(self, text: str) -> None:
        self.lines.append(text)


class FakeHost:
    def __init__(self) -> None:
        self.stdout = RecordingSink()
        self.stderr = RecordingSink()
        self.name: str | None = None
        self.tabs: list = []

    def set_extension_name(self, name: str) -> None:
        self.name = name

    def add_suite_tab(self, tab) -> None:
        self.tabs.append(tab)


@pytest.fixture
def extender(mock_engine_factory):
    return NotesExtender(
        app_config=AppConfig(),
        settings=Settings(_env_file=None, db_password=""),
        engine_factory=mock_engine_factory,
    )


class TestRegistration:
    """Tests for register_extender_callbacks."""

    def test_registers_name_tab_and_banner(self, extender):
        """Should name the plugin, add one tab and announce the load."""
        host = FakeHost()

        extender.register_extender_callbacks(host)

        assert host.name == "BurpNote Database Connector"
        assert host.tabs == [extender]
        assert host.stdout.lines == ["BurpNote extension loaded."]
        assert host.stderr.lines == []

    def test_tab_caption(self, extender):
        assert extender.tab_caption == "BurpNote"

    def test_host_before_registration_raises(self, extender):
        """Should refuse to build UI before the host is known."""
        with pytest.raises(RuntimeError, match="not been registered"):
            extender.host

    def test_starts_disconnected(self, extender, mock_engine_factory):
        """Should not open a connection on load."""
        assert extender.connections.is_connected is False
        mock_engine_factory.assert_not_called()

    def test_delete_policy_from_features(self, mock_engine_factory):
        """Should pass the configured delete policy to the service."""
        config = AppConfig()
        config._features = config.features.model_copy(update={"delete_missing_is_error": False})

        extender = NotesExtender(config, Settings(_env_file=None), mock_engine_factory)

        assert extender.service.delete_missing_is_error is False

    def test_ui_component_is_built_once(self, extender):
        """Should return the same panel on repeated calls."""
        extender.register_extender_callbacks(FakeHost())

        assert extender.ui_component() is extender.ui_component()
