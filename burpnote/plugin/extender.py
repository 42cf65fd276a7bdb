"""
Plugin Entry Point.

The host application (the proxy, or StandaloneHost in plugin/host.py)
hands the plugin a PluginHost. The plugin names itself, registers its tab,
and writes diagnostics to the host's output and error sinks.

Usage:
    extender = NotesExtender()
    extender.register_extender_callbacks(host)
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import create_async_engine
from textual.widget import Widget

from burpnote.backend.core.config import AppConfig, Settings, get_app_config, get_settings
from burpnote.backend.core.database import ConnectionManager, EngineFactory
from burpnote.backend.services.note import NoteService


class LogSink(Protocol):
    """Line-oriented text sink owned by the host."""

    def println(self, text: str) -> None: ...


class SuiteTab(Protocol):
    """A tab contributed to the host UI."""

    @property
    def tab_caption(self) -> str: ...

    def ui_component(self) -> Widget: ...


class PluginHost(Protocol):
    """Everything the plugin needs from its host."""

    stdout: LogSink
    stderr: LogSink

    def set_extension_name(self, name: str) -> None: ...

    def add_suite_tab(self, tab: SuiteTab) -> None: ...


class NotesExtender:
    """
    The BurpNote plugin.

    Owns the connection manager and note service, and builds the
    NotesPanel the first time the host asks for the UI component.
    """

    def __init__(
        self,
        app_config: AppConfig | None = None,
        settings: Settings | None = None,
        engine_factory: EngineFactory = create_async_engine,
    ) -> None:
        self._config = app_config or get_app_config()
        self._settings = settings or get_settings()
        self.connections = ConnectionManager(self._config.database, engine_factory)
        self.service = NoteService(
            self.connections,
            delete_missing_is_error=self._config.features.delete_missing_is_error,
        )
        self._host: PluginHost | None = None
        self._panel: Widget | None = None

    def register_extender_callbacks(self, host: PluginHost) -> None:
        """Called once by the host when the plugin is loaded."""
        self._host = host
        host.set_extension_name(self._config.application.extension_name)
        host.add_suite_tab(self)
        host.stdout.println(f"{self._config.application.name} extension loaded.")

    @property
    def host(self) -> PluginHost:
        if self._host is None:
            raise RuntimeError("Plugin has not been registered with a host")
        return self._host

    @property
    def tab_caption(self) -> str:
        return self._config.application.tab_caption

    def ui_component(self) -> Widget:
        from burpnote.plugin.panels import NotesPanel

        if self._panel is None:
            self._panel = NotesPanel(
                service=self.service,
                host=self.host,
                db_defaults=self._config.database,
                features=self._config.features,
                password=self._settings.db_password,
            )
        return self._panel
