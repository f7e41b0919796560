"""Base classes and capability interfaces for the plugin system.

A plugin subclasses :class:`Plugin` and mixes in only the capabilities it
offers (:class:`QueryProvider`, :class:`ContextMenuProvider`,
:class:`SettingsProvider`, :class:`Disposable`).  The
:class:`PluginRegistry` is a small host: it initialises plugins with a
:class:`~shlinkrun.host.PluginInitContext`, routes query text to them and
disposes them on unregister.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional
from logging import getLogger

from ..types import ContextMenuResult, Query, Result

if TYPE_CHECKING:
    from ..host import PluginInitContext
    from ..manifest import PluginManifest
    from ..skill import ConfigParam, Skill

logger = getLogger(__name__)


class Plugin(ABC):
    """
    Base class for plugins.

    A plugin is a named unit the host loads once per session.  It is
    initialised with the host context, may expose skills, and describes
    itself through a :class:`~shlinkrun.manifest.PluginManifest`.
    """

    def __init__(self, name: str):
        """
        Initialize the plugin.

        Args:
            name: Unique identifier for this plugin
        """
        self.name = name
        self.context: Optional["PluginInitContext"] = None

    def init(self, context: "PluginInitContext") -> None:
        """Called by the host once, before the first query."""
        if context is None:
            raise ValueError("context must not be None")
        self.context = context
        self.initialize()

    def initialize(self) -> None:
        """
        Hook run at the end of :meth:`init`.

        Override this method to perform any setup required by the plugin.
        """
        logger.info(f"Initializing plugin: {self.name}")

    @property
    def skills(self) -> Dict[str, "Skill"]:
        """Skills provided by this plugin, keyed by skill name."""
        return {}

    @property
    def manifest(self) -> "PluginManifest":
        """Declarative metadata about this plugin.

        The default implementation auto-generates a minimal manifest from the
        plugin ``name``.
        """
        from ..manifest import PluginManifest

        return PluginManifest(name=self.name)


class QueryProvider(ABC):
    """Answers host queries with result rows."""

    @abstractmethod
    def query(self, query: Query) -> List[Result]:
        ...


class ContextMenuProvider(ABC):
    """Offers secondary actions for a selected row."""

    @abstractmethod
    def load_context_menus(self, selected: Result) -> List[ContextMenuResult]:
        ...


class SettingsProvider(ABC):
    """Declares user-editable options and receives their values."""

    @property
    @abstractmethod
    def additional_options(self) -> List["ConfigParam"]:
        ...

    @abstractmethod
    def update_settings(self, values: Mapping[str, Any]) -> None:
        ...


class Disposable(ABC):
    """Releases host subscriptions; calling :meth:`dispose` twice is a no-op."""

    @abstractmethod
    def dispose(self) -> None:
        ...


class PluginRegistry:
    """
    Registry and minimal host for plugins.

    The registry keeps the loaded plugins, indexes their skills, and routes
    raw query text: a plugin whose action keyword starts the text gets an
    explicit-keyword query; otherwise every plugin with ``global_match``
    gets the whole text.
    """

    def __init__(self, context: "PluginInitContext"):
        self.context = context
        self._plugins: Dict[str, Plugin] = {}
        self._skills: Dict[str, "Skill"] = {}

    def register(self, plugin: Plugin) -> None:
        """
        Register and initialise a plugin.

        Raises:
            ValueError: If a plugin with the same name is already registered.
        """
        if plugin.name in self._plugins:
            raise ValueError(f"Plugin already registered: {plugin.name}")

        logger.info(f"Registering plugin: {plugin.name}")
        plugin.init(self.context)
        self._plugins[plugin.name] = plugin
        self._skills.update(plugin.skills)

    def unregister(self, name: str) -> None:
        """Dispose and remove a plugin; unknown names are ignored."""
        plugin = self._plugins.pop(name, None)
        if plugin is None:
            return

        logger.info(f"Unregistering plugin: {name}")
        if isinstance(plugin, Disposable):
            plugin.dispose()
        for key in plugin.skills:
            self._skills.pop(key, None)

    def get_plugin(self, name: str) -> Optional[Plugin]:
        return self._plugins.get(name)

    @property
    def plugins(self) -> Dict[str, Plugin]:
        """Get all registered plugins."""
        return self._plugins.copy()

    def get_skill(self, name: str) -> Optional["Skill"]:
        return self._skills.get(name)

    @property
    def skills(self) -> Dict[str, "Skill"]:
        """Get all registered skills."""
        return self._skills.copy()

    def query(self, raw: str) -> List[Result]:
        """Route *raw* query text to the plugins that should answer it."""
        providers = [p for p in self._plugins.values() if isinstance(p, QueryProvider)]

        for plugin in providers:
            keyword = plugin.manifest.action_keyword
            if keyword and (raw == keyword or raw.startswith(keyword + " ")):
                logger.debug(f"Query routed to {plugin.name} by keyword")
                return plugin.query(Query.parse(raw, keyword))

        results: List[Result] = []
        for plugin in providers:
            if plugin.manifest.global_match:
                results.extend(plugin.query(Query.parse(raw)))
        return results

    def close(self) -> None:
        """Unregister every plugin."""
        for name in list(self._plugins):
            self.unregister(name)
