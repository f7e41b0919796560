"""Shlink plugin.

Answers launcher queries of the form ``url [shortcode] [title]`` with one
row per configured Shlink instance.  Selecting a row creates the short URL
on that instance and copies it to the clipboard; failures are shown in an
error dialog.

Also provides an async ``shorten_url`` skill for use outside a launcher.
"""

from typing import Any, Dict, List, Mapping, Optional
from logging import getLogger

import httpx

from ...dispatcher import ShortenRequest, acreate_short_url, create_short_url
from ...exceptions import BackendError, InvalidUrl, ShlinkError
from ...interpreter import interpret, is_absolute_url
from ...lifecycle import Subscription
from ...safety import SecurityError
from ...settings import (
    DEFAULT_TIMEOUT,
    HOSTS_OPTION,
    KEYS_OPTION,
    TAGS_OPTION,
    TIMEOUT_OPTION,
    BackendInstance,
    ShlinkSettings,
)
from ...skill import ConfigParam, RiskLevel, skill
from ...types import ContextMenuResult, Query, Result, Theme
from ..base import ContextMenuProvider, Disposable, Plugin, QueryProvider, SettingsProvider

logger = getLogger(__name__)

PLUGIN_ID = "4692228510C14184AD80DFA2A156EA05"
DEFAULT_ACTION_KEYWORD = "sl"

LIGHT_ICON = "Images/shlink.light.png"
DARK_ICON = "Images/shlink.dark.png"


def icon_for_theme(theme: Theme) -> str:
    return LIGHT_ICON if theme.is_light else DARK_ICON


# -- Skills ------------------------------------------------------------------


@skill(
    name="shorten_url",
    display_name="Shorten URL with Shlink",
    description="Create a short URL on a Shlink instance, optionally with a custom slug and title.",
    risk_level=RiskLevel.MODERATE,
    requires_network=True,
    config_params=[
        ConfigParam(
            name="timeout",
            display_name="Timeout",
            description="Request timeout.",
            type="number",
            default=DEFAULT_TIMEOUT,
            min=1,
            max=120,
            unit="seconds",
        ),
    ],
)
async def shorten_url(
    url: str,
    host: str,
    api_key: str,
    shortcode: str = None,
    title: str = None,
    tags: list = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> dict:
    """Shorten a long URL on one Shlink instance.

    Args:
        url: The URL to shorten.
        host: Base URL of the Shlink instance.
        api_key: API key for that instance.
        shortcode: Optional custom slug.
        title: Optional title; only sent together with a shortcode.
        tags: Tags added to the short URL.
        timeout: Request timeout in seconds.
    """
    url_str = url.strip()
    if not is_absolute_url(url_str):
        raise InvalidUrl(url_str)

    request = ShortenRequest(long_url=url_str, custom_slug=shortcode, title=title, tags=list(tags or []))
    short_url = await acreate_short_url(BackendInstance(host, api_key), request, timeout=timeout)
    return {
        "long_url": url_str,
        "short_url": short_url,
        "host": host,
    }


# -- Plugin ------------------------------------------------------------------


class ShlinkPlugin(Plugin, QueryProvider, ContextMenuProvider, SettingsProvider, Disposable):
    """Launcher plugin for one or more Shlink instances."""

    def __init__(
        self,
        settings: Optional[ShlinkSettings] = None,
        action_keyword: str = DEFAULT_ACTION_KEYWORD,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__("shlink")
        self.settings = settings or ShlinkSettings()
        self.action_keyword = action_keyword
        self.icon_path = DARK_ICON
        self.disposed = False
        self._transport = transport
        self._theme_subscription: Optional[Subscription] = None

    # -- lifecycle -----------------------------------------------------------

    def initialize(self) -> None:
        super().initialize()
        api = self.context.api
        self._theme_subscription = api.theme_changed.attach(self._on_theme_changed)
        self._update_icon_path(api.get_current_theme())

    def dispose(self) -> None:
        if self.disposed:
            return
        if self._theme_subscription is not None:
            self._theme_subscription.dispose()
        self.disposed = True
        logger.info(f"Disposed plugin: {self.name}")

    def _update_icon_path(self, theme: Theme) -> None:
        self.icon_path = icon_for_theme(theme)

    def _on_theme_changed(self, old: Theme, new: Theme) -> None:
        self._update_icon_path(new)

    # -- metadata ------------------------------------------------------------

    @property
    def skills(self) -> Dict[str, Any]:
        return {
            "shorten_url": shorten_url.__skill__,
        }

    @property
    def manifest(self):
        from ...manifest import PluginManifest, PluginRequirements
        return PluginManifest(
            name="shlink",
            plugin_id=PLUGIN_ID,
            display_name="Shlink",
            description="Shorten urls using Shlink",
            action_keyword=self.action_keyword,
            global_match=True,
            icon=self.icon_path,
            requires=PluginRequirements(network=True, imports=["httpx"]),
        )

    # -- settings ------------------------------------------------------------

    @property
    def additional_options(self) -> List[ConfigParam]:
        return [
            ConfigParam(
                name=HOSTS_OPTION,
                display_name="Shlink hosts",
                description="Hostnames of your Shlink instances (one on each line) for example: https://shlink.io/",
                type="text",
                rows=4,
            ),
            ConfigParam(
                name=KEYS_OPTION,
                display_name="Shlink API key",
                description=(
                    "API keys for your Shlink instances (one on each line). Make sure the key is "
                    "on the same line number as the host in the field above."
                ),
                type="text",
                rows=4,
            ),
            ConfigParam(
                name=TAGS_OPTION,
                display_name="Shlink Tags",
                description="Tags that will be added to each url shortened (one on each line).",
                type="text",
                rows=4,
            ),
            ConfigParam(
                name=TIMEOUT_OPTION,
                display_name="Timeout",
                description="How long to wait for a Shlink instance to answer.",
                type="number",
                default=DEFAULT_TIMEOUT,
                min=1,
                max=120,
                unit="seconds",
            ),
        ]

    @property
    def option_values(self) -> Dict[str, Any]:
        """Current value of every option in :attr:`additional_options`."""
        return {
            HOSTS_OPTION: self.settings.hosts,
            KEYS_OPTION: self.settings.keys,
            TAGS_OPTION: self.settings.tags,
            TIMEOUT_OPTION: self.settings.timeout,
        }

    def update_settings(self, values: Mapping[str, Any]) -> None:
        logger.info("UpdateSettings")
        self.settings = ShlinkSettings.from_options(values)

    # -- querying ------------------------------------------------------------

    def query(self, query: Query) -> List[Result]:
        return interpret(query, self.settings, self._generate_short_url, self.icon_path)

    def load_context_menus(self, selected: Result) -> List[ContextMenuResult]:
        return []

    def _generate_short_url(self, request: ShortenRequest, instance: BackendInstance) -> bool:
        if self.context is None:
            raise RuntimeError("Plugin has not been initialised")
        api = self.context.api

        try:
            short_url = create_short_url(
                instance,
                request,
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        except BackendError as e:
            api.show_error(e.body, e.title)
            return False
        except ShlinkError as e:
            api.show_error(e.message, e.title)
            return False
        except SecurityError as e:
            api.show_error(str(e), "Shlink host not allowed")
            return False

        api.copy_to_clipboard(short_url)
        return True


__all__ = [
    "PLUGIN_ID",
    "DEFAULT_ACTION_KEYWORD",
    "LIGHT_ICON",
    "DARK_ICON",
    "icon_for_theme",
    "shorten_url",
    "ShlinkPlugin",
]
