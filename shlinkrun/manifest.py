"""Plugin manifest: declarative plugin metadata for hosts and the CLI.

Usage::

    from shlinkrun.manifest import PluginManifest, PluginRequirements

    manifest = PluginManifest(
        name="shlink",
        plugin_id="4692228510C14184AD80DFA2A156EA05",
        display_name="Shlink",
        description="Shorten urls using Shlink",
        action_keyword="sl",
        requires=PluginRequirements(network=True, imports=["httpx"]),
    )
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PluginRequirements:
    """What a plugin needs from the environment to function."""

    network: bool = False
    imports: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.network:
            d["network"] = True
        if self.imports:
            d["imports"] = self.imports
        return d


@dataclass
class PluginManifest:
    """Declarative metadata about a plugin.

    ``action_keyword`` is the prefix that addresses the plugin explicitly;
    ``global_match`` lets the host offer every query to the plugin without
    a keyword.
    """

    # Identity
    name: str
    plugin_id: Optional[str] = None
    display_name: str = ""
    description: str = ""
    version: str = "0.1.0"
    author: Optional[str] = None

    # Routing
    action_keyword: str = ""
    global_match: bool = False

    # UI hints
    icon: Optional[str] = None

    # Requirements
    requires: PluginRequirements = field(default_factory=PluginRequirements)

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.name.replace("_", " ").title()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dict suitable for JSON output."""
        d: Dict[str, Any] = {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "version": self.version,
        }
        if self.plugin_id is not None:
            d["id"] = self.plugin_id
        if self.author is not None:
            d["author"] = self.author
        if self.action_keyword:
            d["actionKeyword"] = self.action_keyword
        if self.global_match:
            d["globalMatch"] = True
        if self.icon is not None:
            d["icon"] = self.icon
        requires_dict = self.requires.to_dict()
        if requires_dict:
            d["requires"] = requires_dict
        return d


__all__ = [
    "PluginRequirements",
    "PluginManifest",
]
