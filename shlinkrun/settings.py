"""Shlink instance settings.

Hosts, API keys and tags are edited by the user as three multiline text
boxes.  Hosts and keys are paired by line number, so the n-th key belongs to
the n-th host; a count mismatch is reported rather than guessed around.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union
from urllib.parse import urlsplit
from logging import getLogger

from .exceptions import ConfigurationError, MismatchedHostsAndKeys, NoInstancesConfigured

logger = getLogger(__name__)

HOSTS_OPTION = "ShlinkHosts"
KEYS_OPTION = "ShlinkKeys"
TAGS_OPTION = "ShlinkTags"
TIMEOUT_OPTION = "Timeout"

SHORT_URLS_PATH = "/rest/v3/short-urls"
DEFAULT_TIMEOUT = 15.0

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(value: Optional[str]) -> List[str]:
    """Split a multiline setting into its entries.

    An empty setting has no entries (not one empty entry).  Blank lines in
    between are kept so that line numbers still line up across settings.
    """
    if not value:
        return []
    return [line.strip() for line in _LINE_BREAK.split(value)]


@dataclass(frozen=True)
class BackendInstance:
    """One Shlink server and the API key used against it."""

    host: str
    api_key: str = field(repr=False)

    @property
    def domain(self) -> str:
        try:
            hostname = urlsplit(self.host).hostname
        except ValueError:
            hostname = None
        return hostname or self.host

    @property
    def endpoint(self) -> str:
        return self.host.rstrip("/") + SHORT_URLS_PATH


@dataclass
class ShlinkSettings:
    hosts: str = ""
    keys: str = ""
    tags: str = ""
    timeout: Optional[float] = DEFAULT_TIMEOUT

    @property
    def host_list(self) -> List[str]:
        return split_lines(self.hosts)

    @property
    def key_list(self) -> List[str]:
        return split_lines(self.keys)

    @property
    def tag_list(self) -> List[str]:
        return split_lines(self.tags)

    def instances(self) -> List[BackendInstance]:
        """Pair hosts with keys by position.

        Raises:
            NoInstancesConfigured: If no host is configured.
            MismatchedHostsAndKeys: If hosts and keys differ in count.
        """
        hosts = self.host_list
        keys = self.key_list
        if not hosts:
            raise NoInstancesConfigured()
        if len(hosts) != len(keys):
            raise MismatchedHostsAndKeys(len(hosts), len(keys))
        return [BackendInstance(host, key) for host, key in zip(hosts, keys)]

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ShlinkSettings":
        """Build settings from the host's option values, keyed by option name.

        An unusable timeout is logged and replaced by the default.
        """
        try:
            timeout = _coerce_timeout(options.get(TIMEOUT_OPTION, DEFAULT_TIMEOUT))
        except ConfigurationError as e:
            logger.warning(f"{e}; using {DEFAULT_TIMEOUT}s")
            timeout = DEFAULT_TIMEOUT
        return cls(
            hosts=options.get(HOSTS_OPTION) or "",
            keys=options.get(KEYS_OPTION) or "",
            tags=options.get(TAGS_OPTION) or "",
            timeout=timeout,
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ShlinkSettings":
        """Read settings from the ``[shlink]`` table of a TOML file.

        ``hosts``, ``keys`` and ``tags`` may be multiline strings or arrays of
        strings; arrays keep their order, so pairing stays positional.
        """
        try:
            import tomllib
        except ImportError:
            import tomli as tomllib  # type: ignore[no-redef]

        path = Path(path)
        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Config file not found: {path}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

        table = data.get("shlink", {})
        if not isinstance(table, dict):
            raise ConfigurationError(f"[shlink] in {path} must be a table")

        logger.debug(f"Loaded settings from {path}")
        return cls(
            hosts=_join_entries(table.get("hosts"), "hosts"),
            keys=_join_entries(table.get("keys"), "keys"),
            tags=_join_entries(table.get("tags"), "tags"),
            timeout=_coerce_timeout(table.get("timeout", DEFAULT_TIMEOUT)),
        )


def _join_entries(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return "\r".join(value)
    raise ConfigurationError(f"'{name}' must be a string or a list of strings")


def _coerce_timeout(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid timeout: {value!r}") from e
    # Zero or negative disables the deadline.
    return timeout if timeout > 0 else None


__all__ = [
    "HOSTS_OPTION",
    "KEYS_OPTION",
    "TAGS_OPTION",
    "TIMEOUT_OPTION",
    "SHORT_URLS_PATH",
    "DEFAULT_TIMEOUT",
    "split_lines",
    "BackendInstance",
    "ShlinkSettings",
]
