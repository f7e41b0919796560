"""Error taxonomy for shlinkrun.

Every failure a user can see is a :class:`ShlinkError`.  Each subclass carries
a machine-readable ``kind`` plus the ``title`` shown by the host next to the
message, so callers can render a result row or an error dialog without
knowing which concrete error they got.
"""

from typing import Optional


class ShlinkError(Exception):
    """Base class for all shlinkrun errors."""

    kind = "shlink_error"
    title = "Shlink error"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self) -> str:
        return self.title


# -- Query / configuration errors (rendered as inline result rows) ----------


class InvalidUrl(ShlinkError):
    """The first query term is not an absolute URL."""

    kind = "invalid_url"
    title = "Create a short url"

    def __init__(self, value: str = "", message: str = ""):
        self.value = value
        super().__init__(message)

    def default_message(self) -> str:
        return "Please enter a valid url"


class NoInstancesConfigured(ShlinkError):
    """The hosts setting is empty."""

    kind = "no_instances_configured"
    title = "No Shlink instances configured"

    def default_message(self) -> str:
        return "Please configure the Shlink hosts and API keys in the settings"


class MismatchedHostsAndKeys(ShlinkError):
    """Hosts and API keys cannot be paired line by line."""

    kind = "mismatched_hosts_and_keys"
    title = "Mismatched number of hosts and keys"

    def __init__(self, hosts: int = 0, keys: int = 0, message: str = ""):
        self.hosts = hosts
        self.keys = keys
        super().__init__(message)

    def default_message(self) -> str:
        return "Please make sure the number of hosts and keys match"


class ConfigurationError(ShlinkError):
    """A settings file could not be read."""

    kind = "configuration_error"
    title = "Invalid Shlink configuration"


# -- Dispatch errors (rendered as error dialogs) -----------------------------


class BackendError(ShlinkError):
    """The Shlink instance answered with a non-success status.

    ``body`` is the raw response text, shown to the user unmodified.
    """

    kind = "backend_error"
    title = "Received an error from Shlink"

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(body or f"HTTP {status_code}")


class MalformedResponse(ShlinkError):
    """A success response did not contain a usable ``shortUrl``."""

    kind = "malformed_response"
    title = "Unexpected response from Shlink"

    def __init__(self, body: str, reason: Optional[str] = None):
        self.body = body
        self.reason = reason or "Response does not contain a shortUrl"
        super().__init__(self.reason)


class TransportError(ShlinkError):
    """The request never produced a response (DNS, refused, timeout...)."""

    kind = "transport_error"
    title = "Could not reach Shlink"

    def __init__(self, host: str, reason: str):
        self.host = host
        self.reason = reason
        super().__init__(f"{host}: {reason}")


class Cancelled(ShlinkError):
    """An in-flight shortening request was cancelled."""

    kind = "cancelled"
    title = "Shortening cancelled"

    def __init__(self, host: str = ""):
        self.host = host
        super().__init__(f"Request to {host} was cancelled" if host else "")


__all__ = [
    "ShlinkError",
    "InvalidUrl",
    "NoInstancesConfigured",
    "MismatchedHostsAndKeys",
    "ConfigurationError",
    "BackendError",
    "MalformedResponse",
    "TransportError",
    "Cancelled",
]
