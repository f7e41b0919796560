"""Runtime restrictions on what shlinkrun may do.

Two independent switches, both held in :mod:`contextvars` so they follow the
current thread or async task:

* :class:`SafetyPolicy` decides whether a skill may run at all, from what its
  descriptor declares.
* :class:`SecurityContext` decides which Shlink hosts may be contacted.  The
  dispatcher calls :func:`check_host` before every request.

Usage::

    from shlinkrun.safety import SecurityContext, set_security_context

    # Only talk to the company instance
    set_security_context(SecurityContext(allowed_hosts=["s.example.com"]))
"""

import contextvars
from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import urlsplit


class SafetyError(Exception):
    """A skill was refused by the active :class:`SafetyPolicy`."""

    kind = "safety"

    def __init__(self, skill_name: str, violations: List[str]):
        self.skill_name = skill_name
        self.violations = list(violations)
        super().__init__(f"{skill_name}: {'; '.join(self.violations)}")


class SecurityError(Exception):
    """A Shlink host is denied by the active :class:`SecurityContext`."""

    kind = "host_denied"

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"Host access denied: {host}")


@dataclass
class SafetyPolicy:
    """Capabilities skills are allowed to declare."""

    allow_network: bool = True

    def check(self, descriptor: Any) -> List[str]:
        """Reasons *descriptor* may not run; empty when it may."""
        violations = []
        if getattr(descriptor, "requires_network", False) and not self.allow_network:
            violations.append("requires network access, which the policy denies")
        return violations


@dataclass
class SecurityContext:
    """Host allow and block lists for outgoing requests.

    ``allowed_hosts=None`` allows every host that is not blocked; an empty
    list allows none.  Hosts compare case-insensitively.
    """

    allowed_hosts: Optional[List[str]] = None
    blocked_hosts: List[str] = field(default_factory=list)

    def is_host_allowed(self, host: str) -> bool:
        host = host.lower()
        if host in {h.lower() for h in self.blocked_hosts}:
            return False
        if self.allowed_hosts is None:
            return True
        return host in {h.lower() for h in self.allowed_hosts}


# ---------------------------------------------------------------------------
# Active policy / context (contextvars, async-safe)
# ---------------------------------------------------------------------------

_policy: contextvars.ContextVar[Optional[SafetyPolicy]] = contextvars.ContextVar(
    "shlinkrun_safety_policy", default=None,
)
_security_context: contextvars.ContextVar[Optional[SecurityContext]] = contextvars.ContextVar(
    "shlinkrun_security_context", default=None,
)


def set_policy(policy: Optional[SafetyPolicy]) -> contextvars.Token:
    return _policy.set(policy)


def get_policy() -> Optional[SafetyPolicy]:
    return _policy.get()


def reset_policy(token: contextvars.Token) -> None:
    _policy.reset(token)


def set_security_context(ctx: Optional[SecurityContext]) -> contextvars.Token:
    """Restrict hosts until :func:`reset_security_context` is called with the token."""
    return _security_context.set(ctx)


def get_security_context() -> Optional[SecurityContext]:
    return _security_context.get()


def reset_security_context(token: contextvars.Token) -> None:
    _security_context.reset(token)


def check_host(url: str) -> None:
    """Raise :class:`SecurityError` if the host of *url* is denied.

    No-op when no security context is active.
    """
    ctx = _security_context.get()
    if ctx is None:
        return
    host = urlsplit(url).hostname or ""
    if not ctx.is_host_allowed(host):
        raise SecurityError(host)


__all__ = [
    "SafetyError",
    "SecurityError",
    "SafetyPolicy",
    "SecurityContext",
    "set_policy",
    "get_policy",
    "reset_policy",
    "set_security_context",
    "get_security_context",
    "reset_security_context",
    "check_host",
]
