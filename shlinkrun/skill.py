"""Skills: plain or async functions that carry their own description.

A skill is what ``shlinkrun shorten`` runs and what ``shlinkrun show skill``
prints.  :func:`skill` attaches a :class:`Skill` to the function as
``fn.__skill__``; the function itself stays directly callable.

Invoking through :meth:`Skill.invoke` / :meth:`Skill.ainvoke` checks the
active :class:`~shlinkrun.safety.SafetyPolicy` first and reports raised
exceptions as a failed :class:`SkillResult` whose ``error_kind`` is the
exception's ``kind`` (see :mod:`shlinkrun.exceptions`).  Task cancellation is
not an error and propagates.
"""

import inspect
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from .safety import SafetyError, SafetyPolicy, get_policy

R = TypeVar("R")


class RiskLevel(str, Enum):
    """How careful a frontend should be before running a skill."""

    SAFE = "safe"
    MODERATE = "moderate"
    DANGEROUS = "dangerous"


# ---------------------------------------------------------------------------
# Settings metadata
# ---------------------------------------------------------------------------

@dataclass
class ConfigParam:
    """One setting shown in the host's settings panel.

    ``type`` is a rendering hint: ``"text"`` is a multi-line box (``rows``
    lines high), ``"number"`` honours ``min``/``max``/``unit``.
    """

    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    type: str = "string"
    default: Any = None
    min: Optional[float] = None
    max: Optional[float] = None
    unit: Optional[str] = None
    rows: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON form used by ``shlinkrun options --json``; unset hints are left out."""
        d: Dict[str, Any] = {"name": self.name, "type": self.type}
        optional = (
            ("displayName", self.display_name),
            ("description", self.description),
            ("default", self.default),
            ("min", self.min),
            ("max", self.max),
            ("unit", self.unit),
            ("rows", self.rows),
        )
        d.update((key, value) for key, value in optional if value is not None)
        return d


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

_JSON_TYPES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


def _parameters_schema(fn: Callable) -> Optional[Dict[str, Any]]:
    """Object schema for the annotated parameters of *fn*.

    Parameters without a default are required.  Annotations that are not
    simple builtins get an empty (any) schema.
    """
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for pname, param in inspect.signature(fn).parameters.items():
        if param.annotation is inspect.Parameter.empty:
            continue
        json_type = _JSON_TYPES.get(param.annotation)
        properties[pname] = {"type": json_type} if json_type else {}
        if param.default is inspect.Parameter.empty:
            required.append(pname)
    if not properties:
        return None
    return {"type": "object", "properties": properties, "required": required}


@dataclass
class SkillDescriptor:
    """What a skill is called, what it takes and what it needs."""

    name: str
    description: str = ""
    display_name: Optional[str] = None
    input_schema: Optional[Dict[str, Any]] = None
    is_async: bool = False
    requires_network: bool = False
    risk_level: RiskLevel = RiskLevel.SAFE
    config_params: List[ConfigParam] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.display_name or self.name.replace("_", " ").title()

    @property
    def required_params(self) -> List[str]:
        return list((self.input_schema or {}).get("required", []))


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class SkillResult(Generic[R]):
    """Outcome of one invocation.

    A result failed when ``error_kind`` is set.  ``violations`` lists the
    policy rules that stopped the skill from running, if any.
    """

    value: Optional[R] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    duration_ms: Optional[float] = None
    violations: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.error_kind is None

    @property
    def failed(self) -> bool:
        return self.error_kind is not None

    @classmethod
    def from_error(cls, exc: Exception, duration_ms: Optional[float] = None) -> "SkillResult":
        return cls(
            error=str(exc),
            error_kind=getattr(exc, "kind", None) or type(exc).__name__,
            duration_ms=duration_ms,
        )


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


# ---------------------------------------------------------------------------
# Skill
# ---------------------------------------------------------------------------

@dataclass
class Skill:
    descriptor: SkillDescriptor
    fn: Callable

    @property
    def name(self) -> str:
        return self.descriptor.name

    def _refused(self, policy: Optional[SafetyPolicy]) -> Optional[SkillResult]:
        policy = policy if policy is not None else get_policy()
        if policy is None:
            return None
        violations = policy.check(self.descriptor)
        if not violations:
            return None
        result = SkillResult.from_error(SafetyError(self.name, violations))
        result.violations = violations
        return result

    def invoke(self, *args: Any, policy: Optional[SafetyPolicy] = None, **kwargs: Any) -> SkillResult:
        """Run the skill synchronously.

        *policy* overrides the active policy for this call only.
        """
        refused = self._refused(policy)
        if refused is not None:
            return refused

        start = time.perf_counter()
        try:
            value = self.fn(*args, **kwargs)
        except Exception as exc:
            return SkillResult.from_error(exc, _elapsed_ms(start))
        return SkillResult(value=value, duration_ms=_elapsed_ms(start))

    async def ainvoke(self, *args: Any, policy: Optional[SafetyPolicy] = None, **kwargs: Any) -> SkillResult:
        """Run the skill, awaiting it if the wrapped function is async."""
        refused = self._refused(policy)
        if refused is not None:
            return refused

        start = time.perf_counter()
        try:
            value = self.fn(*args, **kwargs)
            if inspect.isawaitable(value):
                value = await value
        except Exception as exc:
            return SkillResult.from_error(exc, _elapsed_ms(start))
        return SkillResult(value=value, duration_ms=_elapsed_ms(start))


def skill(
    fn: Optional[Callable] = None,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    display_name: Optional[str] = None,
    requires_network: bool = False,
    risk_level: RiskLevel = RiskLevel.SAFE,
    config_params: Optional[List[ConfigParam]] = None,
):
    """Attach a :class:`Skill` to a function, as ``@skill`` or ``@skill(...)``.

    The name defaults to the function name and the description to the first
    line of its docstring.
    """

    def attach(func: Callable) -> Callable:
        summary = (inspect.getdoc(func) or "").split("\n", 1)[0]
        func.__skill__ = Skill(
            descriptor=SkillDescriptor(
                name=name or func.__name__,
                description=description if description is not None else summary,
                display_name=display_name,
                input_schema=_parameters_schema(func),
                is_async=inspect.iscoroutinefunction(func),
                requires_network=requires_network,
                risk_level=risk_level,
                config_params=list(config_params or []),
            ),
            fn=func,
        )
        return func

    if fn is not None:
        return attach(fn)
    return attach


__all__ = [
    "RiskLevel",
    "ConfigParam",
    "SkillDescriptor",
    "SkillResult",
    "Skill",
    "skill",
]
