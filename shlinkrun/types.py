from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

# A deferred result action; the return value tells the host whether to
# dismiss its result list.
Action = Callable[[], bool]


class Theme(str, Enum):
    """Host colour theme, used only to pick icon assets."""

    LIGHT = "light"
    DARK = "dark"
    HIGH_CONTRAST_ONE = "high_contrast_one"
    HIGH_CONTRAST_TWO = "high_contrast_two"
    HIGH_CONTRAST_BLACK = "high_contrast_black"
    HIGH_CONTRAST_WHITE = "high_contrast_white"

    @property
    def is_light(self) -> bool:
        return self in (Theme.LIGHT, Theme.HIGH_CONTRAST_WHITE)


@dataclass
class Query:
    """
    Description:
        What the host hands to a plugin for one keystroke.

    Attributes:
        search: The query text with the action keyword removed.
        terms: ``search`` split on whitespace.
        action_keyword: The keyword the user typed, or ``""`` when the plugin
            is consulted through global matching.
    """

    search: str
    terms: List[str] = field(default_factory=list)
    action_keyword: str = ""

    @property
    def has_explicit_keyword(self) -> bool:
        return bool(self.action_keyword)

    @property
    def raw_query(self) -> str:
        if not self.action_keyword:
            return self.search
        return f"{self.action_keyword} {self.search}".rstrip()

    @classmethod
    def parse(cls, raw: str, action_keyword: str = "") -> "Query":
        """Build a query from raw input.

        *action_keyword* is stripped only when it is the whole input or is
        followed by a space; otherwise the query counts as globally matched.
        """
        search = raw
        if action_keyword and (raw == action_keyword or raw.startswith(action_keyword + " ")):
            search = raw[len(action_keyword):]
        else:
            action_keyword = ""
        search = search.strip()
        return cls(search=search, terms=search.split(), action_keyword=action_keyword)


@dataclass
class Result:
    """
    Description:
        One selectable row returned to the host.

    Attributes:
        title: Main line of the row.
        sub_title: Secondary line.
        icon_path: Icon asset for the row.
        query_text_display: Text the host puts back into its search box.
        action: Zero-argument action run when the row is selected; ``None``
            for informational and error rows.
        context_data: Opaque payload for the plugin (e.g. the request bound
            to the row).
    """

    title: str
    sub_title: str = ""
    icon_path: Optional[str] = None
    query_text_display: str = ""
    action: Optional[Action] = None
    context_data: Any = None

    @property
    def actionable(self) -> bool:
        return self.action is not None

    def invoke(self) -> bool:
        """Run the bound action; rows without one never dismiss the host."""
        if self.action is None:
            return False
        return bool(self.action())


@dataclass
class ContextMenuResult:
    """A secondary action attached to a selected result."""

    title: str
    glyph: Optional[str] = None
    action: Optional[Action] = None


__all__ = [
    "Action",
    "Theme",
    "Query",
    "Result",
    "ContextMenuResult",
]
