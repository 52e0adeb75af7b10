# src/ttmctl/engine/model.py

"""
Core domain models.

This module defines the in-memory representations of progress counters
(stats), calendar week codes, tasks, sections and block tracker entries.

Records are created once per parsed element and are not mutated
afterwards. No parsing should happen here.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Union


# ---------------------------------------------------------------------
# Stat
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CountStat:
    """
    "Done `act` out of `exp`". Either side may be absent.
    """

    act: Optional[int] = None
    exp: Optional[int] = None


@dataclass(frozen=True, slots=True)
class BoolStat:
    """
    Done / required flag pair.

    An omitted side defaults to not done (`act`) and required (`exp`).
    """

    act: bool = False
    exp: bool = True


@dataclass(frozen=True, slots=True)
class RequiredCountStat:
    """
    A count without an objective, only whether it was required.
    """

    act: int
    exp: bool


@dataclass(frozen=True, slots=True)
class UnknownStat:
    """
    Status not determined yet.
    """


Stat = Union[CountStat, BoolStat, RequiredCountStat, UnknownStat]

# (day / goal, accumulated, context) slots of a descriptor
StatTuple = tuple[Optional[Stat], Optional[Stat], Optional[Stat]]


# ---------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------

class Season(str, Enum):
    """
    Season of a date code year, keyed by its single-letter code.
    """

    SUMMER = "M"
    FALL = "F"
    WINTER = "W"
    SPRING = "S"


class Weekday(str, Enum):
    """
    Day of the week, keyed by its single-letter code.

    Ordering follows the block tracker columns (Monday first).
    """

    MON = "M"
    TUE = "T"
    WED = "W"
    THU = "R"
    FRI = "F"
    SAT = "S"
    SUN = "U"

    @property
    def position(self) -> int:
        return list(Weekday).index(self)


@dataclass(frozen=True, slots=True)
class ShortWeekDateCode:
    week: int


@dataclass(frozen=True, slots=True)
class ShortDateCode:
    week: int
    weekday: Weekday


@dataclass(frozen=True, slots=True)
class WeekDateCode:
    year: int
    season: Season
    week: int


@dataclass(frozen=True, slots=True)
class DateCode:
    year: int
    season: Season
    week: int
    weekday: Weekday


AnyDateCode = Union[ShortWeekDateCode, ShortDateCode, WeekDateCode, DateCode]


# ---------------------------------------------------------------------
# Task flags
# ---------------------------------------------------------------------

class TaskFlag(str, Enum):
    """
    Task state marker, keyed by its prefix character.
    """

    BLOCKED = "B"
    CURRENT = ">"
    LATE = "L"
    DONE = "~"


@dataclass(frozen=True, slots=True)
class TaskFlags:
    """
    Set of TaskFlag values. Empty when the task line has no prefix.
    """

    members: frozenset[TaskFlag] = frozenset()

    @classmethod
    def of(cls, *flags: TaskFlag) -> "TaskFlags":
        return cls(frozenset(flags))

    def __contains__(self, flag: object) -> bool:
        return flag in self.members

    def __iter__(self) -> Iterator[TaskFlag]:
        # stable declaration order for display
        return (f for f in TaskFlag if f in self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __or__(self, other: "TaskFlags") -> "TaskFlags":
        return TaskFlags(self.members | other.members)

    def with_flag(self, flag: TaskFlag) -> "TaskFlags":
        return TaskFlags(self.members | {flag})


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

PRIORITY_NONE = 99
PRIORITY_MAX = 99


@dataclass(frozen=True, slots=True)
class Task:
    """
    In-memory representation of one task line.

    Notes:
    - priority 0 is the most urgent; PRIORITY_NONE means "not set".
    - other_stats maps goal names to (goal, accumulated, context) stats.
      It is stored as a read-only view and left out of the hash.
    """

    name: str
    flags: TaskFlags = field(default_factory=TaskFlags)

    # Prefix descriptor
    day_stat: Optional[Stat] = None
    accum_stat: Optional[Stat] = None
    context_stat: Optional[Stat] = None

    # Suffix descriptor
    note_link: str = ""
    priority: int = PRIORITY_NONE
    due_date: Optional[AnyDateCode] = None
    hard_date: Optional[AnyDateCode] = None
    other_stats: Mapping[str, StatTuple] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.other_stats, MappingProxyType):
            object.__setattr__(self, "other_stats", MappingProxyType(dict(self.other_stats)))

    # -----------------------------------------------------------------
    # Convenience properties
    # -----------------------------------------------------------------

    @property
    def is_done(self) -> bool:
        return TaskFlag.DONE in self.flags

    @property
    def has_priority(self) -> bool:
        return self.priority != PRIORITY_NONE

    @property
    def prefix_stats(self) -> StatTuple:
        return (self.day_stat, self.accum_stat, self.context_stat)


# ---------------------------------------------------------------------
# Section
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Section:
    """
    A `[specifier]` line and the body lines scoped under it.

    `tab` is the literal whitespace before the opening bracket; it
    defines the indentation scope of the whole section.
    """

    tab: str
    specifier: str
    body: str

    @property
    def lines(self) -> list[str]:
        return self.body.splitlines() if self.body else []


# ---------------------------------------------------------------------
# Block tracker
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BlockTrackerEntry:
    """
    One week of stats (Monday..Sunday) for a named time block.
    """

    name: str
    week_stats: tuple[Stat, ...]

    def __post_init__(self) -> None:
        if len(self.week_stats) != len(Weekday):
            raise ValueError("week_stats must hold one stat per weekday")

    def __getitem__(self, day: Weekday) -> Stat:
        return self.week_stats[day.position]

    def days(self) -> Iterable[tuple[Weekday, Stat]]:
        return zip(Weekday, self.week_stats)
