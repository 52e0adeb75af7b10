# src/ttmctl/engine/errors.py

"""
Error taxonomy for the notation parsers.

Every recoverable failure is a NotationError subclass carrying the
offending text and a short reason. Enclosing grammars wrap field-level
failures into their own kind (e.g. a bad `due:` value surfaces as
InvalidDueDate) so callers can report the failing sub-field from the
exception type alone.

Cursor contract violations are not part of this taxonomy: they raise
ScannerContractError and indicate a bug in the calling parser.
"""

from dataclasses import dataclass


# ---------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------

@dataclass(eq=False, slots=True)
class NotationError(Exception):
    """
    Raised when a piece of notation text cannot be parsed.
    """

    text: str
    reason: str = ""

    kind = "invalid notation"

    def __str__(self) -> str:
        msg = f"{self.kind}: '{self.text}'"
        if self.reason:
            msg += f" ({self.reason})"
        return msg


class ScannerContractError(RuntimeError):
    """
    Raised when a caller moves a scanner cursor outside its buffer.
    """


# ---------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------

class ScanError(NotationError):
    kind = "scan failed"


class NoMatch(ScanError):
    kind = "no match"


class Exhausted(ScanError):
    kind = "stream exhausted"


# ---------------------------------------------------------------------
# Field grammars
# ---------------------------------------------------------------------

class InvalidInteger(NotationError):
    kind = "invalid integer"


class NoStatVariant(NotationError):
    kind = "no variant of Stat is satisfied by"


class TooManySlots(NotationError):
    kind = "too many comma-separated slots"


class InvalidDateCode(NotationError):
    kind = "could not parse as a DateCode"


class InvalidWeekday(NotationError):
    kind = "invalid weekday"


class InvalidSeason(NotationError):
    kind = "invalid season code"


# ---------------------------------------------------------------------
# Task grammar
# ---------------------------------------------------------------------

class UnbalancedParenthesis(NotationError):
    kind = "unbalanced parenthesis"


class NoTaskDescriptorsFound(NotationError):
    kind = "no task descriptors found"


class InvalidTaskFlags(NotationError):
    kind = "invalid task flags"


class InvalidPrefixDescriptor(NotationError):
    kind = "invalid prefix descriptor"


class InvalidSuffixDescriptor(NotationError):
    kind = "invalid suffix descriptor"


class InvalidDueDate(InvalidSuffixDescriptor):
    kind = "invalid due date"


class InvalidHardDate(InvalidSuffixDescriptor):
    kind = "invalid hard date"


@dataclass(eq=False, slots=True)
class InvalidGoalStat(InvalidSuffixDescriptor):
    goal: str = ""

    kind = "invalid goal stat"

    def __str__(self) -> str:
        return f"{self.kind} for goal '{self.goal}': '{self.text}' ({self.reason})"


class InvalidPriorityValue(NotationError):
    kind = "invalid priority value"


@dataclass(eq=False, slots=True)
class UnsupportedDescriptorKey(NotationError):
    key: str = ""
    field: str = ""

    kind = "unsupported descriptor key"

    def __str__(self) -> str:
        return f"{self.kind} '{self.key}' in '{self.field}'"


# ---------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------

class InvalidSpecifier(NotationError):
    kind = "input does not start with a section specifier"


# ---------------------------------------------------------------------
# Block tracker
# ---------------------------------------------------------------------

@dataclass(eq=False, slots=True)
class InvalidTrackerStat(NotationError):
    index: int = 0

    kind = "invalid tracker stat"

    def __str__(self) -> str:
        return f"{self.kind} at column {self.index}: '{self.text}' ({self.reason})"


class TooManyEntryTokens(NotationError):
    kind = "too many block tracker tokens"


class TooFewEntryTokens(NotationError):
    kind = "too few block tracker tokens"
