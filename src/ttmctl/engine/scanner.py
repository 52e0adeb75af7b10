# src/ttmctl/engine/scanner.py

"""
Cursor-based string scanner.

A StrScanner owns one immutable text buffer and one cursor into it.
Structural parsers consume elements off the unconsumed window one after
another, which lets them combine small primitives into larger grammars.

Conventions:
- peek_*() returns (consumed_length, value) and never moves the cursor,
- next_*() performs the matching peek and advances by consumed_length,
- a failed peek or next raises Exhausted / NoMatch and leaves the cursor
  untouched.

Moving the cursor outside the buffer is a programming error and raises
ScannerContractError.
"""

from collections.abc import Callable
from typing import Optional, TypeVar

from .errors import Exhausted, NoMatch, ScannerContractError

T = TypeVar("T")

# Given the unconsumed window, return the length of the terminator that
# starts here, or None if the window does not start with one.
Terminator = Callable[[str], Optional[int]]


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


class StrScanner:
    """
    Scanner over a single text buffer.

    >>> scanner = StrScanner("192.168.1.1")
    >>> scanner.next_int(), scanner.next_char(), scanner.next_int()
    (192, '.', 168)
    """

    __slots__ = ("stream", "cur")

    def __init__(self, stream: str) -> None:
        self.stream = stream
        self.cur = 0

    def __repr__(self) -> str:
        return f"StrScanner(cur={self.cur}, remaining={self.remaining!r})"

    # -----------------------------------------------------------------
    # Cursor
    # -----------------------------------------------------------------

    @property
    def remaining(self) -> str:
        return self.stream[self.cur:]

    @property
    def exhausted(self) -> bool:
        return self.cur >= len(self.stream)

    def advance(self, n: int) -> None:
        if n < 0 or self.cur + n > len(self.stream):
            raise ScannerContractError(
                f"cannot advance {n} from {self.cur} in a stream of length {len(self.stream)}"
            )
        self.cur += n

    def rewind(self, n: int) -> None:
        if n < 0 or n > self.cur:
            raise ScannerContractError(f"cannot rewind {n} from {self.cur}")
        self.cur -= n

    # -----------------------------------------------------------------
    # Generic elements
    # -----------------------------------------------------------------

    def peek(self, parse_next: Callable[[str], tuple[int, T]]) -> tuple[int, T]:
        """
        Run `parse_next` on the unconsumed window.

        `parse_next` returns how much of the window it consumed along with
        the parsed element, and raises on failure.
        """
        n, elem = parse_next(self.remaining)
        if n < 0 or self.cur + n > len(self.stream):
            raise ScannerContractError(f"element parser consumed {n} characters")
        return n, elem

    def next(self, parse_next: Callable[[str], tuple[int, T]]) -> T:
        n, elem = self.peek(parse_next)
        self.advance(n)
        return elem

    def match_next(self, literal: str) -> bool:
        """
        Consume `literal` if the window starts with it.
        """
        if self.stream.startswith(literal, self.cur):
            self.advance(len(literal))
            return True
        return False

    # -----------------------------------------------------------------
    # Tokens
    # -----------------------------------------------------------------

    def peek_token(self, end: Terminator) -> tuple[int, str, str]:
        """
        Return (consumed_length, token, terminator) without advancing.

        The token runs up to the first position where `end` recognises a
        terminator. The last token of the stream has an empty terminator.
        """
        if self.exhausted:
            raise Exhausted(self.remaining, "no token left")

        for i in range(self.cur, len(self.stream)):
            term_len = end(self.stream[i:])
            if term_len is not None:
                token = self.stream[self.cur:i]
                sep = self.stream[i:i + term_len]
                return (i - self.cur) + term_len, token, sep

        return len(self.stream) - self.cur, self.remaining, ""

    def next_token(self, end: Terminator) -> tuple[str, str]:
        """
        Scan the next token and its terminator.

        >>> scanner = StrScanner("Comma, Separated, Values!, 999")
        >>> is_sep = lambda s: 1 if s.startswith(",") else None
        >>> scanner.next_token(is_sep)
        ('Comma', ',')
        >>> scanner.next_token(is_sep)
        (' Separated', ',')
        """
        n, token, sep = self.peek_token(end)
        self.advance(n)
        return token, sep

    def peek_word(self) -> tuple[int, str]:
        window = self.remaining
        if not window.strip():
            raise Exhausted(window, "no word left")

        start = len(window) - len(window.lstrip())
        i = start
        while i < len(window) and not window[i].isspace():
            i += 1

        word = window[start:i]
        if i < len(window):
            # the single whitespace character ending the word is consumed too
            i += 1
        return i, word

    def next_word(self) -> str:
        """
        >>> scanner = StrScanner("   Trim   your spaces!   ")
        >>> [scanner.next_word() for _ in range(3)]
        ['Trim', 'your', 'spaces!']
        """
        n, word = self.peek_word()
        self.advance(n)
        return word

    def peek_line(self) -> tuple[int, str]:
        """
        Return the next `\\n`-delimited line with trailing whitespace
        (including `\\r`) trimmed. The newline itself is consumed.
        """
        if self.exhausted:
            raise Exhausted("", "no line left")

        i = self.stream.find("\n", self.cur)
        if i < 0:
            return len(self.stream) - self.cur, self.remaining.rstrip()
        return (i - self.cur) + 1, self.stream[self.cur:i].rstrip()

    def next_line(self) -> str:
        n, line = self.peek_line()
        self.advance(n)
        return line

    # -----------------------------------------------------------------
    # Scalars
    # -----------------------------------------------------------------

    def peek_char(self) -> tuple[int, str]:
        if self.exhausted:
            raise Exhausted("", "no character left")
        return 1, self.stream[self.cur]

    def next_char(self) -> str:
        n, c = self.peek_char()
        self.advance(n)
        return c

    def peek_int(self) -> tuple[int, int]:
        """
        Scan `-?[0-9]+` greedily without advancing.

        The integer does not need to be separated from what follows it.
        """
        if self.exhausted:
            raise Exhausted("", "no integer left")

        i = self.cur
        sign = 1
        if self.stream[i] == "-":
            sign = -1
            i += 1

        start = i
        while i < len(self.stream) and _is_digit(self.stream[i]):
            i += 1

        if i == start:
            raise NoMatch(self.remaining[:16], "expected an integer")

        return i - self.cur, sign * int(self.stream[start:i])

    def next_int(self) -> int:
        """
        >>> StrScanner("100pancakes!").next_int()
        100
        """
        n, value = self.peek_int()
        self.advance(n)
        return value
