import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, Callable, Union

logger = logging.getLogger(__name__)

# Returned by character reads past the end of input
NUL = 0

DIGITS = frozenset(b"0123456789")
LETTERS = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
WHITESPACE = frozenset(b" \t\n\x0c\r")  # no vertical tab
OPERATORS = frozenset(b"+-*/")


def is_digit(char: int) -> bool:
    return char in DIGITS


def is_alpha(char: int) -> bool:
    return char in LETTERS


def is_whitespace(char: int) -> bool:
    return char in WHITESPACE


def is_operator(char: int) -> bool:
    """True for the single-byte arithmetic operators + - * /"""
    return char in OPERATORS


class CharacterSource(ABC):
    """Forward-only cursor over input bytes with one byte of lookahead

    Subclasses provide byte access and end detection; run consumption and
    whitespace skipping are shared.
    """

    @property
    @abstractmethod
    def position(self) -> int:
        """Offset of the current byte"""

    @abstractmethod
    def current_char(self) -> int:
        """Byte at the cursor, NUL past the end"""

    @abstractmethod
    def next_char(self) -> int:
        """Byte one past the cursor, NUL past the end"""

    @abstractmethod
    def advance(self) -> None:
        """Move the cursor forward by one byte"""

    @abstractmethod
    def is_exhausted(self) -> bool:
        """True when no unread bytes remain"""

    @abstractmethod
    def is_at_end(self) -> bool:
        """True when fewer than two unread bytes remain"""

    def consume_while(self, condition: Callable[[int], bool]) -> bytes:
        """Consume bytes while condition is true and return them"""
        run = bytearray()
        while not self.is_exhausted() and condition(self.current_char()):
            run.append(self.current_char())
            self.advance()
        return bytes(run)

    def skip_whitespace(self) -> bool:
        """Skip ASCII whitespace, reporting whether anything was skipped"""
        skipped = False
        while not self.is_exhausted() and is_whitespace(self.current_char()):
            skipped = True
            self.advance()
        return skipped


class BufferSource(CharacterSource):
    """Character source over an in-memory byte buffer"""

    def __init__(self, text: Union[str, bytes, bytearray]):
        if isinstance(text, str):
            # Non-ASCII text turns into bytes no classifier accepts
            text = text.encode("utf-8")
        elif not isinstance(text, (bytes, bytearray)):
            raise TypeError(f"expected str or bytes, got {type(text).__name__}")
        self.buffer = bytes(text)
        self.current = 0
        self.next = 1

    @property
    def position(self) -> int:
        return self.current

    def current_char(self) -> int:
        if self.current >= len(self.buffer):
            return NUL
        return self.buffer[self.current]

    def next_char(self) -> int:
        if self.next >= len(self.buffer):
            return NUL
        return self.buffer[self.next]

    def advance(self) -> None:
        self.current += 1
        self.next += 1

    def is_exhausted(self) -> bool:
        return self.current >= len(self.buffer)

    def is_at_end(self) -> bool:
        return self.current + 1 >= len(self.buffer)

    def __repr__(self) -> str:
        return f"BufferSource({self.buffer!r}, current={self.current})"


class StreamSource(CharacterSource):
    """Character source reading a binary stream in chunks on demand

    Only the unread tail of the stream is kept in memory. The stream is
    never closed here; whoever opened it closes it.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = 4096):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.stream = stream
        self.chunk_size = chunk_size
        self.window = bytearray()
        self.base = 0  # stream offset of window[0]
        self.current = 0
        self.next = 1
        self.drained = False

    @property
    def position(self) -> int:
        return self.current

    def _fill(self, offset: int) -> bool:
        """Read until the byte at offset is buffered, False if the stream ends first"""
        while offset - self.base >= len(self.window):
            if self.drained:
                return False
            chunk = self.stream.read(self.chunk_size)
            if not chunk:
                self.drained = True
                logger.debug(f"Stream drained after {self.base + len(self.window)} bytes")
                return False
            self.window.extend(chunk)
        return True

    def _char_at(self, offset: int) -> int:
        if not self._fill(offset):
            return NUL
        return self.window[offset - self.base]

    def current_char(self) -> int:
        return self._char_at(self.current)

    def next_char(self) -> int:
        return self._char_at(self.next)

    def advance(self) -> None:
        self.current += 1
        self.next += 1
        consumed = self.current - self.base
        if consumed >= self.chunk_size and consumed <= len(self.window):
            del self.window[:consumed]
            self.base = self.current

    def is_exhausted(self) -> bool:
        return not self._fill(self.current)

    def is_at_end(self) -> bool:
        return not self._fill(self.current + 1)
