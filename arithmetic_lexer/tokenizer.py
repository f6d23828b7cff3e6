import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from .lexer import (
    BufferSource,
    CharacterSource,
    StreamSource,
    is_alpha,
    is_digit,
    is_operator,
)

logger = logging.getLogger(__name__)

OPEN_PAREN = ord("(")
CLOSE_PAREN = ord(")")


class LexerError(ValueError):
    """Base class for failures while tokenizing"""


class UnrecognizedCharacter(LexerError):
    """Current byte does not start any known token and is not whitespace"""

    def __init__(self, char: int, offset: int):
        self.char = char
        self.offset = offset
        shown = repr(chr(char)) if char < 0x80 else f"0x{char:02X}"
        super().__init__(f"Unrecognized character {shown} at offset {offset}")


class TokenKind(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"


@dataclass(frozen=True)
class Token:
    """Lexical unit carrying the exact bytes it was scanned from

    Numbers are not converted to values here; that is left to the parser.
    The offset is informational and ignored by equality.
    """

    kind: TokenKind
    text: bytes
    offset: int = field(default=-1, compare=False)

    def __post_init__(self):
        if self.kind is TokenKind.NUMBER:
            if not self.text or not all(is_digit(char) for char in self.text):
                raise ValueError(f"Number token must be ASCII digits, got {self.text!r}")
        elif self.kind is TokenKind.OPERATOR:
            if len(self.text) != 1 or not is_operator(self.text[0]):
                raise ValueError(f"Operator token must be one of +-*/, got {self.text!r}")
        elif self.kind is TokenKind.OPEN_PAREN and self.text != b"(":
            raise ValueError(f"Open paren token must be '(', got {self.text!r}")
        elif self.kind is TokenKind.CLOSE_PAREN and self.text != b")":
            raise ValueError(f"Close paren token must be ')', got {self.text!r}")

    @classmethod
    def number(cls, text: bytes, offset: int = -1) -> "Token":
        return cls(TokenKind.NUMBER, text, offset)

    @classmethod
    def operator(cls, text: bytes, offset: int = -1) -> "Token":
        return cls(TokenKind.OPERATOR, text, offset)

    @classmethod
    def open_paren(cls, offset: int = -1) -> "Token":
        return cls(TokenKind.OPEN_PAREN, b"(", offset)

    @classmethod
    def close_paren(cls, offset: int = -1) -> "Token":
        return cls(TokenKind.CLOSE_PAREN, b")", offset)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


class ScanKind(Enum):
    TOKEN = "token"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class Scan:
    """Outcome of one classification step"""

    kind: ScanKind
    token: Optional[Token] = None
    run: bytes = b""  # discarded bytes for SKIPPED
    error: Optional[UnrecognizedCharacter] = None


class EndPolicy(Enum):
    """When the driving loop should stop"""

    EXHAUSTED = "exhausted"  # every byte has been read
    NEAR_END = "near_end"  # fewer than two bytes remain, may drop a trailing byte


class Tokenizer:
    """Splits an arithmetic expression into numbers, operators and parentheses

    Usage::

        tokenizer = Tokenizer("12 + (3*4)")
        while not tokenizer.eof():
            token = tokenizer.next_token()
            if token is not None:
                ...

    or simply iterate over the tokenizer.
    """

    def __init__(
        self,
        source,
        *,
        parentheses: bool = True,
        end_policy: EndPolicy = EndPolicy.EXHAUSTED,
    ):
        if isinstance(source, CharacterSource):
            self.source = source
        elif isinstance(source, (str, bytes, bytearray)):
            self.source = BufferSource(source)
        elif hasattr(source, "read"):
            self.source = StreamSource(source)
        else:
            raise TypeError(
                f"cannot tokenize {type(source).__name__}; "
                "expected str, bytes, a binary stream or a CharacterSource"
            )
        self.parentheses = parentheses
        self.end_policy = EndPolicy(end_policy)

    def scan(self) -> Scan:
        """Classify the next run of input without raising on bad bytes"""
        self.source.skip_whitespace()
        if self.source.is_exhausted():
            # Trailing whitespace
            return Scan(ScanKind.SKIPPED)

        offset = self.source.position
        char = self.source.current_char()

        # Order matters: first matching branch wins
        if is_digit(char):
            run = self.source.consume_while(is_digit)
            return Scan(ScanKind.TOKEN, token=Token.number(run, offset))
        if is_alpha(char):
            run = self.source.consume_while(is_alpha)
            logger.debug(f"Skipped alphabetic run {run!r} at offset {offset}")
            return Scan(ScanKind.SKIPPED, run=run)
        if is_operator(char):
            self.source.advance()
            return Scan(ScanKind.TOKEN, token=Token.operator(bytes([char]), offset))
        if self.parentheses and char == OPEN_PAREN:
            self.source.advance()
            return Scan(ScanKind.TOKEN, token=Token.open_paren(offset))
        if self.parentheses and char == CLOSE_PAREN:
            self.source.advance()
            return Scan(ScanKind.TOKEN, token=Token.close_paren(offset))

        logger.debug(f"Unrecognized byte 0x{char:02X} at offset {offset}")
        return Scan(ScanKind.ERROR, error=UnrecognizedCharacter(char, offset))

    def next_token(self) -> Optional[Token]:
        """Return the next token, None for a skipped run

        Raises UnrecognizedCharacter when the input cannot be tokenized; the
        caller should abandon the whole input.
        """
        result = self.scan()
        if result.kind is ScanKind.ERROR:
            raise result.error
        return result.token

    def eof(self) -> bool:
        if self.end_policy is EndPolicy.NEAR_END:
            return self.source.is_at_end()
        return self.source.is_exhausted()

    def __iter__(self) -> Iterator[Token]:
        while not self.eof():
            token = self.next_token()
            if token is not None:
                yield token

    def tokenize(self) -> List[Token]:
        """Tokenize the remaining input and return the token list"""
        return list(self)


def tokenize(text, **options) -> List[Token]:
    """
    Tokenize an arithmetic expression.

    Args:
        text: expression as str, bytes or a binary stream
        **options: passed through to Tokenizer (parentheses, end_policy)

    Returns:
        List of tokens in input order

    Raises:
        UnrecognizedCharacter: on a byte that starts no token

    Examples:
        >>> [t.text for t in tokenize("12 + 3")]
        [b'12', b'+', b'3']
        >>> tokenize("")
        []
    """
    return Tokenizer(text, **options).tokenize()
