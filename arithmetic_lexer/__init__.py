from .lexer import BufferSource, CharacterSource, StreamSource
from .tokenizer import (
    EndPolicy,
    LexerError,
    Scan,
    ScanKind,
    Token,
    TokenKind,
    Tokenizer,
    UnrecognizedCharacter,
    tokenize,
)

__all__ = [
    "BufferSource",
    "CharacterSource",
    "StreamSource",
    "EndPolicy",
    "LexerError",
    "Scan",
    "ScanKind",
    "Token",
    "TokenKind",
    "Tokenizer",
    "UnrecognizedCharacter",
    "tokenize",
]
