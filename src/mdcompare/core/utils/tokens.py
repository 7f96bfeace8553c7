"""Tokenizer: split text into comparable line or word units"""

import re

from mdcompare.core.errors import InvalidInputError
from mdcompare.core.models import Granularity, parse_granularity


_WHITESPACE = re.compile(r"(\s+)")


def tokenize(text: str, granularity: Granularity) -> list[str]:
    """Split text into tokens for the given granularity.

    Lines: split on '\\n' only; a terminal newline leaves a trailing '' token.
    Words: words and whitespace runs alternate as separate tokens; empty tokens dropped.
    Empty text yields [] in both modes.
    """
    granularity = parse_granularity(granularity)
    if not isinstance(text, str):
        raise InvalidInputError(f"Expected str content, got {type(text).__name__}")
    if not text:
        return []
    if granularity == Granularity.lines:
        return text.split("\n")
    return [t for t in _WHITESPACE.split(text) if t]


def is_unit(token: str, granularity: Granularity) -> bool:
    """Whitespace separator tokens are not counted as words; every line counts."""
    return granularity == Granularity.lines or not token.isspace()


def unit_count(tokens: list[str], granularity: Granularity) -> int:
    return sum(1 for t in tokens if is_unit(t, granularity))


def join_tokens(tokens: list[str], granularity: Granularity) -> str:
    """Inverse of tokenize: lines rejoin with '\\n', words concatenate as-is."""
    sep = "\n" if granularity == Granularity.lines else ""
    return sep.join(tokens)
