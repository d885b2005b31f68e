"""
Line tokenizer for DBC text.

Splits raw text into physical lines and each line into whitespace
delimited tokens. A double-quoted span is kept as a single token,
quotes included, so that units and state labels containing spaces
survive tokenization.
"""

import re
from typing import Iterator

# Quoted span (backslash escapes allowed inside) or any run of non-whitespace
TOKEN_PATTERN = re.compile(r'"(?:[^"\\]|\\.)*"|\S+')

_ESCAPE_PATTERN = re.compile(r"\\(.)")


def split_lines(text: str) -> list[str]:
    """
    Split text into physical lines.

    Index ``i`` of the result is line number ``i + 1`` of the input, for
    ``\\n``, ``\\r\\n`` and ``\\r`` terminators alike.
    """
    return re.split(r"\r\n|\r|\n", text)


def tokenize_line(line: str) -> list[str]:
    """
    Tokenize a single DBC line.

    Example:
        >>> tokenize_line(' SG_ Speed : 0|16@1+ (0.1,0) [0|250] "km h" ECU')
        ['SG_', 'Speed', ':', '0|16@1+', '(0.1,0)', '[0|250]', '"km h"', 'ECU']
    """
    return TOKEN_PATTERN.findall(line)


def tokenize(text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line_number, tokens)`` for every physical line of text."""
    for index, line in enumerate(split_lines(text)):
        yield index + 1, tokenize_line(line)


def unquote(token: str) -> str:
    """
    Remove surrounding double quotes and resolve backslash escapes.

    Tokens that are not quoted are returned unchanged.
    """
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return _ESCAPE_PATTERN.sub(r"\1", token[1:-1])
    return token
