"""Decode DBC CAN database files into messages, signals and value tables."""

from .core import (
    DBCParser,
    Message,
    MessageIndex,
    NoMessagesError,
    ParseResult,
    Problem,
    Severity,
    Signal,
    parse_dbc,
)

__version__ = "1.0.0"

__all__ = [
    "DBCParser",
    "Message",
    "MessageIndex",
    "NoMessagesError",
    "ParseResult",
    "Problem",
    "Severity",
    "Signal",
    "parse_dbc",
]
