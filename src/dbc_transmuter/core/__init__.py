"""Core modules for DBC tokenizing, record extraction and linking."""

from .models import (
    ByteOrder,
    Message,
    MultiplexerRole,
    ParseResult,
    Problem,
    Severity,
    Signal,
    ValueTableEntry,
)
from .errors import CanIdError, DBCError, MultiplexerError, NoMessagesError
from .can_id import CanIdParts, build_can_id, split_can_id
from .linker import MessageIndex, link_value_tables
from .parser import DBCParser, parse_dbc

__all__ = [
    "ByteOrder",
    "Message",
    "MultiplexerRole",
    "ParseResult",
    "Problem",
    "Severity",
    "Signal",
    "ValueTableEntry",
    "CanIdError",
    "DBCError",
    "MultiplexerError",
    "NoMessagesError",
    "CanIdParts",
    "build_can_id",
    "split_can_id",
    "MessageIndex",
    "link_value_tables",
    "DBCParser",
    "parse_dbc",
]
