"""Exceptions raised by the DBC decode pipeline."""


class DBCError(Exception):
    """Base class for all DBC decoding errors."""


class NoMessagesError(DBCError):
    """
    Raised when a DBC text yields no messages at all.

    This is the only failure that escapes the parser. Everything else
    is downgraded to a Problem in the diagnostics log.
    """


class CanIdError(DBCError, ValueError):
    """Raised when a CAN identifier cannot be decomposed."""


class MultiplexerError(DBCError, ValueError):
    """Raised when an SG_ multiplexer indicator has an unknown shape."""
