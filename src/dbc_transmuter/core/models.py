"""
Data models for decoded DBC databases.

These dataclasses provide the in-memory representation of:
- Messages (BO_ records) and the signals they own (SG_ records)
- Value tables (VAL_ records) before they are linked to signals
- Problems collected while decoding
"""

import math
from dataclasses import dataclass, field
from typing import Any, Optional
from enum import Enum

from .can_id import EXTENDED_ID_MASK


class Severity(Enum):
    """Problem severity enumeration."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ByteOrder(Enum):
    """Signal byte order as encoded by the DBC ``@`` flag."""

    LITTLE_ENDIAN = "little_endian"  # @1
    BIG_ENDIAN = "big_endian"  # @0


class MultiplexerRole(Enum):
    """Role of a signal in a multiplexed message."""

    NONE = "none"
    SWITCH = "switch"  # "M"
    MULTIPLEXED = "multiplexed"  # "m<N>"


@dataclass(frozen=True, slots=True)
class Problem:
    """
    A single diagnostic raised while decoding.

    Frozen because problems are only ever appended, never edited.
    """

    severity: Severity
    line: int  # 1-based line in the DBC text
    description: str

    def __str__(self) -> str:
        return f"{self.severity.value} (line {self.line}): {self.description}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "line": self.line,
            "description": self.description,
        }


@dataclass
class Signal:
    """
    DBC signal definition.

    Factor, offset and range are stored as read from the file; they are
    never applied to raw values here.
    """

    name: str
    start_bit: Optional[int]
    bit_length: Optional[int]
    byte_order: Optional[ByteOrder]
    is_signed: Optional[bool]
    factor: float
    offset: float
    minimum: float
    maximum: float
    unit: str = ""
    multiplexer_role: MultiplexerRole = MultiplexerRole.NONE
    multiplexer_index: Optional[int] = None
    label: str = ""  # <message label>_<signal label>
    receivers: tuple[str, ...] = ()
    states: dict[int, str] = field(default_factory=dict)  # Filled by the linker
    source_line: int = 0

    @property
    def is_multiplexer(self) -> bool:
        """Check if this signal is the multiplexer switch of its message."""
        return self.multiplexer_role is MultiplexerRole.SWITCH

    @property
    def is_multiplexed(self) -> bool:
        """Check if this signal only exists for one multiplexer value."""
        return self.multiplexer_role is MultiplexerRole.MULTIPLEXED

    @property
    def is_enum(self) -> bool:
        """Check if this signal has discrete state labels."""
        return len(self.states) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "multiplexer_role": self.multiplexer_role.value,
            "multiplexer_index": self.multiplexer_index,
            "start_bit": self.start_bit,
            "bit_length": self.bit_length,
            "byte_order": self.byte_order.value if self.byte_order else None,
            "is_signed": self.is_signed,
            "factor": _json_float(self.factor),
            "offset": _json_float(self.offset),
            "minimum": _json_float(self.minimum),
            "maximum": _json_float(self.maximum),
            "unit": self.unit,
            "receivers": list(self.receivers),
            "states": {str(raw): text for raw, text in self.states.items()},
            "source_line": self.source_line,
        }


@dataclass
class Message:
    """
    DBC message definition containing all its signals.

    priority, parameter_group_number and source_address are only set for
    extended frames whose identifier could be decomposed.
    """

    can_id: Optional[int]  # Raw identifier as written in the file
    name: str
    label: str
    data_length: Optional[int]  # DLC in bytes
    is_extended_frame: bool = False
    priority: Optional[int] = None
    parameter_group_number: Optional[int] = None
    source_address: Optional[int] = None
    signals: list[Signal] = field(default_factory=list)
    source_line: int = 0

    @property
    def frame_id(self) -> Optional[int]:
        """Return the identifier as it appears on the bus (DBC flag bit removed)."""
        if self.can_id is None:
            return None
        return self.can_id & EXTENDED_ID_MASK

    @property
    def hex_id(self) -> str:
        """Return message ID as hex string."""
        if self.frame_id is None:
            return "?"
        return f"0x{self.frame_id:03X}"

    def get_signal(self, name: str) -> Optional[Signal]:
        """Return the first signal with the given name, if any."""
        return next((s for s in self.signals if s.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "can_id": self.can_id,
            "name": self.name,
            "label": self.label,
            "priority": self.priority,
            "parameter_group_number": self.parameter_group_number,
            "source_address": self.source_address,
            "is_extended_frame": self.is_extended_frame,
            "data_length": self.data_length,
            "signals": [s.to_dict() for s in self.signals],
            "source_line": self.source_line,
        }


@dataclass(frozen=True, slots=True)
class ValueTableEntry:
    """
    Value table read from a VAL_ record.

    Refers to its message and signal by key only; consumed by the linker
    and never returned to callers.
    """

    message_link: Optional[int]  # CAN ID
    signal_link: str  # Signal name
    states: dict[int, str]
    source_line: int = 0


@dataclass
class ParseResult:
    """Messages in file order plus problems in detection order."""

    messages: list[Message] = field(default_factory=list)
    problems: list[Problem] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(p.severity is Severity.ERROR for p in self.problems)

    def problems_by_severity(self, severity: Severity) -> list[Problem]:
        return [p for p in self.problems if p.severity is severity]

    def to_dict(self) -> dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "problems": [p.to_dict() for p in self.problems],
        }


def _json_float(value: float) -> Optional[float]:
    # NaN is not valid JSON
    if value is None or math.isnan(value):
        return None
    return value
