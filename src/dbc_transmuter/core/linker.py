"""
Second pass: attach VAL_ value tables to the signals they describe.

Value tables are enrichment data, so a table that cannot be linked is
reported as info and skipped; linking never raises.
"""

from typing import TYPE_CHECKING, Iterable, Optional

from ..utils.logging_config import get_logger
from .can_id import EXTENDED_ID_MASK
from .diagnostics import Diagnostics
from .models import Message, Signal, ValueTableEntry

if TYPE_CHECKING:
    import can

logger = get_logger("linker")


class MessageIndex:
    """
    Lookup tables over a decoded message list.

    Provides:
    - Message lookup by raw CAN ID (first message wins on duplicates)
    - Signal lookup by name within a message
    - Resolution of received python-can frames to their definition
    """

    def __init__(self, messages: Iterable[Message]):
        self._by_id: dict[int, Message] = {}
        self._by_frame: dict[tuple[int, bool], Message] = {}
        self._signals: dict[int, dict[str, Signal]] = {}

        for msg in messages:
            if msg.can_id is None:
                continue
            self._by_id.setdefault(msg.can_id, msg)
            self._by_frame.setdefault((msg.frame_id, msg.is_extended_frame), msg)

            signals = self._signals.setdefault(id(msg), {})
            for sig in msg.signals:
                signals.setdefault(sig.name, sig)

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, can_id: int) -> bool:
        return can_id in self._by_id

    def get_message(self, can_id: Optional[int]) -> Optional[Message]:
        """Get message by raw CAN ID."""
        if can_id is None:
            return None
        return self._by_id.get(can_id)

    def get_signal(self, message: Message, name: str) -> Optional[Signal]:
        """Get a signal of an indexed message by name."""
        return self._signals.get(id(message), {}).get(name)

    def for_frame(self, frame: "can.Message") -> Optional[Message]:
        """
        Find the message definition for a frame received from the bus.

        Args:
            frame: python-can message; arbitration_id and is_extended_id are used

        Returns:
            Matching message, or None if the frame is not described
        """
        key = (frame.arbitration_id & EXTENDED_ID_MASK, bool(frame.is_extended_id))
        return self._by_frame.get(key)


def link_value_tables(
    messages: list[Message],
    value_tables: Iterable[ValueTableEntry],
    diagnostics: Diagnostics,
) -> MessageIndex:
    """
    Replace the states of every signal that has a matching value table.

    Args:
        messages: Final message list from the first pass
        value_tables: Pending VAL_ entries in file order
        diagnostics: Log receiving an info problem per unmatched table

    Returns:
        The index built over messages
    """
    index = MessageIndex(messages)
    linked = 0

    for table in value_tables:
        msg = index.get_message(table.message_link)
        if msg is None:
            diagnostics.info(
                table.source_line,
                f"VAL_ line could not be matched to BO_ because CAN ID "
                f"{table.message_link} can not be found in any message. Nothing "
                f"will break, and adding the message later loses no data.",
            )
            continue

        sig = index.get_signal(msg, table.signal_link)
        if sig is None:
            diagnostics.info(
                table.source_line,
                f"VAL_ line could not be matched to SG_ because message "
                f"{msg.name} has no signal named {table.signal_link}. Nothing "
                f"will break, but the signal may be missing from the file.",
            )
            continue

        sig.states = dict(table.states)
        linked += 1

    logger.debug(f"Linked {linked} value tables")
    return index
