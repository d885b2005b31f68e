"""
CAN identifier decomposition.

Extended (29-bit) identifiers are split using the parameter group
addressing layout common to heavy-vehicle networks:

    bits 26-28  priority                 (3 bits)
    bits  8-25  parameter group number   (18 bits)
    bits  0-7   source address           (8 bits)

Standard (11-bit) identifiers are not decomposed further.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import CanIdError

STANDARD_ID_BITS = 11
EXTENDED_ID_MASK = 0x1FFFFFFF
# DBC files mark extended identifiers by setting bit 31
DBC_EXTENDED_FLAG = 0x80000000

PRIORITY_SHIFT = 26
PRIORITY_MASK = 0x7
PGN_SHIFT = 8
PGN_MASK = 0x3FFFF
SOURCE_MASK = 0xFF


@dataclass(frozen=True, slots=True)
class CanIdParts:
    """Result of decomposing a CAN identifier."""

    is_extended_frame: bool
    priority: Optional[int] = None
    parameter_group_number: Optional[int] = None
    source_address: Optional[int] = None


def split_can_id(can_id: int) -> CanIdParts:
    """
    Decompose a CAN identifier into priority, PGN and source address.

    Args:
        can_id: Non-negative identifier as written in the DBC file

    Returns:
        CanIdParts; only ``is_extended_frame`` is set for standard frames

    Raises:
        CanIdError: If can_id is not a non-negative integer
    """
    # bool is an int subclass but never a valid identifier
    if not isinstance(can_id, int) or isinstance(can_id, bool):
        raise CanIdError(f"CAN ID is not an integer: {can_id!r}")
    if can_id < 0:
        raise CanIdError(f"CAN ID is negative: {can_id}")

    if can_id.bit_length() <= STANDARD_ID_BITS:
        return CanIdParts(is_extended_frame=False)

    return CanIdParts(
        is_extended_frame=True,
        priority=(can_id >> PRIORITY_SHIFT) & PRIORITY_MASK,
        parameter_group_number=(can_id >> PGN_SHIFT) & PGN_MASK,
        source_address=can_id & SOURCE_MASK,
    )


def build_can_id(
    priority: int,
    parameter_group_number: int,
    source_address: int,
    dbc_flag: bool = False,
) -> int:
    """
    Assemble an extended identifier from its parts.

    Inverse of split_can_id for extended identifiers. Set dbc_flag to get
    the identifier in the form DBC files store it (bit 31 set); without it
    a result that fits in 11 bits reads back as a standard frame.

    Raises:
        CanIdError: If a part does not fit its bit field
    """
    for value, mask, what in (
        (priority, PRIORITY_MASK, "priority"),
        (parameter_group_number, PGN_MASK, "parameter group number"),
        (source_address, SOURCE_MASK, "source address"),
    ):
        if not 0 <= value <= mask:
            raise CanIdError(f"{what} out of range: {value}")

    can_id = (
        (priority << PRIORITY_SHIFT)
        | (parameter_group_number << PGN_SHIFT)
        | source_address
    )
    if dbc_flag:
        can_id |= DBC_EXTENDED_FLAG
    return can_id
