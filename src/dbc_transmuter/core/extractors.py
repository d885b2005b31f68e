"""
Field extraction for SG_ and VAL_ records.

Both extractors are pure functions over an already tokenized line. They
never record problems themselves; the record classifier decides what to
report based on what comes back.
"""

import math
import re
from typing import Optional

from .errors import MultiplexerError
from .models import ByteOrder, MultiplexerRole, Signal, ValueTableEntry
from .naming import snake_case
from .tokenizer import unquote

# start|length@order sign, e.g. 8|16@1+
_LAYOUT_PATTERN = re.compile(r"^([0-9]+)\|([0-9]+)@([01])([+-])$")
# (factor,offset)
_SCALE_PATTERN = re.compile(r"^\(([^,]*),([^)]*)\)$")
# [min|max]
_RANGE_PATTERN = re.compile(r"^\[([^|]*)\|([^\]]*)\]$")
_MULTIPLEXED_PATTERN = re.compile(r"^m([0-9]+)$")
# Plain ASCII decimal or 0x-prefixed hexadecimal integer
_INTEGER_PATTERN = re.compile(r"[+-]?(0[xX][0-9a-fA-F]+|[0-9]+)")

SWITCH_TOKEN = "M"


def to_int(token: Optional[str]) -> Optional[int]:
    """
    Convert a token to an integer, accepting a 0x prefix.

    Returns None when the token is missing or not a plain ASCII decimal
    or hexadecimal integer.
    """
    if token is None or _INTEGER_PATTERN.fullmatch(token) is None:
        return None
    return int(token, 0 if "x" in token.lower() else 10)


def to_float(token: Optional[str]) -> float:
    """Convert a token to a float; NaN when it is missing or not a number."""
    if token is None:
        return math.nan
    try:
        return float(token)
    except ValueError:
        return math.nan


def parse_multiplexer(token: Optional[str]) -> tuple[MultiplexerRole, Optional[int]]:
    """
    Parse an SG_ multiplexer indicator.

    Args:
        token: The indicator token, or None when the signal has none

    Returns:
        (role, index); index is only set for multiplexed signals

    Raises:
        MultiplexerError: If the token is neither "M" nor "m<digits>"
    """
    if token is None:
        return MultiplexerRole.NONE, None
    if token == SWITCH_TOKEN:
        return MultiplexerRole.SWITCH, None

    match = _MULTIPLEXED_PATTERN.match(token)
    if match is None:
        raise MultiplexerError(
            f"Multiplexer indicator should be 'M' or 'm<number>', got {token!r}"
        )
    return MultiplexerRole.MULTIPLEXED, int(match.group(1))


def extract_signal(tokens: list[str], message_label: str, line: int = 0) -> Signal:
    """
    Build a Signal from a tokenized SG_ line.

    Expected layout:
        SG_ <name> [M|m<N>] : <start>|<length>@<order><sign> (<factor>,<offset>)
            [<min>|<max>] "<unit>" <receiver>[,<receiver>...]

    Only the multiplexer indicator is strict. Any other field that cannot
    be parsed is stored as a failure value: None for integer and enum
    fields, NaN for floating point ones.

    Args:
        tokens: Tokens of the SG_ line, starting with "SG_"
        message_label: Normalized label of the owning message
        line: 1-based line number, stored on the signal

    Raises:
        MultiplexerError: If the multiplexer indicator is malformed
    """
    name = tokens[1] if len(tokens) > 1 else ""
    body = list(tokens[2:])

    mux_token = None
    if body and body[0] != ":":
        mux_token = body.pop(0)
    role, mux_index = parse_multiplexer(mux_token)

    if body and body[0] == ":":
        body.pop(0)

    layout, scale, limits, unit = (body + [None] * 4)[:4]
    receiver_tokens = body[4:]

    start_bit = bit_length = byte_order = is_signed = None
    layout_match = _LAYOUT_PATTERN.match(layout or "")
    if layout_match:
        start_bit = int(layout_match.group(1))
        bit_length = int(layout_match.group(2))
        byte_order = (
            ByteOrder.LITTLE_ENDIAN
            if layout_match.group(3) == "1"
            else ByteOrder.BIG_ENDIAN
        )
        is_signed = layout_match.group(4) == "-"

    factor = offset = math.nan
    scale_match = _SCALE_PATTERN.match(scale or "")
    if scale_match:
        factor = to_float(scale_match.group(1))
        offset = to_float(scale_match.group(2))

    minimum = maximum = math.nan
    range_match = _RANGE_PATTERN.match(limits or "")
    if range_match:
        minimum = to_float(range_match.group(1))
        maximum = to_float(range_match.group(2))

    receivers = tuple(
        r.strip() for r in ",".join(receiver_tokens).split(",") if r.strip()
    )

    return Signal(
        name=name,
        start_bit=start_bit,
        bit_length=bit_length,
        byte_order=byte_order,
        is_signed=is_signed,
        factor=factor,
        offset=offset,
        minimum=minimum,
        maximum=maximum,
        unit=unquote(unit) if unit is not None else "",
        multiplexer_role=role,
        multiplexer_index=mux_index,
        label=f"{message_label}_{snake_case(name)}",
        receivers=receivers,
        source_line=line,
    )


def invalid_fields(signal: Signal) -> list[str]:
    """Return the names of signal fields that hold a failure value."""
    failed = []
    if signal.start_bit is None:
        failed.append("bit layout")
    for field_name in ("factor", "offset", "minimum", "maximum"):
        if math.isnan(getattr(signal, field_name)):
            failed.append(field_name)
    return failed


def extract_value_table(tokens: list[str], line: int = 0) -> ValueTableEntry:
    """
    Build a ValueTableEntry from a tokenized VAL_ line.

    Layout: VAL_ <can_id> <signal> <value> "<label>" ... ;

    Pairs are read left to right. A trailing token without a partner
    (normally the ";") is dropped, pairs whose value is not an integer
    are skipped, and a repeated value keeps the last label.
    """
    message_link = to_int(tokens[1]) if len(tokens) > 1 else None
    signal_link = tokens[2] if len(tokens) > 2 else ""

    rest = tokens[3:]
    if len(rest) % 2:
        rest = rest[:-1]

    states: dict[int, str] = {}
    for value_token, label_token in zip(rest[0::2], rest[1::2]):
        value = to_int(value_token)
        if value is None:
            continue
        states[value] = unquote(label_token)

    return ValueTableEntry(
        message_link=message_link,
        signal_link=signal_link,
        states=states,
        source_line=line,
    )
