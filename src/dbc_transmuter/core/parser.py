"""
DBC text parser.

Walks the tokenized lines of a DBC file, builds messages from BO_ records,
attaches signals from SG_ records, collects VAL_ value tables and links
them in a second pass. Malformed input is reported as Problems instead of
aborting; only a text without any message is fatal.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from ..utils.logging_config import get_logger
from .can_id import split_can_id
from .diagnostics import Diagnostics
from .errors import CanIdError, MultiplexerError, NoMessagesError
from .extractors import extract_signal, extract_value_table, invalid_fields, to_int
from .linker import link_value_tables
from .models import Message, ParseResult, ValueTableEntry
from .naming import snake_case
from .tokenizer import tokenize

logger = get_logger("parser")


class RecordKind(Enum):
    """Record kinds keyed by the leading token of a line."""

    MESSAGE = "BO_"
    SIGNAL = "SG_"
    VALUE_TABLE = "VAL_"
    SIGNAL_VALUE_TYPE = "SIG_VALTYPE_"
    IGNORED = None

    @classmethod
    def from_token(cls, token: str) -> "RecordKind":
        try:
            return cls(token)
        except ValueError:
            return cls.IGNORED


class ClassifierState(Enum):
    """Whether a message is currently collecting signals."""

    IDLE = "idle"
    IN_MESSAGE = "in_message"


@dataclass
class ParseContext:
    """
    Mutable state of a single parse.

    Created fresh for every call to DBCParser.parse and handed to each
    record handler, so a parser instance carries no state between texts.
    """

    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    current: Optional[Message] = None  # Message accepting SG_ lines
    messages: list[Message] = field(default_factory=list)
    value_tables: list[ValueTableEntry] = field(default_factory=list)

    @property
    def state(self) -> ClassifierState:
        if self.current is None:
            return ClassifierState.IDLE
        return ClassifierState.IN_MESSAGE

    def close_message(self) -> None:
        """
        Move the open message, if any, to the message list.

        An empty message is reported on its own BO_ line, not on the line
        that closed it.
        """
        if self.current is None:
            return
        if not self.current.signals:
            self.diagnostics.info(
                self.current.source_line,
                "BO_ does not contain any SG_ lines; message does not have any parameters.",
            )
        self.messages.append(self.current)
        self.current = None


class DBCParser:
    """
    Parser for DBC database text.

    Handles BO_, SG_ and VAL_ records. SIG_VALTYPE_ (floating point
    signal types) is recognized but ignored, every other record kind is
    skipped silently.
    """

    MESSAGE_TOKENS = 5  # BO_ <id> <name>: <dlc> <transmitter>
    SIGNAL_TOKENS = (8, 9)  # 9 with a multiplexer indicator
    VALUE_TABLE_MIN_TOKENS = 7  # Anything shorter holds a single state

    def __init__(self):
        self._handlers = {
            RecordKind.MESSAGE: self._handle_message,
            RecordKind.SIGNAL: self._handle_signal,
            RecordKind.VALUE_TABLE: self._handle_value_table,
            RecordKind.SIGNAL_VALUE_TYPE: self._handle_ignored,
            RecordKind.IGNORED: self._handle_ignored,
        }

    def parse(self, text: str) -> ParseResult:
        """
        Decode DBC text.

        Args:
            text: Full content of a DBC file

        Returns:
            ParseResult with messages in file order and problems in
            detection order

        Raises:
            NoMessagesError: If the text contains no usable BO_ record
        """
        logger.debug(f"Parsing DBC text ({len(text)} characters)")
        ctx = ParseContext()

        for line_no, tokens in tokenize(text):
            # Nothing actionable on blank lines or lone keywords
            if len(tokens) <= 1:
                continue
            kind = RecordKind.from_token(tokens[0])
            self._handlers[kind](ctx, tokens, line_no)

        ctx.close_message()

        if not ctx.messages:
            raise NoMessagesError("Invalid DBC: could not find any BO_ or SG_ lines")

        link_value_tables(ctx.messages, ctx.value_tables, ctx.diagnostics)

        logger.info(
            f"Parsed {len(ctx.messages)} messages, "
            f"{sum(len(m.signals) for m in ctx.messages)} signals, "
            f"{len(ctx.diagnostics)} problems"
        )
        return ParseResult(messages=ctx.messages, problems=ctx.diagnostics.problems)

    def parse_file(self, path: Path | str, encoding: str = "utf-8") -> ParseResult:
        """
        Read and decode a DBC file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            NoMessagesError: If the file contains no usable BO_ record
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"DBC file not found: {path}")

        logger.info(f"Loading DBC: {path.name}")
        text = path.read_text(encoding=encoding, errors="replace")
        return self.parse(text)

    def _handle_message(self, ctx: ParseContext, tokens: list[str], line: int) -> None:
        # BO_ 2147486648 Edgy: 8 Vector__XXX
        diag = ctx.diagnostics
        if len(tokens) != self.MESSAGE_TOKENS:
            diag.error(
                line,
                "BO_ line does not follow DBC standard (should have five pieces of "
                "text/numbers), all parameters in this message may lack a PGN or source.",
            )

        ctx.close_message()

        can_id = to_int(tokens[1])
        name = tokens[2] if len(tokens) > 2 else ""
        if name.endswith(":"):
            name = name[:-1]
        data_length = to_int(tokens[3]) if len(tokens) > 3 else None

        if can_id is None:
            diag.error(
                line,
                "BO_ CAN ID is not a number, all parameters in this message won't "
                "have a PGN or source.",
            )
            ctx.current = Message(
                can_id=None,
                name=name,
                label=snake_case(name),
                data_length=data_length,
                source_line=line,
            )
            return

        if any(m.can_id == can_id for m in ctx.messages):
            diag.warning(
                line,
                "BO_ CAN ID already exists in this file. Both messages are kept, but "
                "the same CAN data will be decoded into two different parameters.",
            )

        try:
            parts = split_can_id(can_id)
        except CanIdError as e:
            diag.error(
                line,
                f"BO_ CAN ID can't be decomposed ({e}); message and its SG_ lines are skipped.",
            )
            return

        ctx.current = Message(
            can_id=can_id,
            name=name,
            label=snake_case(name),
            data_length=data_length,
            is_extended_frame=parts.is_extended_frame,
            priority=parts.priority,
            parameter_group_number=parts.parameter_group_number,
            source_address=parts.source_address,
            source_line=line,
        )

    def _handle_signal(self, ctx: ParseContext, tokens: list[str], line: int) -> None:
        # SG_ soc m0 : 8|8@1+ (0.5,0) [0|100] "%" Vector__XXX
        diag = ctx.diagnostics
        if not self.SIGNAL_TOKENS[0] <= len(tokens) <= self.SIGNAL_TOKENS[1]:
            diag.error(
                line,
                "SG_ line does not follow DBC standard; should have eight pieces of "
                "text/numbers (or nine for multiplexed parameters).",
            )

        if ctx.state is ClassifierState.IDLE:
            diag.error(
                line,
                "SG_ line is not inside a BO_ message (no valid BO_ line above it); "
                "parameter is skipped.",
            )
            return

        try:
            signal = extract_signal(tokens, ctx.current.label, line)
        except MultiplexerError:
            diag.warning(
                line,
                "Can't parse multiplexer data from SG_ line, there should either be "
                "\" M \" or \" m0 \" where 0 can be any number.",
            )
            return

        failed = invalid_fields(signal)
        if failed:
            diag.error(
                line,
                f"SG_ line has values that are not numbers ({', '.join(failed)}); "
                f"the parameter is kept but those fields are unusable.",
            )

        ctx.current.signals.append(signal)

    def _handle_value_table(self, ctx: ParseContext, tokens: list[str], line: int) -> None:
        # VAL_ 1024 Gear 0 "Park" 1 "Reverse" ;
        diag = ctx.diagnostics
        if len(tokens) % 2:
            diag.warning(
                line,
                "VAL_ line does not follow DBC standard; amount of text/numbers in the "
                "line should be an even number. States/values will be incorrect.",
            )
        if len(tokens) < self.VALUE_TABLE_MIN_TOKENS:
            diag.info(
                line,
                "VAL_ line only contains one state, nothing will break but it defeats "
                "the purpose of having states/values for this parameter.",
            )

        ctx.value_tables.append(extract_value_table(tokens, line))

    def _handle_ignored(self, ctx: ParseContext, tokens: list[str], line: int) -> None:
        # SIG_VALTYPE_ (float/double signals) is not supported yet
        logger.debug(f"Skipping line {line} starting with {tokens[0]}")


def parse_dbc(text: str) -> ParseResult:
    """Decode DBC text with a default parser."""
    return DBCParser().parse(text)
