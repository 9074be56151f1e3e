"""
Telemetry Message Parser

Line format (one message per line, checksum after the last '*'):
    $PWEAC,<id>,<id>,...*<checksum>      config: active field ids, in order
    $PWEAD0,<hex>,<hex>,...*<checksum>   data: one LE hex value per active id
                                         ($PWEAD1..$PWEAD3 are identical)

Outbound requests use the tag $PWEAXX and are built by ConfigEncoder.

The parser only carries the active id list and the text of the last config
line. Decode problems are returned in ParseResult and counted in
ParserStats; they never stop the rest of a line from being processed.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..errors import DecodeError, MalformedLine
from ..models.field_ids import MAX_FIELD_ID, PLACEHOLDER_ID
from ..models.fields import DecodeResult
from ..models.registry import FieldRegistry
from .telemetry_observer import TelemetrySubject

logger = logging.getLogger(__name__)

# Message tags
CONFIG_TAG = "$PWEAC"
DATA_TAGS = frozenset({"$PWEAD0", "$PWEAD1", "$PWEAD2", "$PWEAD3"})
REQUEST_TAG = "$PWEAXX"

CHECKSUM_DELIMITER = "*"
TOKEN_SEPARATOR = ","
LINE_TERMINATOR = "\r\n"

_HEX_RE = re.compile(r"[0-9A-Fa-f]+")


class ParseKind(Enum):
    """What the parser did with a line."""
    CONFIG = "config"
    CONFIG_UNCHANGED = "config_unchanged"
    DATA = "data"
    DATA_WITHOUT_CONFIG = "data_without_config"
    IGNORED = "ignored"
    MALFORMED = "malformed"


@dataclass
class ParseResult:
    """Outcome of one process_message call."""
    kind: ParseKind
    tag: str = ""
    field_ids: List[int] = field(default_factory=list)
    results: List[DecodeResult] = field(default_factory=list)
    errors: List[DecodeError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ParserStats:
    """Running counters, mostly useful for link quality diagnostics."""
    lines: int = 0
    config: int = 0
    config_unchanged: int = 0
    data: int = 0
    data_without_config: int = 0
    malformed: int = 0
    ignored: int = 0
    field_errors: Counter = field(default_factory=Counter)

    def record(self, result: ParseResult):
        self.lines += 1
        if result.kind is ParseKind.CONFIG:
            self.config += 1
        elif result.kind is ParseKind.CONFIG_UNCHANGED:
            self.config_unchanged += 1
        elif result.kind is ParseKind.DATA:
            self.data += 1
        elif result.kind is ParseKind.DATA_WITHOUT_CONFIG:
            self.data_without_config += 1
        elif result.kind is ParseKind.MALFORMED:
            self.malformed += 1
        else:
            self.ignored += 1
        for error in result.errors:
            if not isinstance(error, MalformedLine):
                self.field_errors[type(error).__name__] += 1

    def reset(self):
        self.__init__()


def strip_checksum(line: str) -> Optional[str]:
    """Text before the last '*', or None when there is no '*'."""
    pos = line.rfind(CHECKSUM_DELIMITER)
    if pos < 0:
        return None
    return line[:pos]


def tokenize(text: str) -> List[str]:
    """Split on ',' and drop trailing empty tokens."""
    tokens = text.split(TOKEN_SEPARATOR)
    while tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def parse_field_id(token: str) -> int:
    """Hex field id token; non-hex or wider than 64 bits becomes the placeholder."""
    token = token.strip()
    if not _HEX_RE.fullmatch(token):
        return PLACEHOLDER_ID
    field_id = int(token, 16)
    if field_id > MAX_FIELD_ID:
        return PLACEHOLDER_ID
    return field_id


class MessageParser:
    """
    Line-level state machine feeding a FieldRegistry.

    Usage:
        parser = MessageParser(registry)
        parser.process_message("$PWEAC,FE03,FB01*39")
        parser.process_message("$PWEAD0,204E,1F*00")
    """

    def __init__(self, registry: FieldRegistry,
                 subject: Optional[TelemetrySubject] = None):
        self.registry = registry
        self.subject = subject
        self.active_field_ids: List[int] = []
        self.last_config_text = ""
        self.stats = ParserStats()

    @property
    def has_config(self) -> bool:
        return bool(self.active_field_ids)

    def reset(self):
        """Forget the active config (registry values stay)."""
        self.active_field_ids = []
        self.last_config_text = ""

    def process_message(self, line: str) -> ParseResult:
        result = self._process(line)
        self.stats.record(result)
        return result

    def _process(self, line: str) -> ParseResult:
        text = strip_checksum(line)
        if text is None:
            logger.debug(f"Dropping line without checksum: {line!r}")
            return ParseResult(ParseKind.MALFORMED,
                               errors=[MalformedLine(f"No checksum delimiter: {line!r}")])

        tokens = tokenize(text)
        if not tokens:
            return ParseResult(ParseKind.MALFORMED,
                               errors=[MalformedLine(f"Empty message: {line!r}")])

        tag = tokens[0].strip()
        if tag == CONFIG_TAG:
            return self._process_config(text.strip(), tokens)
        if tag in DATA_TAGS:
            return self._process_data(tag, tokens)

        logger.debug(f"Ignoring message with tag {tag!r}")
        return ParseResult(ParseKind.IGNORED, tag=tag)

    def _process_config(self, text: str, tokens: List[str]) -> ParseResult:
        if text == self.last_config_text:
            return ParseResult(ParseKind.CONFIG_UNCHANGED, tag=CONFIG_TAG,
                               field_ids=list(self.active_field_ids))

        self.active_field_ids = [parse_field_id(t) for t in tokens[1:]]
        self.last_config_text = text

        unknown = []
        for field_id in self.active_field_ids:
            if field_id == PLACEHOLDER_ID:
                continue
            if field_id not in self.registry:
                unknown.append(field_id)
                continue
            self.registry.expand_parent_of(field_id)

        if unknown:
            logger.warning(f"Config lists unknown field ids: "
                           f"{', '.join(f'{i:X}' for i in unknown)}")
        logger.info(f"New config with {len(self.active_field_ids)} fields")

        if self.subject is not None:
            self.subject.notify_config(self.active_field_ids)
        return ParseResult(ParseKind.CONFIG, tag=CONFIG_TAG,
                           field_ids=list(self.active_field_ids))

    def _process_data(self, tag: str, tokens: List[str]) -> ParseResult:
        if not self.active_field_ids:
            return ParseResult(ParseKind.DATA_WITHOUT_CONFIG, tag=tag)

        result = ParseResult(ParseKind.DATA, tag=tag)
        for field_id, payload in zip(self.active_field_ids, tokens[1:]):
            if field_id == PLACEHOLDER_ID:
                continue
            decoded = self.registry.set_raw(field_id, payload.strip())
            result.results.append(decoded)
            result.errors.extend(decoded.errors())
            if decoded.error is None:
                result.field_ids.append(field_id)

        if result.errors:
            logger.debug(f"{len(result.errors)} field errors in {tag} line")

        if self.subject is not None:
            self.subject.notify_data(result.field_ids)
        return result
