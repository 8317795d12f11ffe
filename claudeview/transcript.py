"""Parsing of JSONL session transcripts into turns, tool calls and usage totals."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, BinaryIO, Iterable, Union

from .models import ZERO_TIME

_MAX_LINE = 10 << 20
_SKILL_PREFIX = "Base directory for this skill:"

_TIMESTAMP = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})\Z"
)

Line = Union[str, bytes]


class TranscriptError(ValueError):
    """A transcript could not be read to the end."""


class _Mismatch(Exception):
    """A JSON value does not have the expected shape."""


@dataclass
class Usage:
    """Token consumption reported for a message."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0


@dataclass
class ToolCall:
    """A tool invocation matched with its result; input and result are raw JSON text."""

    id: str = ""
    name: str = ""
    input: str | None = None
    result: str | None = None
    is_error: bool = False
    timestamp: datetime = ZERO_TIME
    duration: timedelta = timedelta(0)


@dataclass
class Turn:
    """A conversation turn with its tool calls."""

    role: str = ""
    text: str = ""
    thinking: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    model: str = ""
    usage: Usage = field(default_factory=Usage)
    timestamp: datetime = ZERO_TIME


@dataclass
class ParsedTranscript:
    """Everything extracted from a transcript."""

    turns: list[Turn] = field(default_factory=list)
    topic: str = ""
    tokens_by_model: dict[str, Usage] = field(default_factory=dict)
    total_tool_calls: int = 0
    total_cost: float = 0.0
    duration_ms: int = 0
    num_turns: int = 0


@dataclass
class SessionAggregates:
    """Session-level metrics kept between incremental reads of a transcript."""

    topic: str = ""
    branch: str = ""
    tokens_by_model: dict[str, Usage] = field(default_factory=dict)
    total_tool_calls: int = 0
    duration_ms: int = 0
    num_turns: int = 0
    offset: int = 0


# --- JSON shape helpers -----------------------------------------------------


def _object(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _Mismatch("not an object")
    return value


def _str(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _Mismatch(key)
    return value


def _int(obj: dict[str, Any], key: str) -> int:
    value = obj.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _Mismatch(key)
    return value


def _float(obj: dict[str, Any], key: str) -> float:
    value = obj.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _Mismatch(key)
    return float(value)


def _bool(obj: dict[str, Any], key: str) -> bool:
    value = obj.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise _Mismatch(key)
    return value


def _raw(obj: dict[str, Any], key: str) -> str | None:
    if key not in obj:
        return None
    return json.dumps(obj[key], ensure_ascii=False)


@dataclass
class _Block:
    type: str = ""
    text: str = ""
    id: str = ""
    name: str = ""
    input: str | None = None
    tool_use_id: str = ""
    content: str | None = None
    is_error: bool = False
    thinking: str = ""


def _block(value: Any) -> _Block:
    obj = _object(value)
    return _Block(
        type=_str(obj, "type"),
        text=_str(obj, "text"),
        id=_str(obj, "id"),
        name=_str(obj, "name"),
        input=_raw(obj, "input"),
        tool_use_id=_str(obj, "tool_use_id"),
        content=_raw(obj, "content"),
        is_error=_bool(obj, "is_error"),
        thinking=_str(obj, "thinking"),
    )


def _blocks(value: Any) -> list[_Block]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise _Mismatch("not a list")
    return [_block(item) for item in value]


def _usage(value: Any) -> Usage:
    obj = _object(value)
    return Usage(
        input_tokens=_int(obj, "input_tokens"),
        output_tokens=_int(obj, "output_tokens"),
        cache_creation_input_tokens=_int(obj, "cache_creation_input_tokens"),
        cache_read_input_tokens=_int(obj, "cache_read_input_tokens"),
    )


@dataclass
class _Entry:
    type: str
    timestamp: str
    git_branch: str
    message: Any
    has_message: bool
    document: dict[str, Any]


def _entry(line: bytes) -> _Entry | None:
    try:
        obj = _object(json.loads(line))
        _str(obj, "uuid")
        _str(obj, "sessionId")
        return _Entry(
            type=_str(obj, "type"),
            timestamp=_str(obj, "timestamp"),
            git_branch=_str(obj, "gitBranch"),
            message=obj.get("message"),
            has_message="message" in obj,
            document=obj,
        )
    except (ValueError, _Mismatch):
        return None


@dataclass
class _UserMessage:
    content: Any
    has_content: bool

    def text_content(self) -> str:
        """Plain text of the message, from a string or from text blocks."""
        if not self.has_content or self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        try:
            blocks = _blocks(self.content)
        except _Mismatch:
            return ""
        return "".join(b.text for b in blocks if b.type == "text")

    def tool_results(self) -> list[_Block]:
        if not self.has_content or isinstance(self.content, str):
            return []
        try:
            blocks = _blocks(self.content)
        except _Mismatch:
            return []
        return [b for b in blocks if b.type == "tool_result"]


@dataclass
class _AssistantMessage:
    content: list[_Block]
    model: str
    usage: Usage


def _user_message(entry: _Entry) -> _UserMessage | None:
    if not entry.has_message:
        return None
    try:
        obj = _object(entry.message)
        _str(obj, "role")
    except _Mismatch:
        return None
    return _UserMessage(content=obj.get("content"), has_content="content" in obj)


def _assistant_message(entry: _Entry) -> _AssistantMessage | None:
    if not entry.has_message:
        return None
    try:
        obj = _object(entry.message)
        _str(obj, "role")
        return _AssistantMessage(
            content=_blocks(obj.get("content")),
            model=_str(obj, "model"),
            usage=_usage(obj.get("usage")),
        )
    except _Mismatch:
        return None


def _system_duration(entry: _Entry) -> tuple[int, int, float]:
    """Duration, turn count and cost of a ``turn_duration`` system entry.

    Older transcripts keep these in the message (snake_case); newer ones at the top level.
    """
    try:
        if entry.has_message:
            msg = _object(entry.message)
            subtype = _str(msg, "subtype")
            duration = _int(msg, "duration_ms")
            turns = _int(msg, "num_turns")
            cost = _float(msg, "total_cost_usd")
            if subtype == "turn_duration":
                return duration, turns, cost
        else:
            subtype = _str(entry.document, "subtype")
            duration = _int(entry.document, "durationMs")
            if subtype == "turn_duration":
                return duration, 0, 0.0
    except _Mismatch:
        pass
    return 0, 0, 0.0


def _parse_timestamp(text: str) -> datetime:
    match = _TIMESTAMP.match(text)
    if match is None:
        return ZERO_TIME
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micros = int((fraction or "0")[:6].ljust(6, "0"))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micros, tz
        )
    except ValueError:
        return ZERO_TIME


def _extract_xml_tag(s: str, tag: str) -> str:
    opening = f"<{tag}>"
    closing = f"</{tag}>"
    start = s.find(opening)
    end = s.find(closing)
    if start >= 0 and end > start + len(opening):
        return s[start + len(opening) : end].strip()
    return ""


def _extract_topic(text: str) -> str:
    """Topic text of a user message; empty when it carries nothing readable."""
    if text.startswith(
        ("<local-command-caveat>", "<local-command-stdout>", "<local-command-stderr>")
    ):
        return ""
    if text.startswith("<command-name>"):
        name = _extract_xml_tag(text, "command-name")
        if name:
            return name
    elif text.startswith("<command-message>"):
        name = _extract_xml_tag(text, "command-name") or _extract_xml_tag(
            text, "command-message"
        )
        if name:
            return name
    return text


def _topic_from(text: str) -> str:
    if not text or text.startswith(_SKILL_PREFIX):
        return ""
    return _extract_topic(text)


def _lines(stream: Iterable[Line]) -> Iterable[bytes]:
    for line in stream:
        if isinstance(line, str):
            line = line.encode("utf-8")
        if len(line) > _MAX_LINE:
            raise TranscriptError("transcript line too long")
        line = line.rstrip(b"\n")
        if line.endswith(b"\r"):
            line = line[:-1]
        if line:
            yield line


def _add_usage(totals: dict[str, Usage], model: str, usage: Usage) -> None:
    current = totals.setdefault(model, Usage())
    current.input_tokens += usage.input_tokens
    current.output_tokens += usage.output_tokens


# --- Public API --------------------------------------------------------------


def _flush(
    result: ParsedTranscript,
    turn: Turn,
    results: dict[str, str | None],
    errors: dict[str, bool],
) -> None:
    for call in turn.tool_calls:
        if call.id in results:
            call.result = results[call.id]
            call.is_error = errors.get(call.id, False)
    _add_usage(result.tokens_by_model, turn.model, turn.usage)
    result.total_tool_calls += len(turn.tool_calls)
    result.turns.append(turn)


def parse(stream: Iterable[Line]) -> ParsedTranscript:
    """Parse transcript lines (bytes or text); malformed lines are skipped."""
    result = ParsedTranscript()
    results: dict[str, str | None] = {}
    errors: dict[str, bool] = {}
    pending: Turn | None = None

    for line in _lines(stream):
        entry = _entry(line)
        if entry is None:
            continue
        ts = _parse_timestamp(entry.timestamp)

        if entry.type == "user":
            msg = _user_message(entry)
            if msg is None:
                continue
            for block in msg.tool_results():
                results[block.tool_use_id] = block.content
                errors[block.tool_use_id] = block.is_error
            if pending is not None:
                _flush(result, pending, results, errors)
                pending = None
            text = msg.text_content()
            if text:
                if not result.topic:
                    result.topic = _topic_from(text)
                result.turns.append(Turn(role="user", text=text, timestamp=ts))

        elif entry.type == "assistant":
            amsg = _assistant_message(entry)
            if amsg is None:
                continue
            turn = Turn(role="assistant", model=amsg.model, usage=amsg.usage, timestamp=ts)
            for block in amsg.content:
                if block.type == "text":
                    turn.text += block.text
                elif block.type == "thinking":
                    turn.thinking += block.thinking
                elif block.type == "tool_use":
                    turn.tool_calls.append(
                        ToolCall(id=block.id, name=block.name, input=block.input, timestamp=ts)
                    )
            pending = turn

        elif entry.type == "system":
            duration, turns, cost = _system_duration(entry)
            result.duration_ms += duration
            if turns > 0:
                result.num_turns = turns
            if cost > 0:
                result.total_cost = cost

    if pending is not None:
        _flush(result, pending, results, errors)
    return result


def parse_file(path: str | os.PathLike[str]) -> ParsedTranscript:
    """Parse the transcript file at ``path``."""
    with open(path, "rb") as stream:
        return parse(stream)


def parse_aggregates_incremental(
    path: str | os.PathLike[str], agg: SessionAggregates | None = None
) -> SessionAggregates:
    """Read ``path`` from ``agg.offset`` on, add to ``agg`` and return it.

    Without ``agg`` a fresh one is made and the whole file is read.
    """
    if agg is None:
        agg = SessionAggregates()

    with open(path, "rb") as stream:
        if agg.offset > 0:
            stream.seek(agg.offset)
        for line in _lines(stream):
            entry = _entry(line)
            if entry is None:
                continue
            if not agg.branch and entry.git_branch:
                agg.branch = entry.git_branch

            if entry.type == "user":
                msg = _user_message(entry)
                if msg is not None and not agg.topic:
                    agg.topic = _topic_from(msg.text_content())
            elif entry.type == "assistant":
                amsg = _assistant_message(entry)
                if amsg is None:
                    continue
                _add_usage(agg.tokens_by_model, amsg.model, amsg.usage)
                agg.total_tool_calls += sum(1 for b in amsg.content if b.type == "tool_use")
                agg.num_turns += 1
            elif entry.type == "system":
                duration, turns, _ = _system_duration(entry)
                agg.duration_ms += duration
                if turns > 0:
                    agg.num_turns = turns

        agg.offset = stream.seek(0, os.SEEK_END)
    return agg