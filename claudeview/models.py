"""Domain objects for sessions, agents, tool calls, projects and memories."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Union

from .formatting import format_age, format_size

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

RawJSON = Union[str, bytes, None]


class Status(str, Enum):
    """State of an agent or task."""

    ACTIVE = "active"
    THINKING = "thinking"
    READING = "reading"
    EXECUTING = "executing"
    DONE = "done"
    ENDED = "ended"
    ERROR = "error"
    FAILED = "failed"
    RUNNING = "running"
    PENDING = "pending"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


class AgentType(str, Enum):
    """Classification of an agent."""

    MAIN = "main"
    EXPLORE = "Explore"
    PLAN = "Plan"
    BASH = "Bash"
    GENERAL = "general-purpose"

    def __str__(self) -> str:
        return self.value


_AGENT_DISPLAY_NAMES = {
    AgentType.MAIN: "Claude",
    AgentType.EXPLORE: "Explorer",
    AgentType.PLAN: "Planner",
    AgentType.BASH: "Bash-runner",
    AgentType.GENERAL: "General",
}


def _since(t: datetime) -> timedelta:
    now = datetime.now(t.tzinfo) if t.tzinfo is not None else datetime.now()
    return now - t


def _text(raw: RawJSON) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw or ""


def _single_line(s: str) -> str:
    return s.replace("\n", " ")


def _truncate(s: str, n: int) -> str:
    s = s.replace("\n", " ")
    if len(s) <= n:
        return s
    return s[: n - 1] + "…"


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


@dataclass
class TokenCount:
    """Token usage for one model."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class ToolCall:
    """A single tool invocation and its result; input and result are raw JSON."""

    id: str = ""
    session_id: str = ""
    agent_id: str = ""
    name: str = ""
    input: RawJSON = None
    result: RawJSON = None
    is_error: bool = False
    timestamp: datetime = ZERO_TIME
    duration: timedelta = timedelta(0)

    def input_summary(self) -> str:
        """One-line summary of the tool input, not truncated."""
        if self.input is None:
            return ""
        raw = _text(self.input)
        try:
            parsed: Any = json.loads(raw)
        except ValueError:
            return _single_line(raw)
        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            return _single_line(raw)

        def string_field(key: str) -> str | None:
            value = parsed.get(key)
            return value if isinstance(value, str) else None

        if self.name in ("Read", "Write", "Edit"):
            value = string_field("file_path")
            if value is not None:
                return _single_line(value)
        elif self.name == "Bash":
            value = string_field("command")
            if value is not None:
                return _single_line(value)
        elif self.name == "Grep":
            pattern = string_field("pattern") or ""
            path = string_field("path") or "."
            return _single_line(f"{_quote(pattern)} in {path}")
        elif self.name == "Glob":
            value = string_field("pattern")
            if value is not None:
                return _single_line(value)
        elif self.name == "Task":
            value = string_field("description")
            if value is not None:
                return _single_line(value)
        elif self.name == "WebFetch":
            value = string_field("url")
            if value is not None:
                return _single_line(value)

        for value in parsed.values():
            if isinstance(value, str) and value:
                return _single_line(value)
        return _single_line(raw)

    def result_summary(self) -> str:
        """One-line summary of the tool result."""
        if self.is_error:
            return "error"
        if self.result is None:
            return "-"
        raw = _text(self.result)
        try:
            parsed: Any = json.loads(raw)
        except ValueError:
            return _truncate(raw, 20)
        if parsed is None or isinstance(parsed, str):
            lines = (parsed or "").split("\n")
            return _truncate(f"{len(lines)} lines", 20)
        if isinstance(parsed, list) and all(
            block is None or isinstance(block, dict) for block in parsed
        ):
            return f"{len(parsed)} blocks"
        return _truncate(raw, 20)

    def duration_string(self) -> str:
        """Formatted duration, ``"-"`` when unknown."""
        if not self.duration:
            return "-"
        if self.duration < timedelta(seconds=1):
            millis = int(self.duration / timedelta(milliseconds=1))
            return f"{float(millis):.1f}ms"
        return f"{self.duration.total_seconds():.1f}s"


@dataclass
class Agent:
    """A main agent or subagent within a session."""

    id: str = ""
    session_id: str = ""
    type: AgentType | str = AgentType.MAIN
    status: Status | str = Status.ENDED
    tool_calls: list[ToolCall] = field(default_factory=list)
    last_activity: str = ""
    file_path: str = ""
    start_time: datetime = ZERO_TIME
    is_subagent: bool = False
    depth: int = 0

    def short_id(self) -> str:
        """Display-friendly identifier, e.g. ``agent-a42f831`` becomes ``a42f831``."""
        if not self.id:
            return "main"
        prefix, sep, rest = self.id.partition("-")
        if sep:
            return rest[:7]
        return self.id[:8]

    def display_name(self) -> str:
        """Human-friendly name for the agent."""
        name = _AGENT_DISPLAY_NAMES.get(self.type)
        if name is not None:
            return name
        return self.short_id() if self.id else "Agent"

    def tree_prefix(self, is_last: bool) -> str:
        """Tree-drawing prefix for display."""
        if not self.is_subagent:
            return "► "
        return "  └─ " if is_last else "  ├─ "


@dataclass
class Session:
    """A recorded session."""

    id: str = ""
    project_hash: str = ""
    file_path: str = ""
    subagent_dir: str = ""
    branch: str = ""
    file_size: int = 0
    topic: str = ""
    tokens_by_model: dict[str, TokenCount] = field(default_factory=dict)
    agent_count: int = 0
    tool_call_count: int = 0
    agents: list[Agent] = field(default_factory=list)
    num_turns: int = 0
    start_time: datetime = ZERO_TIME
    end_time: datetime = ZERO_TIME
    mod_time: datetime = ZERO_TIME

    def last_active(self) -> str:
        """Elapsed time since the session file last changed."""
        return format_age(_since(self.mod_time))

    def token_string(self) -> str:
        """Compact per-model token totals, e.g. ``"opus:1.5M sonnet:62k"``."""
        if not self.tokens_by_model:
            return "-"
        return " ".join(
            f"{_short_model_name(model)}:{_format_tokens(self.tokens_by_model[model].total)}"
            for model in sorted(self.tokens_by_model)
        )

    def topic_short(self, max_len: int) -> str:
        """Topic on one line, truncated to ``max_len`` characters."""
        if not self.topic:
            return "-"
        topic = self.topic.replace("\n", " ")
        if len(topic) > max_len:
            return topic[: max_len - 1] + "…"
        return topic

    def meta_line(self) -> str:
        """Compact ``"branch · size"`` string."""
        size = format_size(self.file_size)
        if not self.branch:
            return size
        return f"{self.branch} · {size}"

    def short_id(self) -> str:
        """First eight characters of the session ID."""
        return self.id[:8]


def _short_model_name(model: str) -> str:
    lower = model.lower()
    for family in ("opus", "sonnet", "haiku"):
        if family in lower:
            return family
    return model.split("-")[-1]


def _format_tokens(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1000:
        return f"{n // 1000}k"
    return str(n)


@dataclass
class Project:
    """A project directory holding sessions."""

    hash: str = ""
    path: str = ""
    sessions: list[Session] = field(default_factory=list)
    last_seen: datetime = ZERO_TIME

    def session_count(self) -> int:
        """Number of sessions in the project."""
        return len(self.sessions)


@dataclass
class Memory:
    """A markdown file in a project's memory directory."""

    name: str = ""
    path: str = ""
    title: str = ""
    size: int = 0
    mod_time: datetime = ZERO_TIME

    def size_str(self) -> str:
        """File size in human-readable form."""
        return format_size(self.size)

    def last_modified(self) -> str:
        """Age of the file's last modification."""
        return format_age(_since(self.mod_time))