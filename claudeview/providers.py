"""Sources of dashboard data: synthetic demo data and the live ``~/.claude`` tree."""

from __future__ import annotations

import os
import subprocess
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from .config import enabled_plugins, load_installed_plugins, project_enabled_plugins
from .demo import generate_memories, generate_plugins, generate_projects
from .models import (
    Agent,
    AgentType,
    Memory,
    Project,
    Session,
    Status,
    TokenCount,
    ToolCall,
)
from .plugins import (
    Plugin,
    count_agents,
    count_commands,
    count_hooks,
    count_mcps,
    count_skills,
)
from .scanner import SessionInfo, count_subagents, scan_projects, scan_subagents
from .transcript import (
    ParsedTranscript,
    SessionAggregates,
    TranscriptError,
    parse_aggregates_incremental,
    parse_file,
)


class DataProvider(Protocol):
    """Anything that can supply the resources the dashboard displays."""

    def get_projects(self) -> list[Project]: ...

    def get_sessions(self, project_hash: str) -> list[Session]: ...

    def get_agents(self, session_id: str) -> list[Agent]: ...

    def get_plugins(self, project_hash: str) -> list[Plugin]: ...

    def get_memories(self, project_hash: str) -> list[Memory]: ...


def current_user() -> str:
    """Name of the user running the program."""
    try:
        import pwd

        return pwd.getpwuid(os.getuid()).pw_name
    except (ImportError, KeyError, AttributeError, OSError):
        return os.environ.get("USER", "")


def detect_claude_version() -> str:
    """Version reported by ``claude --version``, or ``"--"`` if it cannot be run."""
    try:
        completed = subprocess.run(
            ["claude", "--version"], capture_output=True, check=True
        )
    except (OSError, subprocess.CalledProcessError):
        return "--"
    version = completed.stdout.decode("utf-8", errors="replace").strip()
    parts = version.split()
    return parts[0] if parts else version


def md_title(path: str) -> str:
    """Text of the first ``# Heading`` line of a markdown file, or ``""``."""
    try:
        data = Path(path).read_bytes()
    except OSError:
        return ""
    for line in data.decode("utf-8", errors="replace").split("\n"):
        line = line.rstrip("\r\n")
        if line.startswith("# "):
            return line[2:]
    return ""


def detect_agent_type(agent_id: str) -> AgentType:
    """Guess an agent's type from its identifier."""
    lower = agent_id.lower()
    if "explore" in lower:
        return AgentType.EXPLORE
    if "plan" in lower:
        return AgentType.PLAN
    if "bash" in lower:
        return AgentType.BASH
    return AgentType.GENERAL


def _ext(name: str) -> str:
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _parse_or_none(path: str) -> ParsedTranscript | None:
    try:
        return parse_file(path)
    except (OSError, TranscriptError):
        return None


def _populate_tool_calls(agent: Agent, session_id: str, parsed: ParsedTranscript) -> None:
    """Fill ``agent.tool_calls`` from a parsed transcript and note the last activity."""
    agent.tool_calls.extend(
        ToolCall(
            id=call.id,
            session_id=session_id,
            agent_id=agent.id,
            name=call.name,
            input=call.input,
            result=call.result,
            is_error=call.is_error,
            timestamp=turn.timestamp,
        )
        for turn in parsed.turns
        for call in turn.tool_calls
    )
    if agent.tool_calls:
        last = agent.tool_calls[-1]
        agent.last_activity = f"{last.name} {last.input_summary()}"


def parse_agents_from_session(session: Session) -> list[Agent]:
    """The main agent and any subagents of a session, with their tool calls."""
    main_agent = Agent(
        id="",
        session_id=session.id,
        type=AgentType.MAIN,
        status=Status.ENDED,
        file_path=session.file_path,
        is_subagent=False,
    )
    parsed = _parse_or_none(session.file_path)
    if parsed is not None:
        _populate_tool_calls(main_agent, session.id, parsed)

    agents = [main_agent]
    if session.subagent_dir:
        try:
            infos = scan_subagents(session.subagent_dir)
        except OSError:
            infos = []
        for info in infos:
            sub = Agent(
                id=info.id,
                session_id=session.id,
                type=AgentType.GENERAL,
                status=Status.DONE,
                file_path=info.file_path,
                is_subagent=True,
                start_time=info.mod_time,
            )
            sub_parsed = _parse_or_none(info.file_path)
            if sub_parsed is not None:
                _populate_tool_calls(sub, session.id, sub_parsed)
                sub.type = detect_agent_type(info.id)
            agents.append(sub)
    return agents


class DemoDataProvider:
    """Serves synthetic data for demo mode."""

    def __init__(self) -> None:
        self.projects = generate_projects()
        self.plugins = generate_plugins()

    def get_projects(self) -> list[Project]:
        return self.projects

    def get_sessions(self, project_hash: str) -> list[Session]:
        for project in self.projects:
            if not project_hash or project.hash == project_hash:
                return project.sessions
        if self.projects:
            return self.projects[0].sessions
        return []

    def get_agents(self, session_id: str) -> list[Agent]:
        sessions = [s for p in self.projects for s in p.sessions]
        if not session_id:
            return [a for s in sessions for a in s.agents]
        for session in sessions:
            if session.id == session_id:
                return session.agents
        return []

    def get_plugins(self, project_hash: str) -> list[Plugin]:
        return self.plugins

    def get_memories(self, project_hash: str) -> list[Memory]:
        return generate_memories()


class LiveDataProvider:
    """Reads projects, sessions, plugins and memories from a ``.claude`` directory."""

    def __init__(self, claude_dir: str) -> None:
        self.claude_dir = claude_dir
        self.current_project = ""
        self.current_session = ""
        self._agg_cache: dict[str, SessionAggregates] = {}
        self._lock = threading.Lock()

    def get_projects(self) -> list[Project]:
        try:
            infos = scan_projects(self.claude_dir)
        except OSError:
            return []
        projects = []
        for info in infos:
            project = Project(hash=info.hash, path=info.path, last_seen=info.last_seen)
            for session_info in info.sessions:
                session = self._session_from_info(session_info)
                if session.topic:
                    project.sessions.append(session)
            projects.append(project)
        return projects

    def get_sessions(self, project_hash: str) -> list[Session]:
        if project_hash:
            self.current_project = project_hash
        try:
            infos = scan_projects(self.claude_dir)
        except OSError:
            return []
        sessions = []
        for info in infos:
            if self.current_project and info.hash != self.current_project:
                continue
            for session_info in info.sessions:
                session = self._session_from_info(session_info)
                if not session.topic:
                    continue
                session.project_hash = info.hash
                sessions.append(session)
        return sessions

    def get_agents(self, session_id: str) -> list[Agent]:
        if session_id:
            self.current_session = session_id
        sessions = self.get_sessions(self.current_project)
        if not session_id:
            return [a for s in sessions for a in parse_agents_from_session(s)]
        for session in sessions:
            if session.id == session_id:
                return parse_agents_from_session(session)
        return []

    def get_plugins(self, project_hash: str) -> list[Plugin]:
        try:
            installed = load_installed_plugins(self.claude_dir)
        except (OSError, ValueError):
            return []
        global_enabled = enabled_plugins(self.claude_dir)

        plugins = []
        for p in installed:
            if not project_hash and p.scope != "user":
                continue
            key = f"{p.name}@{p.marketplace}"
            if p.project_path:
                is_enabled = project_enabled_plugins(p.project_path).get(key, False)
            else:
                is_enabled = global_enabled.get(key, False)
            plugins.append(
                Plugin(
                    name=p.name,
                    version=p.version,
                    marketplace=p.marketplace,
                    scope=p.scope,
                    enabled=is_enabled,
                    installed_at=p.installed_at,
                    cache_dir=p.cache_dir,
                    skill_count=count_skills(p.cache_dir),
                    command_count=count_commands(p.cache_dir),
                    hook_count=count_hooks(p.cache_dir),
                    agent_count=count_agents(p.cache_dir),
                    mcp_count=count_mcps(p.cache_dir),
                )
            )
        return plugins

    def get_memories(self, project_hash: str) -> list[Memory]:
        if not project_hash:
            return []
        mem_dir = os.path.join(self.claude_dir, "projects", project_hash, "memory")
        try:
            with os.scandir(mem_dir) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError:
            return []
        memories = []
        for entry in entries:
            if entry.is_dir(follow_symlinks=False) or _ext(entry.name) != ".md":
                continue
            try:
                stat = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            path = os.path.join(mem_dir, entry.name)
            memories.append(
                Memory(
                    name=entry.name,
                    path=path,
                    title=md_title(path),
                    size=stat.st_size,
                    mod_time=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return memories

    def _session_from_info(self, info: SessionInfo) -> Session:
        """Build a session, reading only what was appended since the last call."""
        session = Session(
            id=info.id,
            file_path=info.file_path,
            subagent_dir=info.subagent_dir,
            mod_time=info.mod_time,
        )
        with self._lock:
            cached = self._agg_cache.get(info.file_path)
        try:
            agg = parse_aggregates_incremental(info.file_path, cached)
        except (OSError, TranscriptError):
            return session
        with self._lock:
            self._agg_cache[info.file_path] = agg

        session.num_turns = agg.num_turns
        session.topic = agg.topic
        session.branch = agg.branch
        session.tool_call_count = agg.total_tool_calls
        session.agent_count = 1 + count_subagents(info.subagent_dir)
        try:
            session.file_size = os.stat(info.file_path).st_size
        except OSError:
            pass
        session.tokens_by_model = {
            model: TokenCount(usage.input_tokens, usage.output_tokens)
            for model, usage in agg.tokens_by_model.items()
        }
        return session