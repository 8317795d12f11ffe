"""Synthetic projects, sessions, agents, plugins and memories for demo mode."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

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
from .plugins import Plugin

_DEMO_TOOLS = (
    ("Read", '{"file_path": "src/app.py"}', '"142 lines"'),
    ("Grep", '{"pattern": "handleAuth", "path": "src/"}', '"3 matches"'),
    ("Bash", '{"command": "npm test"}', '"exit 0"'),
    ("Edit", '{"file_path": "src/app.py"}', '"success"'),
    ("Glob", '{"pattern": "**/*.py"}', '"12 files"'),
    ("Write", '{"file_path": "src/new.py"}', '"success"'),
    ("Read", '{"file_path": "CLAUDE.md"}', '"45 lines"'),
    ("Task", '{"description": "Explore the codebase"}', '"done"'),
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_memories() -> list[Memory]:
    """Demo memory files."""
    now = _now()
    base = "/demo/.claude/projects/demo-project-1/memory/"
    return [
        Memory(
            name="MEMORY.md",
            path=base + "MEMORY.md",
            title="Project Memory",
            size=2048,
            mod_time=now - timedelta(minutes=10),
        ),
        Memory(
            name="patterns.md",
            path=base + "patterns.md",
            title="Code Patterns",
            size=512,
            mod_time=now - timedelta(hours=2),
        ),
        Memory(
            name="debugging.md",
            path=base + "debugging.md",
            title="Debugging Notes",
            size=1024,
            mod_time=now - timedelta(hours=24),
        ),
    ]


def generate_projects() -> list[Project]:
    """Demo projects with sessions and agents."""
    now = _now()

    sessions1 = [
        Session(
            id="abc12345-demo-0001-0000-000000000001",
            project_hash="demo-project-1",
            topic="Refactor authentication module to use OAuth2",
            branch="feat/auth-refactor",
            file_size=1363149,
            tokens_by_model={"claude-opus-4-6": TokenCount(120000, 25200)},
            agent_count=4,
            tool_call_count=18,
            num_turns=12,
            start_time=now - timedelta(minutes=5),
            mod_time=now - timedelta(seconds=30),
            agents=_generate_agents("abc12345"),
        ),
        Session(
            id="def45678-demo-0002-0000-000000000002",
            project_hash="demo-project-1",
            topic="Fix login redirect bug after password reset",
            branch="fix/login-redirect",
            file_size=510054,
            tokens_by_model={"claude-sonnet-4-6": TokenCount(20000, 3100)},
            agent_count=4,
            tool_call_count=18,
            num_turns=5,
            start_time=now - timedelta(hours=2),
            end_time=now - timedelta(minutes=90),
            mod_time=now - timedelta(minutes=90),
            agents=_generate_agents("def45678"),
        ),
    ]

    sessions2 = [
        Session(
            id="ghi78901-demo-0003-0000-000000000003",
            project_hash="demo-project-2",
            topic="Update test coverage for API endpoints",
            branch="main",
            file_size=2662400,
            tokens_by_model={"claude-haiku-4-5": TokenCount(5000, 800)},
            agent_count=4,
            tool_call_count=18,
            num_turns=3,
            start_time=now - timedelta(hours=24),
            end_time=now - timedelta(hours=23),
            mod_time=now - timedelta(hours=23),
            agents=_generate_agents("ghi78901"),
        ),
    ]

    return [
        Project(
            hash="-Users-mac-Repositories-my-awesome-app",
            path="/Users/mac/.claude/projects/-Users-mac-Repositories-my-awesome-app",
            sessions=sessions1,
            last_seen=now - timedelta(seconds=30),
        ),
        Project(
            hash="-Users-mac-Repositories-another-project",
            path="/Users/mac/.claude/projects/-Users-mac-Repositories-another-project",
            sessions=sessions2,
            last_seen=now - timedelta(hours=23),
        ),
    ]


def _generate_agents(session_id: str) -> list[Agent]:
    now = _now()
    prefix = session_id[:4]
    return [
        Agent(
            id="",
            session_id=session_id,
            type=AgentType.MAIN,
            status=Status.THINKING,
            tool_calls=_generate_tool_calls(session_id, "main", 12),
            last_activity="Edit src/app.py",
            start_time=now - timedelta(minutes=5),
            is_subagent=False,
        ),
        Agent(
            id=f"agent-{prefix}-sub1",
            session_id=session_id,
            type=AgentType.EXPLORE,
            status=Status.READING,
            tool_calls=_generate_tool_calls(session_id, "sub1", 5),
            last_activity="Read src/config.py",
            start_time=now - timedelta(minutes=4),
            is_subagent=True,
        ),
        Agent(
            id=f"agent-{prefix}-sub2",
            session_id=session_id,
            type=AgentType.PLAN,
            status=Status.DONE,
            tool_calls=_generate_tool_calls(session_id, "sub2", 3),
            last_activity="Read CLAUDE.md",
            start_time=now - timedelta(minutes=3),
            is_subagent=True,
        ),
        Agent(
            id=f"agent-{prefix}-sub3",
            session_id=session_id,
            type=AgentType.BASH,
            status=Status.EXECUTING,
            tool_calls=_generate_tool_calls(session_id, "sub3", 2),
            last_activity="Bash: npm test",
            start_time=now - timedelta(minutes=2),
            is_subagent=True,
        ),
    ]


def _generate_tool_calls(session_id: str, agent_id: str, count: int) -> list[ToolCall]:
    now = _now()
    return [
        ToolCall(
            id=f"{agent_id}-tool-{i}",
            session_id=session_id,
            agent_id=agent_id,
            name=name,
            input=tool_input,
            result=result,
            timestamp=now + (i - count) * timedelta(seconds=30),
            duration=timedelta(milliseconds=100 + i * 50),
        )
        for i, (name, tool_input, result) in zip(range(count), _DEMO_TOOLS)
    ]


def generate_plugins() -> list[Plugin]:
    """Demo plugins."""
    return [
        Plugin(
            name="superpowers",
            version="4.3.1",
            marketplace="claude-plugins-official",
            scope="user",
            enabled=True,
            installed_at="2025-12-15",
            skill_count=15,
            command_count=2,
            hook_count=1,
            agent_count=0,
            mcp_count=0,
        ),
        Plugin(
            name="Notion",
            version="1.2.0",
            marketplace="claude-plugins-official",
            scope="user",
            enabled=True,
            installed_at="2025-11-20",
            skill_count=8,
            command_count=1,
            agent_count=1,
            mcp_count=1,
        ),
        Plugin(
            name="code-review",
            version="2.0.1",
            marketplace="claude-plugins-official",
            scope="project",
            enabled=False,
            installed_at="2025-10-01",
            skill_count=3,
            agent_count=0,
            mcp_count=0,
        ),
    ]