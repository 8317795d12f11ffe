"""Discovery of project directories, session transcripts and subagent transcripts."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .models import ZERO_TIME

_JSONL = ".jsonl"


@dataclass
class SessionInfo:
    """A session (or subagent) transcript file found on disk."""

    id: str = ""
    file_path: str = ""
    subagent_dir: str = ""
    mod_time: datetime = ZERO_TIME


@dataclass
class ProjectInfo:
    """A project directory and the sessions found in it."""

    hash: str = ""
    path: str = ""
    sessions: list[SessionInfo] = field(default_factory=list)
    last_seen: datetime = ZERO_TIME


def _read_dir(directory: str) -> list[os.DirEntry] | None:
    """Entries of ``directory`` sorted by name; ``None`` if it does not exist."""
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except FileNotFoundError:
        return None


def _mod_time(entry: os.DirEntry) -> datetime:
    stat = entry.stat(follow_symlinks=False)
    return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)


def _is_jsonl_file(entry: os.DirEntry) -> bool:
    return not entry.is_dir(follow_symlinks=False) and entry.name.endswith(_JSONL)


def _scan_jsonl_files(
    directory: str, descending: bool, include_subagent_dir: bool
) -> list[SessionInfo]:
    """Transcript files in ``directory`` ordered by modification time."""
    entries = _read_dir(directory)
    if entries is None:
        return []

    sessions = []
    for entry in entries:
        if not _is_jsonl_file(entry):
            continue
        session_id = entry.name[: -len(_JSONL)]
        try:
            mod_time = _mod_time(entry)
        except OSError:
            continue
        subagent_dir = ""
        if include_subagent_dir:
            candidate = os.path.join(directory, session_id, "subagents")
            if os.path.exists(candidate):
                subagent_dir = candidate
        sessions.append(
            SessionInfo(
                id=session_id,
                file_path=os.path.join(directory, entry.name),
                subagent_dir=subagent_dir,
                mod_time=mod_time,
            )
        )

    sessions.sort(key=lambda s: s.mod_time, reverse=descending)
    return sessions


def scan_projects(claude_dir: str) -> list[ProjectInfo]:
    """All projects under ``<claude_dir>/projects``, most recently active first.

    A missing projects directory gives an empty list; other read errors raise ``OSError``.
    """
    projects_dir = os.path.join(claude_dir, "projects")
    entries = _read_dir(projects_dir)
    if entries is None:
        return []

    projects = []
    for entry in entries:
        if not entry.is_dir(follow_symlinks=False):
            continue
        project_path = os.path.join(projects_dir, entry.name)
        try:
            dir_mod_time = _mod_time(entry)
            sessions = _scan_jsonl_files(project_path, True, True)
        except OSError:
            continue
        last_seen = max([dir_mod_time, *(s.mod_time for s in sessions)])
        projects.append(
            ProjectInfo(
                hash=entry.name,
                path=project_path,
                sessions=sessions,
                last_seen=last_seen,
            )
        )

    projects.sort(key=lambda p: p.last_seen, reverse=True)
    return projects


def scan_subagents(subagent_dir: str) -> list[SessionInfo]:
    """Subagent transcripts of a session, oldest first."""
    if not subagent_dir:
        return []
    return _scan_jsonl_files(subagent_dir, False, False)


def count_subagents(subagent_dir: str) -> int:
    """Number of subagent transcript files in ``subagent_dir``; 0 if unreadable."""
    if not subagent_dir:
        return 0
    try:
        entries = _read_dir(subagent_dir)
    except OSError:
        return 0
    if entries is None:
        return 0
    return sum(1 for entry in entries if _is_jsonl_file(entry))