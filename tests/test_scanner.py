import os
import time

import pytest

from claudeview.scanner import count_subagents, scan_projects, scan_subagents


def _touch(path, mtime=None):
    with open(path, "w", encoding="utf-8"):
        pass
    if mtime is not None:
        os.utime(path, (mtime, mtime))


def test_scan_projects(tmp_path):
    projects_dir = tmp_path / "projects"
    for proj in ("proj-hash-1", "proj-hash-2"):
        proj_dir = projects_dir / proj
        proj_dir.mkdir(parents=True)
        _touch(proj_dir / "session-abc123.jsonl")

    projects = scan_projects(str(tmp_path))

    assert len(projects) == 2
    assert sorted(p.hash for p in projects) == ["proj-hash-1", "proj-hash-2"]
    for p in projects:
        assert len(p.sessions) == 1
        assert p.sessions[0].id == "session-abc123"
        assert p.path == str(projects_dir / p.hash)


def test_scan_projects_empty(tmp_path):
    assert scan_projects(str(tmp_path)) == []


def test_scan_projects_missing_dir(tmp_path):
    assert scan_projects(str(tmp_path / "nothing-here")) == []


def test_scan_projects_projects_is_a_file(tmp_path):
    (tmp_path / "projects").write_text("not a dir", encoding="utf-8")
    with pytest.raises(OSError):
        scan_projects(str(tmp_path))


def test_scan_projects_ignores_files_and_non_jsonl(tmp_path):
    projects_dir = tmp_path / "projects"
    proj_dir = projects_dir / "proj"
    proj_dir.mkdir(parents=True)
    _touch(projects_dir / "stray.jsonl")
    _touch(proj_dir / "notes.txt")
    _touch(proj_dir / "sess.jsonl")

    projects = scan_projects(str(tmp_path))

    assert [p.hash for p in projects] == ["proj"]
    assert [s.id for s in projects[0].sessions] == ["sess"]


def test_scan_projects_sorted_by_last_seen(tmp_path):
    now = time.time()
    projects_dir = tmp_path / "projects"
    for name, age in (("old", 5000), ("new", 10)):
        proj_dir = projects_dir / name
        proj_dir.mkdir(parents=True)
        _touch(proj_dir / "s.jsonl", now - age)
        os.utime(proj_dir, (now - 10000, now - 10000))

    projects = scan_projects(str(tmp_path))

    assert [p.hash for p in projects] == ["new", "old"]
    for p in projects:
        assert p.last_seen == p.sessions[0].mod_time


def test_sessions_newest_first_and_subagent_dir(tmp_path):
    now = time.time()
    proj_dir = tmp_path / "projects" / "proj"
    proj_dir.mkdir(parents=True)
    _touch(proj_dir / "older.jsonl", now - 100)
    _touch(proj_dir / "newer.jsonl", now - 1)
    (proj_dir / "older" / "subagents").mkdir(parents=True)

    sessions = scan_projects(str(tmp_path))[0].sessions

    assert [s.id for s in sessions] == ["newer", "older"]
    assert sessions[0].subagent_dir == ""
    assert sessions[1].subagent_dir == str(proj_dir / "older" / "subagents")
    assert sessions[1].file_path == str(proj_dir / "older.jsonl")


def test_scan_subagents(tmp_path):
    subagent_dir = tmp_path / "subagents"
    subagent_dir.mkdir()
    for name in ("agent-abc123.jsonl", "agent-def456.jsonl"):
        _touch(subagent_dir / name)

    agents = scan_subagents(str(subagent_dir))

    assert len(agents) == 2
    assert {a.id for a in agents} == {"agent-abc123", "agent-def456"}
    assert all(a.subagent_dir == "" for a in agents)


def test_scan_subagents_oldest_first(tmp_path):
    now = time.time()
    subagent_dir = tmp_path / "subagents"
    subagent_dir.mkdir()
    _touch(subagent_dir / "agent-b.jsonl", now - 1)
    _touch(subagent_dir / "agent-a.jsonl", now - 100)

    agents = scan_subagents(str(subagent_dir))

    assert [a.id for a in agents] == ["agent-a", "agent-b"]


def test_scan_subagents_empty_path():
    assert scan_subagents("") == []


def test_scan_subagents_missing_dir(tmp_path):
    assert scan_subagents(str(tmp_path / "missing")) == []


def test_count_subagents(tmp_path):
    directory = tmp_path / "subagents"
    directory.mkdir()

    assert count_subagents(str(directory)) == 0
    assert count_subagents("/nonexistent/subagents") == 0
    assert count_subagents("") == 0

    for name in ("agent1.jsonl", "agent2.jsonl", "notes.txt", "readme.md"):
        _touch(directory / name)
    assert count_subagents(str(directory)) == 2


def test_count_subagents_ignores_directories(tmp_path):
    directory = tmp_path / "subagents"
    (directory / "nested.jsonl").mkdir(parents=True)
    _touch(directory / "agent1.jsonl")
    assert count_subagents(str(directory)) == 1