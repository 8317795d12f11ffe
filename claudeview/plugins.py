"""Installed plugins and the skills, commands, hooks, agents and MCP servers they ship."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

SKILL = "skill"
COMMAND = "command"
HOOK = "hook"
AGENT = "agent"
MCP = "mcp"

_NO_CONTENT = "(no content found)"


@dataclass
class Plugin:
    """An installed plugin with counts of what it provides."""

    name: str = ""
    version: str = ""
    marketplace: str = ""
    scope: str = ""
    enabled: bool = False
    installed_at: str = ""
    cache_dir: str = ""
    skill_count: int = 0
    command_count: int = 0
    hook_count: int = 0
    agent_count: int = 0
    mcp_count: int = 0


@dataclass
class PluginItem:
    """A single skill, command, hook, agent or MCP server within a plugin."""

    name: str = ""
    category: str = ""
    cache_dir: str = ""


def _ext(name: str) -> str:
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _read_bytes(path: str) -> bytes:
    return Path(path).read_bytes()


def _read_text(path: str) -> str:
    return _read_bytes(path).decode("utf-8", errors="replace")


def _entries(directory: str) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def _content_dir(cache_dir: str) -> str:
    """Directory holding the plugin content; some plugins nest it under ``plugin/``."""
    sub = os.path.join(cache_dir, "plugin")
    return sub if os.path.isdir(sub) else cache_dir


def _list_dir_names(directory: str) -> list[str]:
    try:
        entries = _entries(directory)
    except OSError:
        return []
    return [e.name for e in entries if e.is_dir(follow_symlinks=False)]


def _list_file_stems(directory: str, ext: str) -> list[str]:
    """File names in ``directory``; with ``ext`` only those files, extension stripped."""
    try:
        entries = _entries(directory)
    except OSError:
        return []
    names = []
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            continue
        name = entry.name
        if ext:
            if _ext(name) != ext:
                continue
            name = name[: -len(ext)]
        names.append(name)
    return names


def _hook_entries(hooks_dir: str) -> dict[str, Any] | None:
    """Event map from ``hooks/hooks.json``, or ``None`` if it is absent or unusable."""
    try:
        data = json.loads(_read_bytes(os.path.join(hooks_dir, "hooks.json")))
    except (OSError, ValueError):
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    hooks = data.get("hooks")
    if hooks is None:
        return {}
    if not isinstance(hooks, dict):
        return None
    return hooks


def _mcp_servers(cache_dir: str) -> dict[str, Any]:
    """The mcpServers map from ``.mcp.json`` or ``.claude-plugin/plugin.json``."""
    candidates = (
        os.path.join(_content_dir(cache_dir), ".mcp.json"),
        os.path.join(cache_dir, ".claude-plugin", "plugin.json"),
    )
    for path in candidates:
        try:
            data = json.loads(_read_bytes(path))
        except (OSError, ValueError):
            continue
        if not isinstance(data, dict):
            continue
        servers = data.get("mcpServers")
        if isinstance(servers, dict) and servers:
            return servers
    return {}


def _normalize_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def list_skills(cache_dir: str) -> list[str]:
    """Names of the skill subdirectories."""
    return _list_dir_names(os.path.join(_content_dir(cache_dir), "skills"))


def list_commands(cache_dir: str) -> list[str]:
    """Command names: ``.md`` files in ``commands/`` without the extension."""
    return _list_file_stems(os.path.join(_content_dir(cache_dir), "commands"), ".md")


def list_hooks(cache_dir: str) -> list[str]:
    """Hook event names from ``hooks.json``, or the file names in ``hooks/``."""
    hooks_dir = os.path.join(_content_dir(cache_dir), "hooks")
    hooks = _hook_entries(hooks_dir)
    if hooks is not None:
        return sorted(hooks)
    return _list_file_stems(hooks_dir, "")


def list_agents(cache_dir: str) -> list[str]:
    """Agent names: ``.md`` files in ``agents/`` without the extension."""
    return _list_file_stems(os.path.join(_content_dir(cache_dir), "agents"), ".md")


def list_mcps(cache_dir: str) -> list[str]:
    """Sorted MCP server names."""
    return sorted(_mcp_servers(cache_dir))


def count_skills(cache_dir: str) -> int:
    """Number of skill subdirectories."""
    return len(list_skills(cache_dir))


def count_commands(cache_dir: str) -> int:
    """Number of ``.md`` files in ``commands/``."""
    return len(list_commands(cache_dir))


def count_hooks(cache_dir: str) -> int:
    """Number of hook events in ``hooks.json``, else the number of files in ``hooks/``."""
    return len(list_hooks(cache_dir))


def count_agents(cache_dir: str) -> int:
    """Number of ``.md`` files in ``agents/``."""
    return len(list_agents(cache_dir))


def count_mcps(cache_dir: str) -> int:
    """Number of MCP servers declared by the plugin."""
    return len(_mcp_servers(cache_dir))


def list_plugin_items(cache_dir: str) -> list[PluginItem]:
    """Every item of every category the plugin provides."""
    listings = (
        (SKILL, list_skills),
        (COMMAND, list_commands),
        (HOOK, list_hooks),
        (AGENT, list_agents),
        (MCP, list_mcps),
    )
    return [
        PluginItem(name=name, category=category, cache_dir=cache_dir)
        for category, lister in listings
        for name in lister(cache_dir)
    ]


def _read_skill(content: str, name: str) -> str:
    skill_dir = os.path.join(content, "skills", name)
    try:
        entries = _entries(skill_dir)
    except OSError as exc:
        return f"error reading skill directory: {exc}"
    for entry in entries:
        if not entry.is_dir(follow_symlinks=False) and _ext(entry.name) == ".md":
            try:
                return _read_text(os.path.join(skill_dir, entry.name))
            except OSError as exc:
                return f"error reading {entry.name}: {exc}"
    return _NO_CONTENT


def _read_hook(content: str, name: str) -> str:
    hooks_dir = os.path.join(content, "hooks")
    hooks = _hook_entries(hooks_dir)
    if hooks is not None and name in hooks:
        return _normalize_json(hooks[name])
    try:
        entries = _entries(hooks_dir)
    except OSError as exc:
        return f"error reading hooks directory: {exc}"
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            continue
        ext = _ext(entry.name)
        stem = entry.name[: len(entry.name) - len(ext)]
        if stem == name:
            try:
                return _read_text(os.path.join(hooks_dir, entry.name))
            except OSError as exc:
                return f"error reading hook file: {exc}"
    return _NO_CONTENT


def read_plugin_item_content(item: PluginItem) -> str:
    """Text content of a plugin item; problems are described in the returned text."""
    content = _content_dir(item.cache_dir)
    if item.category == SKILL:
        return _read_skill(content, item.name)
    if item.category == COMMAND:
        try:
            return _read_text(os.path.join(content, "commands", item.name + ".md"))
        except OSError as exc:
            return f"error reading command: {exc}"
    if item.category == HOOK:
        return _read_hook(content, item.name)
    if item.category == AGENT:
        try:
            return _read_text(os.path.join(content, "agents", item.name + ".md"))
        except OSError as exc:
            return f"error reading agent: {exc}"
    if item.category == MCP:
        servers = _mcp_servers(item.cache_dir)
        if item.name in servers:
            return _normalize_json(servers[item.name])
        return _NO_CONTENT
    return "(unknown category)"