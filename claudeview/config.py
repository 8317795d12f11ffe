"""Reading the user's settings and installed-plugin records."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class ConfigError(ValueError):
    """A configuration file holds JSON of the wrong shape."""


@dataclass
class InstalledPlugin:
    """An entry of ``installed_plugins.json``."""

    name: str = ""
    version: str = ""
    marketplace: str = ""
    scope: str = ""
    project_path: str = ""
    installed_at: str = ""
    cache_dir: str = ""


@dataclass
class MCPServer:
    """Configuration of a single MCP server."""

    command: str = ""
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    type: str = ""
    url: str = ""


@dataclass
class Settings:
    """Contents of ``settings.json``."""

    model: str = ""
    enabled_mcp_jsons: list[str] = field(default_factory=list)
    mcp_servers: dict[str, MCPServer] = field(default_factory=dict)
    hooks: dict[str, Any] = field(default_factory=dict)
    permissions: dict[str, Any] = field(default_factory=dict)


def _load_json(path: str) -> Any:
    """Parsed JSON at ``path``; ``None`` when the file does not exist."""
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        return None
    return json.loads(data)


def _object(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{what} is not a JSON object")
    return value


def _string(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"field {key!r} is not a string")
    return value


def _strings(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(v is None or isinstance(v, str) for v in value):
        raise ConfigError(f"{what} is not a list of strings")
    return [v or "" for v in value]


def _bool_map(value: Any) -> dict[str, bool] | None:
    if value is None:
        return {}
    if not isinstance(value, dict):
        return None
    if not all(v is None or isinstance(v, bool) for v in value.values()):
        return None
    return {k: bool(v) for k, v in value.items()}


def plugin_cache_dir(claude_dir: str, marketplace: str, name: str, version: str) -> str:
    """Where a plugin's files are cached."""
    return os.path.join(claude_dir, "plugins", "cache", marketplace, name, version)


def _v2_plugins(data: Any) -> list[InstalledPlugin] | None:
    if not isinstance(data, dict):
        return None
    version = data.get("version")
    if isinstance(version, bool) or not isinstance(version, int) or version != 2:
        return None
    entries_by_key = data.get("plugins")
    if not isinstance(entries_by_key, dict):
        return None
    plugins = []
    try:
        for key, entries in entries_by_key.items():
            name, _, marketplace = key.rpartition("@")
            if not _:
                name, marketplace = key, ""
            if entries is None:
                continue
            if not isinstance(entries, list):
                return None
            for raw in entries:
                entry = _object(raw, "plugin entry")
                plugins.append(
                    InstalledPlugin(
                        name=name,
                        version=_string(entry, "version"),
                        marketplace=marketplace,
                        scope=_string(entry, "scope"),
                        project_path=_string(entry, "projectPath"),
                        installed_at=_string(entry, "installedAt"),
                        cache_dir=_string(entry, "installPath"),
                    )
                )
    except ConfigError:
        return None
    plugins.sort(key=lambda p: p.installed_at, reverse=True)
    return plugins


def _v1_plugin(claude_dir: str, raw: Any, name: str | None = None) -> InstalledPlugin:
    entry = _object(raw, "plugin entry")
    plugin_name = _string(entry, "name")
    if name is not None:
        plugin_name = name
    version = _string(entry, "version")
    marketplace = _string(entry, "marketplace")
    return InstalledPlugin(
        name=plugin_name,
        version=version,
        marketplace=marketplace,
        installed_at=_string(entry, "installedAt"),
        cache_dir=plugin_cache_dir(claude_dir, marketplace, plugin_name, version),
    )


def load_installed_plugins(claude_dir: str) -> list[InstalledPlugin]:
    """Read ``plugins/installed_plugins.json`` in its v2, v1 list or v1 map format.

    A missing file yields an empty list; unreadable or malformed files raise.
    """
    data = _load_json(os.path.join(claude_dir, "plugins", "installed_plugins.json"))

    plugins = _v2_plugins(data)
    if plugins is not None:
        return plugins

    if data is None:
        return []
    if isinstance(data, list):
        return [_v1_plugin(claude_dir, raw) for raw in data]
    if isinstance(data, dict):
        return [_v1_plugin(claude_dir, raw, name) for name, raw in data.items()]
    raise ConfigError("installed plugins file is neither a list nor an object")


def project_enabled_plugins(project_root: str) -> dict[str, bool]:
    """Merged ``enabledPlugins`` of a project's ``.claude/settings.json`` and ``settings.local.json``."""
    merged: dict[str, bool] = {}
    for name in ("settings.json", "settings.local.json"):
        try:
            data = _load_json(os.path.join(project_root, ".claude", name))
        except (OSError, ValueError):
            continue
        if not isinstance(data, dict) or "enabledPlugins" not in data:
            continue
        enabled = _bool_map(data["enabledPlugins"])
        if enabled is not None:
            merged.update(enabled)
    return merged


def enabled_plugins(claude_dir: str) -> dict[str, bool]:
    """The ``enabledPlugins`` map of ``settings.json``; a list of names counts as all enabled."""
    try:
        data = _load_json(os.path.join(claude_dir, "settings.json"))
    except (OSError, ValueError):
        return {}
    if not isinstance(data, dict) or "enabledPlugins" not in data:
        return {}
    raw = data["enabledPlugins"]
    enabled = _bool_map(raw)
    if enabled is not None:
        return enabled
    try:
        names = _strings(raw, "enabledPlugins")
    except ConfigError:
        return {}
    return {name: True for name in names}


def _mcp_server(raw: Any) -> MCPServer:
    entry = _object(raw, "MCP server")
    env = _object(entry.get("env"), "env")
    if not all(v is None or isinstance(v, str) for v in env.values()):
        raise ConfigError("env is not a map of strings")
    return MCPServer(
        command=_string(entry, "command"),
        args=_strings(entry.get("args"), "args"),
        env={k: v or "" for k, v in env.items()},
        type=_string(entry, "type"),
        url=_string(entry, "url"),
    )


def load_settings(claude_dir: str) -> Settings:
    """Load ``settings.json``; a missing file gives default settings, a malformed one raises."""
    doc = _object(_load_json(os.path.join(claude_dir, "settings.json")), "settings")
    servers = _object(doc.get("mcpServers"), "mcpServers")
    return Settings(
        model=_string(doc, "model"),
        enabled_mcp_jsons=_strings(doc.get("enabledMcpjsons"), "enabledMcpjsons"),
        mcp_servers={name: _mcp_server(raw) for name, raw in servers.items()},
        hooks=dict(_object(doc.get("hooks"), "hooks")),
        permissions=dict(_object(doc.get("permissions"), "permissions")),
    )


def claude_dir() -> str:
    """The default ``~/.claude`` directory."""
    return os.path.join(os.path.expanduser("~"), ".claude")