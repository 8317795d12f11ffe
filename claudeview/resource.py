"""Resource kinds that the dashboard can display, and their command aliases."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class ResourceType(str, Enum):
    """A kind of resource shown in the dashboard."""

    PROJECTS = "projects"
    SESSIONS = "sessions"
    AGENTS = "agents"
    PLUGINS = "plugins"
    MEMORY = "memories"
    PLUGIN_DETAIL = "plugin-detail"
    PLUGIN_ITEM_DETAIL = "plugin-item-detail"
    MEMORY_DETAIL = "memory-detail"

    def __str__(self) -> str:
        return self.value


RESOURCE_ALIASES = MappingProxyType(
    {
        "p": ResourceType.PROJECTS,
        "project": ResourceType.PROJECTS,
        "s": ResourceType.SESSIONS,
        "session": ResourceType.SESSIONS,
        "a": ResourceType.AGENTS,
        "agent": ResourceType.AGENTS,
        "pl": ResourceType.PLUGINS,
        "plugin": ResourceType.PLUGINS,
    }
)

_COMMAND_TARGETS = frozenset(
    {
        ResourceType.PROJECTS,
        ResourceType.SESSIONS,
        ResourceType.AGENTS,
        ResourceType.PLUGINS,
        ResourceType.MEMORY,
    }
)


def all_resource_names() -> list[str]:
    """Names and short aliases offered for command autocompletion."""
    return [
        ResourceType.PROJECTS.value, "p",
        ResourceType.SESSIONS.value, "s",
        ResourceType.AGENTS.value, "a",
        ResourceType.PLUGINS.value, "pl",
        ResourceType.MEMORY.value,
    ]


def resolve_resource(name: str) -> ResourceType | None:
    """Resolve an alias or full resource name; ``None`` if it names nothing."""
    alias = RESOURCE_ALIASES.get(name)
    if alias is not None:
        return alias
    try:
        resource = ResourceType(name)
    except ValueError:
        return None
    return resource if resource in _COMMAND_TARGETS else None