# claudeview

`claudeview` reads the files that Claude Code keeps under `~/.claude` and turns
them into plain Python objects: projects, sessions, agents, tool calls, installed
plugins and project memory notes. It is a library for building your own
dashboards, reports or scripts on top of your session history.

It uses only the standard library and supports Python 3.10 and later.

## Modules

- `claudeview.scanner`: `scan_projects`, `scan_subagents` and `count_subagents`
  find project directories and session transcripts under
  `<claude_dir>/projects/<hash>/<session-id>.jsonl`, together with any
  `<session-id>/subagents/` directory. Projects come most recently active first.
- `claudeview.transcript`: `parse`, `parse_file` and
  `parse_aggregates_incremental` read JSONL transcripts. They collect turns,
  tool calls matched with their results, token usage per model, turn counts,
  cost and a topic taken from the first real user message. Malformed lines are
  skipped; a line over 10 MiB raises `TranscriptError`.
- `claudeview.config`: `load_installed_plugins` (v2, v1 list and v1 map layouts
  of `plugins/installed_plugins.json`), `enabled_plugins`,
  `project_enabled_plugins`, `load_settings`, `plugin_cache_dir` and
  `claude_dir`. Files of the wrong shape raise `ConfigError`; missing files give
  empty results.
- `claudeview.plugins`: `Plugin`, `PluginItem`, the `count_*` and `list_*`
  functions for skills, commands, hooks, agents and MCP servers, plus
  `list_plugin_items` and `read_plugin_item_content`.
- `claudeview.models`: `Session`, `Agent`, `ToolCall`, `Project`, `Memory`,
  `TokenCount`, `Status` and `AgentType`, with display helpers such as
  `Session.token_string()`, `Session.topic_short()`, `Agent.display_name()` and
  `ToolCall.input_summary()`.
- `claudeview.resource`: `ResourceType`, `resolve_resource` and
  `all_resource_names` for the resource kinds and their short aliases
  (`p`, `s`, `a`, `pl`).
- `claudeview.providers`: `DemoDataProvider` (synthetic data) and
  `LiveDataProvider` (a real `.claude` directory), both offering
  `get_projects`, `get_sessions`, `get_agents`, `get_plugins` and
  `get_memories`. Also `parse_agents_from_session`, `md_title`,
  `detect_agent_type`, `current_user` and `detect_claude_version`, which runs
  `claude --version` and returns `"--"` if that fails.
- `claudeview.demo`: `generate_projects`, `generate_plugins` and
  `generate_memories`.
- `claudeview.formatting`: `format_age` and `format_size`, giving short forms
  such as `5m`, `2h`, `3d`, `1.5MB` and `512 bytes`.

## Examples

List projects and their sessions:

```python
from claudeview.config import claude_dir
from claudeview.scanner import scan_projects

for project in scan_projects(claude_dir()):
    print(project.hash, len(project.sessions))
```

Parse one transcript:

```python
from claudeview.transcript import parse_file

result = parse_file("/path/to/session.jsonl")
print(result.topic, result.total_tool_calls)
for model_name, usage in result.tokens_by_model.items():
    print(model_name, usage.input_tokens, usage.output_tokens)
```

Follow a growing transcript; the aggregates remember where the last read stopped:

```python
from claudeview.transcript import parse_aggregates_incremental

agg = parse_aggregates_incremental("/path/to/session.jsonl", None)
# ... after more lines were appended ...
agg = parse_aggregates_incremental("/path/to/session.jsonl", agg)
print(agg.num_turns, agg.total_tool_calls, agg.offset)
```

Browse live data through a provider:

```python
from claudeview.config import claude_dir
from claudeview.providers import LiveDataProvider

provider = LiveDataProvider(claude_dir())
for session in provider.get_sessions(""):
    print(session.short_id(), session.meta_line(), session.topic_short(40))
```

Inspect installed plugins:

```python
from claudeview.config import claude_dir, load_installed_plugins
from claudeview.plugins import list_plugin_items, read_plugin_item_content

for plugin in load_installed_plugins(claude_dir()):
    print(plugin.name, plugin.version, plugin.scope)
    for item in list_plugin_items(plugin.cache_dir):
        print("  ", item.category, item.name)
```

Work with synthetic data without touching `~/.claude`:

```python
from claudeview.providers import DemoDataProvider

provider = DemoDataProvider()
for session in provider.get_sessions(""):
    print(session.short_id(), session.token_string(), session.topic_short(40))
```

## What it does not do

`claudeview` has no interactive terminal dashboard and installs no command. It
provides the data, models and providers such a screen would draw from; showing
them, navigating between them and refreshing them is left to your own code.