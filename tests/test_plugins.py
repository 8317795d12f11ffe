import os

from claudeview.plugins import (
    PluginItem,
    count_agents,
    count_commands,
    count_hooks,
    count_mcps,
    count_skills,
    list_agents,
    list_commands,
    list_hooks,
    list_mcps,
    list_plugin_items,
    list_skills,
    read_plugin_item_content,
)

MISSING = "/nonexistent/path/xyz"


def _write(path, content="content"):
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def test_count_skills_missing_dir():
    assert count_skills(MISSING) == 0


def test_count_skills_counts_only_subdirectories(tmp_path):
    skills = tmp_path / "skills"
    skills.mkdir()
    (skills / "skill1").mkdir()
    (skills / "skill2").mkdir()
    _write(skills / "README.md")
    assert count_skills(str(tmp_path)) == 2


def test_count_commands_missing_dir():
    assert count_commands(MISSING) == 0


def test_count_commands_counts_md_files(tmp_path):
    commands = tmp_path / "commands"
    commands.mkdir()
    for name in ("cmd1.md", "cmd2.md", "cmd3.md"):
        _write(commands / name)
    assert count_commands(str(tmp_path)) == 3


def test_count_commands_mixed_extensions(tmp_path):
    commands = tmp_path / "commands"
    commands.mkdir()
    _write(commands / "cmd1.md")
    _write(commands / "cmd2.json")
    assert count_commands(str(tmp_path)) == 1


def test_count_hooks_missing_dir():
    assert count_hooks(MISSING) == 0


def test_count_hooks_counts_all_files(tmp_path):
    hooks = tmp_path / "hooks"
    hooks.mkdir()
    for name in ("hook1.sh", "hook2.js", "hook3.py"):
        _write(hooks / name)
    assert count_hooks(str(tmp_path)) == 3


def test_count_hooks_prefers_hooks_json(tmp_path):
    hooks = tmp_path / "hooks"
    hooks.mkdir()
    _write(hooks / "hooks.json", '{"hooks":{"PreToolUse":[],"PostToolUse":[],"Stop":[]}}')
    _write(hooks / "extra.sh")
    assert count_hooks(str(tmp_path)) == 3


def test_content_dir_fallback(tmp_path):
    (tmp_path / "skills" / "my-skill").mkdir(parents=True)
    assert count_skills(str(tmp_path)) == 1


def test_content_dir_with_plugin_subdir(tmp_path):
    (tmp_path / "plugin" / "skills" / "skill-a").mkdir(parents=True)
    (tmp_path / "plugin" / "skills" / "skill-b").mkdir(parents=True)
    (tmp_path / "skills" / "decoy").mkdir(parents=True)
    assert count_skills(str(tmp_path)) == 2


def test_count_skills_counts_subdirs(tmp_path):
    skills = tmp_path / "skills"
    skills.mkdir()
    for name in ("brainstorming", "debugging", "tdd"):
        (skills / name).mkdir()
    _write(skills / "index.md")
    assert count_skills(str(tmp_path)) == 3


def test_list_skills(tmp_path):
    skills = tmp_path / "skills"
    skills.mkdir()
    (skills / "debugging").mkdir()
    (skills / "brainstorming").mkdir()
    _write(skills / "README.md")
    assert list_skills(str(tmp_path)) == ["brainstorming", "debugging"]


def test_list_commands_strips_extension(tmp_path):
    commands = tmp_path / "commands"
    commands.mkdir()
    _write(commands / "commit.md")
    _write(commands / "review-pr.md")
    assert list_commands(str(tmp_path)) == ["commit", "review-pr"]


def test_list_skills_missing_dir():
    assert list_skills(MISSING) == []


def test_list_hooks_from_json_sorted(tmp_path):
    hooks = tmp_path / "hooks"
    hooks.mkdir()
    _write(hooks / "hooks.json", '{"hooks":{"PreToolUse":[],"PostToolUse":[]}}')
    assert list_hooks(str(tmp_path)) == ["PostToolUse", "PreToolUse"]


def test_list_hooks_falls_back_to_file_names(tmp_path):
    hooks = tmp_path / "hooks"
    hooks.mkdir()
    _write(hooks / "lint.sh")
    _write(hooks / "format.py")
    assert list_hooks(str(tmp_path)) == ["format.py", "lint.sh"]


def test_list_agents(tmp_path):
    agents = tmp_path / "agents"
    agents.mkdir()
    _write(agents / "code-reviewer.md")
    assert list_agents(str(tmp_path)) == ["code-reviewer"]
    assert count_agents(str(tmp_path)) == 1


def test_list_mcps(tmp_path):
    _write(tmp_path / ".mcp.json", '{"mcpServers":{"my-server":{},"other-server":{}}}')
    assert list_mcps(str(tmp_path)) == ["my-server", "other-server"]


def test_list_mcps_from_plugin_json(tmp_path):
    (tmp_path / ".claude-plugin").mkdir()
    _write(tmp_path / ".claude-plugin" / "plugin.json", '{"mcpServers":{"srv":{}}}')
    assert list_mcps(str(tmp_path)) == ["srv"]


def test_list_plugin_items(tmp_path):
    skill_dir = tmp_path / "skills" / "debug"
    skill_dir.mkdir(parents=True)
    _write(skill_dir / "debug.md")
    (tmp_path / "commands").mkdir()
    _write(tmp_path / "commands" / "commit.md")

    items = list_plugin_items(str(tmp_path))
    assert [(i.name, i.category) for i in items] == [("debug", "skill"), ("commit", "command")]
    assert all(i.cache_dir == str(tmp_path) for i in items)


def test_read_skill_content(tmp_path):
    skill_dir = tmp_path / "skills" / "my-skill"
    skill_dir.mkdir(parents=True)
    _write(skill_dir / "my-skill.md", "skill content")
    item = PluginItem(name="my-skill", category="skill", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == "skill content"


def test_read_skill_without_markdown(tmp_path):
    (tmp_path / "skills" / "empty").mkdir(parents=True)
    item = PluginItem(name="empty", category="skill", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == "(no content found)"


def test_read_skill_missing_dir(tmp_path):
    item = PluginItem(name="gone", category="skill", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item).startswith("error reading skill directory: ")


def test_read_command_content(tmp_path):
    (tmp_path / "commands").mkdir()
    _write(tmp_path / "commands" / "commit.md", "commit docs")
    item = PluginItem(name="commit", category="command", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == "commit docs"


def test_read_missing_command(tmp_path):
    item = PluginItem(name="commit", category="command", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item).startswith("error reading command: ")


def test_read_agent_content(tmp_path):
    (tmp_path / "agents").mkdir()
    _write(tmp_path / "agents" / "reviewer.md", "review things")
    item = PluginItem(name="reviewer", category="agent", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == "review things"


def test_read_hook_from_json(tmp_path):
    (tmp_path / "hooks").mkdir()
    _write(tmp_path / "hooks" / "hooks.json", '{"hooks":{"PreToolUse":[{"matcher":"Bash"}]}}')
    item = PluginItem(name="PreToolUse", category="hook", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == '[\n  {\n    "matcher": "Bash"\n  }\n]'


def test_read_hook_from_file(tmp_path):
    (tmp_path / "hooks").mkdir()
    _write(tmp_path / "hooks" / "lint.sh", "echo lint")
    item = PluginItem(name="lint", category="hook", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == "echo lint"


def test_read_mcp_from_json(tmp_path):
    _write(tmp_path / ".mcp.json", '{"mcpServers":{"my-server":{"command":"npx","args":["server"]}}}')
    item = PluginItem(name="my-server", category="mcp", cache_dir=str(tmp_path))
    assert "npx" in read_plugin_item_content(item)


def test_read_mcp_normalizes_indentation(tmp_path):
    content = (
        '{\n  "mcpServers": {\n    "my-server": {\n      "command": "npx",\n'
        '      "args": ["server"]\n    }\n  }\n}'
    )
    _write(tmp_path / ".mcp.json", content)
    item = PluginItem(name="my-server", category="mcp", cache_dir=str(tmp_path))
    want = '{\n  "command": "npx",\n  "args": [\n    "server"\n  ]\n}'
    assert read_plugin_item_content(item) == want


def test_read_missing_mcp(tmp_path):
    item = PluginItem(name="nothing", category="mcp", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == "(no content found)"


def test_read_unknown_category(tmp_path):
    item = PluginItem(name="x", category="widget", cache_dir=str(tmp_path))
    assert read_plugin_item_content(item) == "(unknown category)"


def test_count_mcps_missing_file():
    assert count_mcps("/nonexistent/path") == 0


def test_count_mcps_parses_servers(tmp_path):
    _write(tmp_path / ".mcp.json", '{"mcpServers":{"server1":{},"server2":{},"server3":{}}}')
    assert count_mcps(str(tmp_path)) == 3


def test_count_mcps_empty_map(tmp_path):
    _write(tmp_path / ".mcp.json", '{"mcpServers":{}}')
    assert count_mcps(str(tmp_path)) == 0


def test_count_mcps_falls_through_empty_map(tmp_path):
    _write(tmp_path / ".mcp.json", '{"mcpServers":{}}')
    os.mkdir(tmp_path / ".claude-plugin")
    _write(tmp_path / ".claude-plugin" / "plugin.json", '{"mcpServers":{"a":{},"b":{}}}')
    assert count_mcps(str(tmp_path)) == 2