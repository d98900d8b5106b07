import pytest

from core.config import AgentsConfig, Config, load_config


def write(path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def config() -> Config:
    """Load default config for tests."""
    return load_config()


@pytest.fixture
def agents_root(tmp_path):
    """Agent tree covering frontmatter, inline markdown, missing soul and non-agents."""
    base = tmp_path / "openclaw"

    write(
        base / "workspace-test-agent-1" / "IDENTITY.md",
        "---\nname: TestAgent1\nrole: Developer\nemoji: 🤖\n---\n\n# Test Agent 1\n",
    )
    write(
        base / "workspace-test-agent-1" / "SOUL.md",
        "---\nmodel: gpt-4\ndescription: A test agent for unit testing\n---\n\n"
        "# SOUL.md\n\nPrimary: gpt-4\n\nThis is a test agent description.\n",
    )

    write(
        base / "workspace-test-agent-2" / "IDENTITY.md",
        "# IDENTITY.md\n\n- **Name:** TestAgent2\n- **Creature:** AI Agent, Reviewer\n"
        "- **Vibe:** Professional\n- **Emoji:** 🔍\n",
    )
    write(
        base / "workspace-test-agent-2" / "SOUL.md",
        "# SOUL.md: TestAgent2\n\nPrimary: claude-3-opus\n\nReviewer agent that checks code quality.\n",
    )

    write(
        base / "workspace-test-agent-3" / "IDENTITY.md",
        "---\nname: TestAgent3\nrole: Minimal Agent\nemoji: ⚡\n---\n",
    )

    write(base / "workspace-empty" / "notes.txt", "no identity here")
    write(base / "not-an-agent" / "some-file.txt", "not an agent")
    write(base / "not-an-agent" / "IDENTITY.md", "---\nname: Hidden\n---\n")

    write(
        base / "workspaces" / "feature-flow" / "planner" / "IDENTITY.md",
        "---\nname: Planner\ncreature: Strategist\n---\n",
    )
    write(base / "workspaces" / "feature-flow" / "scratch" / "todo.md", "# scratch\n")
    return base


@pytest.fixture
def skill_roots(tmp_path):
    """System and user skill roots that both define ``test-skill``."""
    system = tmp_path / "system"
    user = tmp_path / "user"

    write(
        system / "test-skill" / "SKILL.md",
        "---\nname: test-skill\ndescription: A test skill for unit testing\n"
        "metadata:\n  version: 1.0.0\n  author: tester\n  tags: [testing, demo]\n---\n\n"
        "# Test Skill\n\nThis is a test skill used for unit testing the scanner.\n",
    )
    write(
        system / "inline-skill" / "SKILL.md",
        "# Inline Skill\n\nThis skill has no frontmatter, just content.\n\n## Usage\n\nSome usage instructions here.\n",
    )
    write(system / "no-skill-file" / "README.md", "# Not a skill\n")

    write(
        user / "test-skill" / "SKILL.md",
        "---\nname: test-skill\ndescription: User override of test skill\n---\n\n"
        "# User Test Skill\n\nThis is the user version.\n",
    )
    write(
        user / "user-only-skill" / "SKILL.md",
        "---\nname: user-only-skill\ndescription: Only exists in user directory\n"
        "metadata:\n  openclaw:\n    emoji: 🎉\n---\n\n# User Only Skill\n",
    )
    return system, user


@pytest.fixture
def temp_config(tmp_path, agents_root, skill_roots):
    """Create a temp config TOML pointing at the test trees."""
    system, user = skill_roots
    static_dir = tmp_path / "static"
    write(static_dir / "index.html", "<!DOCTYPE html><html><body><div id=\"root\">ClawDocs</div></body></html>")
    write(static_dir / "assets" / "app.js", "console.log('clawdocs');")

    toml_content = f"""
[server]
host = "127.0.0.1"
port = 4504
static_dir = "{static_dir.as_posix()}"
[agents]
base_path = "{agents_root.as_posix()}"
[skills]
system_path = "{system.as_posix()}"
user_path = "{user.as_posix()}"
[logging]
level = "DEBUG"
"""
    config_path = tmp_path / "test.toml"
    config_path.write_text(toml_content)
    return load_config(str(config_path))


@pytest.fixture
def criteria() -> AgentsConfig:
    return AgentsConfig()


@pytest.fixture
def write_file():
    """Write a file, creating parent directories."""
    return write
