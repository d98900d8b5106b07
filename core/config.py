import tomli
from pydantic import BaseModel


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 4504
    static_dir: str = "ui"


class AgentsConfig(BaseModel):
    base_path: str = "~/.openclaw"
    identity_file: str = "IDENTITY.md"
    soul_file: str = "SOUL.md"
    # A directory name qualifies as an agent if it matches any of these
    name_prefixes: list[str] = ["workspace-"]
    name_contains: list[str] = ["feature-dev", "reviewer"]
    nested_dirs: list[str] = ["workspaces", "workspace"]


class SkillsConfig(BaseModel):
    system_path: str = "/usr/lib/node_modules/openclaw/skills"
    user_path: str = "~/.openclaw/skills"
    skill_file: str = "SKILL.md"
    user_prefix: str = "user:"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Config(BaseModel):
    server: ServerConfig = ServerConfig()
    agents: AgentsConfig = AgentsConfig()
    skills: SkillsConfig = SkillsConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: str = "config/default.toml") -> Config:
    """Load config from TOML file, validate with Pydantic."""
    with open(path, "rb") as f:
        data = tomli.load(f)
    return Config(**data)
