import json
import os
import sys
from dataclasses import asdict

import uvicorn
from fastapi.encoders import jsonable_encoder

from core.config import load_config
from core.log import setup_logging
from scanner import scan_agents, scan_skills

CONFIG_ENV = "CLAWDOCS_CONFIG"
DEFAULT_CONFIG = "config/default.toml"


def scan() -> None:
    """Scan once and print agents and skills as JSON, without the server."""
    config = load_config(os.environ.get(CONFIG_ENV, DEFAULT_CONFIG))
    setup_logging(config.logging)

    agents = scan_agents(config.agents.base_path, config.agents)
    skills = scan_skills(config.skills.system_path, config.skills.user_path, config.skills)

    result = {
        "agents": [asdict(a) for a in agents],
        "skills": [asdict(s) for s in skills],
    }
    print(json.dumps(jsonable_encoder(result), indent=2, ensure_ascii=False))


def server() -> None:
    """Start FastAPI server for the dashboard API."""
    config = load_config(os.environ.get(CONFIG_ENV, DEFAULT_CONFIG))
    setup_logging(config.logging)
    print(f"ClawDocs server: http://{config.server.host}:{config.server.port}")
    uvicorn.run(
        "server.app:app",
        host=config.server.host,
        port=config.server.port,
        reload=False,
    )


if __name__ == "__main__":
    if "--scan" in sys.argv:
        scan()
    else:
        server()
