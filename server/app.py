import logging
import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from core.config import Config, load_config
from core.log import setup_logging
from scanner import get_agent, get_skill, scan_agents, scan_skills

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
CONFIG_ENV = "CLAWDOCS_CONFIG"

# Global state, initialized on startup
config: Config | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    global config

    config = load_config(os.environ.get(CONFIG_ENV, "config/default.toml"))
    setup_logging(config.logging)
    logger.info(f"Agents base path: {config.agents.base_path}")
    logger.info(f"Skill roots: {config.skills.system_path}, {config.skills.user_path}")

    yield

    config = None


app = FastAPI(title="ClawDocs", version=API_VERSION, lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"], allow_headers=["*"])


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response


def _config() -> Config:
    return config or Config()


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def _matches(query: str | None, *fields: str) -> bool:
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    return any(needle in (field or "").lower() for field in fields)


def _list_agents() -> list[Any]:
    cfg = _config()
    return scan_agents(cfg.agents.base_path, cfg.agents)


def _list_skills() -> list[Any]:
    cfg = _config()
    return scan_skills(cfg.skills.system_path, cfg.skills.user_path, cfg.skills)


@app.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "service": "clawdocs"}


@app.get("/api")
def api_root() -> dict[str, Any]:
    return {"message": "ClawDocs API", "version": API_VERSION}


@app.get("/api/agents")
def list_agents(q: str | None = None) -> Any:
    try:
        agents = _list_agents()
    except Exception as e:
        logger.exception("Error fetching agents")
        return error_response(500, "Failed to fetch agents", str(e))
    return [asdict(a) for a in agents if _matches(q, a.name, a.role, a.description)]


@app.get("/api/agents/{agent_id}")
def read_agent(agent_id: str) -> Any:
    cfg = _config()
    try:
        agent = get_agent(agent_id, cfg.agents.base_path, cfg.agents)
    except Exception as e:
        logger.exception("Error fetching agent")
        return error_response(500, "Failed to fetch agent", str(e))
    if agent is None:
        return error_response(404, "Agent not found", f"No agent found with ID: {agent_id}")
    return asdict(agent)


@app.get("/api/skills")
def list_skills(q: str | None = None) -> Any:
    try:
        skills = _list_skills()
    except Exception as e:
        logger.exception("Error fetching skills")
        return error_response(500, "Failed to fetch skills", str(e))
    return [asdict(s) for s in skills if _matches(q, s.name, s.description)]


@app.get("/api/skills/{name}")
def read_skill(name: str) -> Any:
    cfg = _config()
    try:
        skill = get_skill(name, cfg.skills.system_path, cfg.skills.user_path, cfg.skills)
    except Exception as e:
        logger.exception("Error fetching skill")
        return error_response(500, "Failed to fetch skill", str(e))
    if skill is None:
        return error_response(404, "Skill not found", f"No skill found with name: {name}")
    return asdict(skill)


@app.get("/api/stats")
def stats() -> Any:
    try:
        total_agents = len(_list_agents())
        total_skills = len(_list_skills())
    except Exception as e:
        logger.exception("Error computing stats")
        return error_response(500, "Failed to compute stats", str(e))
    return {
        "timestamp": datetime.now().isoformat(),
        "total_agents": total_agents,
        "total_skills": total_skills,
    }


# Must stay last: everything not matched above is either an unknown API
# route or a dashboard path served from the static directory.
@app.get("/{full_path:path}")
def static_or_spa(full_path: str) -> Any:
    if full_path == "api" or full_path.startswith("api/"):
        return error_response(404, "Not found", f"No API route: /{full_path}")

    static_dir = Path(_config().server.static_dir).resolve()
    index = static_dir / "index.html"

    if full_path:
        candidate = (static_dir / full_path).resolve()
        if candidate.is_relative_to(static_dir) and candidate.is_file():
            return FileResponse(candidate)

    if index.is_file():
        return FileResponse(index)
    return error_response(404, "Not found", f"No such path: /{full_path}")
