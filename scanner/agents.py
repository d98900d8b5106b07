"""
Agent discovery.

An agent is a directory holding an identity document (``IDENTITY.md``) and,
optionally, a soul document (``SOUL.md``). Two layouts are recognised under
the base path:

    <base>/workspace-<agent>/IDENTITY.md
    <base>/workspaces/<workflow>/<agent>/IDENTITY.md

Top-level directories must pass the configured name heuristic; directories
reached through the nested layout only need an identity document.
"""

import logging
import os

from core.config import AgentsConfig
from core.types import AgentRecord, ScanOutcome, ScanReport, SkipReason
from scanner.extract import parse_identity, parse_soul

logger = logging.getLogger(__name__)


def is_candidate(name: str, criteria: AgentsConfig) -> bool:
    """Top-level directories are only scanned when they carry an agent prefix."""
    return any(name.startswith(prefix) for prefix in criteria.name_prefixes)


def is_agent_name(name: str, criteria: AgentsConfig) -> bool:
    return is_candidate(name, criteria) or any(part in name for part in criteria.name_contains)


def _read_text(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def scan_agent_dir(agent_path: str, criteria: AgentsConfig, nested: bool = False) -> ScanOutcome:
    """Build the record for one agent directory, or report why there is none."""
    agent_id = os.path.basename(os.path.normpath(agent_path))

    if not nested and not is_agent_name(agent_id, criteria):
        return ScanOutcome(path=agent_path, reason=SkipReason.NAME_NOT_ALLOWED)

    identity_path = os.path.join(agent_path, criteria.identity_file)
    soul_path = os.path.join(agent_path, criteria.soul_file)

    if not os.path.isfile(identity_path):
        return ScanOutcome(path=agent_path, reason=SkipReason.MISSING_IDENTITY)

    try:
        identity = parse_identity(_read_text(identity_path))
        model = ""
        description = ""
        if os.path.isfile(soul_path):
            soul = parse_soul(_read_text(soul_path))
            model = soul.model
            description = soul.description
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Error reading agent {agent_id}: {e}")
        return ScanOutcome(path=agent_path, reason=SkipReason.READ_ERROR, detail=str(e))
    except Exception as e:
        logger.warning(f"Error parsing agent {agent_id}: {type(e).__name__}: {e}")
        return ScanOutcome(path=agent_path, reason=SkipReason.PARSE_ERROR, detail=str(e))

    record = AgentRecord(
        id=agent_id,
        name=identity.name,
        role=identity.role,
        model=model,
        description=description,
    )
    return ScanOutcome(path=agent_path, record=record)


def _subdirs(path: str) -> list[str]:
    return sorted(entry.path for entry in os.scandir(path) if entry.is_dir())


def _scan_nested(workspaces_path: str, criteria: AgentsConfig, report: ScanReport) -> None:
    try:
        workflows = _subdirs(workspaces_path)
    except OSError as e:
        logger.warning(f"Cannot list {workspaces_path}: {e}")
        return

    for workflow_path in workflows:
        try:
            agent_paths = _subdirs(workflow_path)
        except OSError as e:
            logger.warning(f"Cannot list {workflow_path}: {e}")
            continue
        for agent_path in agent_paths:
            report.add(scan_agent_dir(agent_path, criteria, nested=True))


def scan_agents_report(base_path: str, criteria: AgentsConfig | None = None) -> ScanReport:
    """Scan ``base_path`` and keep every per-directory outcome, skipped ones included."""
    criteria = criteria or AgentsConfig()
    base_path = os.path.expanduser(base_path)
    report = ScanReport()

    if not os.path.isdir(base_path):
        logger.warning(f"Base path does not exist: {base_path}")
        return report

    try:
        entries = _subdirs(base_path)
    except OSError as e:
        logger.error(f"Error scanning agents in {base_path}: {e}")
        return report

    for entry_path in entries:
        name = os.path.basename(entry_path)
        if name in criteria.nested_dirs:
            _scan_nested(entry_path, criteria, report)
        elif is_candidate(name, criteria):
            report.add(scan_agent_dir(entry_path, criteria))
        else:
            report.add(ScanOutcome(path=entry_path, reason=SkipReason.NAME_NOT_ALLOWED))

    for outcome in report.skipped:
        logger.debug(f"Skipped {outcome.path}: {outcome.reason}")
    logger.info(f"Scanned {base_path}: {len(report.records)} agents, {len(report.skipped)} skipped")
    return report


def scan_agents(base_path: str, criteria: AgentsConfig | None = None) -> list[AgentRecord]:
    return scan_agents_report(base_path, criteria).records


def get_agent(agent_id: str, base_path: str, criteria: AgentsConfig | None = None) -> AgentRecord | None:
    """Look up one agent by directory name, top level first, then nested workflows."""
    criteria = criteria or AgentsConfig()
    base_path = os.path.expanduser(base_path)

    if not agent_id or agent_id in (".", "..") or os.sep in agent_id or "/" in agent_id:
        return None

    agent_path = os.path.join(base_path, agent_id)
    if os.path.isdir(agent_path):
        return scan_agent_dir(agent_path, criteria).record

    for nested_dir in criteria.nested_dirs:
        workspaces_path = os.path.join(base_path, nested_dir)
        if not os.path.isdir(workspaces_path):
            continue
        try:
            workflows = _subdirs(workspaces_path)
        except OSError as e:
            logger.warning(f"Cannot list {workspaces_path}: {e}")
            continue
        for workflow_path in workflows:
            candidate = os.path.join(workflow_path, agent_id)
            if os.path.isdir(candidate):
                return scan_agent_dir(candidate, criteria, nested=True).record

    return None
