"""
Skill discovery across a system root and a user root.

Each skill is a directory containing ``SKILL.md``. When both roots define a
skill with the same name, the user skill replaces the system one and its
location is tagged with the user prefix (``user:/path/to/skill``).
"""

import dataclasses
import logging
import os

from core.config import SkillsConfig
from core.types import ScanOutcome, ScanReport, SkillRecord, SkipReason
from scanner.extract import (
    SKILL_DESCRIPTION_STRATEGIES,
    SKILL_NAME_STRATEGIES,
    first_match,
    skill_metadata,
)
from scanner.frontmatter import split_frontmatter

logger = logging.getLogger(__name__)


def _parse_skill_outcome(skill_file: str) -> ScanOutcome:
    skill_dir = os.path.dirname(os.path.abspath(skill_file))
    skill_id = os.path.basename(skill_dir)

    try:
        with open(skill_file, encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Error reading skill file {skill_file}: {e}")
        return ScanOutcome(path=skill_dir, reason=SkipReason.READ_ERROR, detail=str(e))

    try:
        metadata, body = split_frontmatter(content)
        record = SkillRecord(
            id=skill_id,
            name=first_match(SKILL_NAME_STRATEGIES, metadata, body, default=skill_id),
            description=first_match(SKILL_DESCRIPTION_STRATEGIES, metadata, body),
            location=skill_dir,
            metadata=skill_metadata(metadata),
        )
    except Exception as e:
        logger.warning(f"Error parsing skill file {skill_file}: {type(e).__name__}: {e}")
        return ScanOutcome(path=skill_dir, reason=SkipReason.PARSE_ERROR, detail=str(e))

    return ScanOutcome(path=skill_dir, record=record)


def parse_skill_file(skill_file: str) -> SkillRecord | None:
    """Parse one SKILL.md; ``None`` if it cannot be read or parsed."""
    return _parse_skill_outcome(skill_file).record


def scan_dir_report(skills_path: str, skill_file: str = "SKILL.md") -> ScanReport:
    skills_path = os.path.abspath(os.path.expanduser(skills_path))
    report = ScanReport()

    if not os.path.isdir(skills_path):
        logger.warning(f"Skills path does not exist: {skills_path}")
        return report

    try:
        entries = sorted(entry.path for entry in os.scandir(skills_path) if entry.is_dir())
    except OSError as e:
        logger.error(f"Error scanning skills directory {skills_path}: {e}")
        return report

    for skill_dir in entries:
        path = os.path.join(skill_dir, skill_file)
        if not os.path.isfile(path):
            report.add(ScanOutcome(path=skill_dir, reason=SkipReason.MISSING_SKILL_FILE))
            continue
        report.add(_parse_skill_outcome(path))

    logger.info(f"Scanned {skills_path}: {len(report.records)} skills, {len(report.skipped)} skipped")
    return report


def scan_dir(skills_path: str, skill_file: str = "SKILL.md") -> list[SkillRecord]:
    return scan_dir_report(skills_path, skill_file).records


def mark_user(skill: SkillRecord, prefix: str = "user:") -> SkillRecord:
    return dataclasses.replace(skill, location=f"{prefix}{skill.location}")


def merge_skills(
    system_skills: list[SkillRecord],
    user_skills: list[SkillRecord],
    prefix: str = "user:",
) -> list[SkillRecord]:
    """Deduplicate by name; a user skill takes the slot of the system skill it replaces."""
    merged: dict[str, SkillRecord] = {}
    for skill in system_skills:
        merged[skill.name] = skill
    for skill in user_skills:
        merged[skill.name] = mark_user(skill, prefix)
    return list(merged.values())


def scan_skills_report(
    system_path: str,
    user_path: str,
    settings: SkillsConfig | None = None,
) -> tuple[list[SkillRecord], ScanReport]:
    """Merged skills plus the combined per-directory report of both roots."""
    settings = settings or SkillsConfig()
    system_report = scan_dir_report(system_path, settings.skill_file)
    user_report = scan_dir_report(user_path, settings.skill_file)

    skills = merge_skills(system_report.records, user_report.records, settings.user_prefix)

    report = ScanReport()
    report.extend(system_report)
    report.extend(user_report)
    return skills, report


def scan_skills(system_path: str, user_path: str, settings: SkillsConfig | None = None) -> list[SkillRecord]:
    skills, _ = scan_skills_report(system_path, user_path, settings)
    return skills


def get_skill(
    name: str,
    system_path: str,
    user_path: str,
    settings: SkillsConfig | None = None,
) -> SkillRecord | None:
    """Look up a skill by directory name, user root first."""
    settings = settings or SkillsConfig()

    if not name or name in (".", "..") or os.sep in name or "/" in name:
        return None

    user_file = os.path.join(os.path.expanduser(user_path), name, settings.skill_file)
    if os.path.isfile(user_file):
        skill = parse_skill_file(user_file)
        if skill:
            return mark_user(skill, settings.user_prefix)

    system_file = os.path.join(os.path.expanduser(system_path), name, settings.skill_file)
    if os.path.isfile(system_file):
        return parse_skill_file(system_file)

    return None
