from scanner.agents import get_agent, scan_agents, scan_agents_report
from scanner.skills import get_skill, parse_skill_file, scan_dir, scan_skills, scan_skills_report

__all__ = [
    "get_agent",
    "get_skill",
    "parse_skill_file",
    "scan_agents",
    "scan_agents_report",
    "scan_dir",
    "scan_skills",
    "scan_skills_report",
]
