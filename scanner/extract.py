"""
Field extraction from identity, soul and skill documents.

Each field is resolved by an ordered chain of strategies. A strategy takes
``(metadata, body)`` and returns a string, or ``None`` when it has nothing
to offer; the first non-empty answer wins.
"""

import re
from collections.abc import Callable, Iterable
from typing import Any

from core.types import Identity, Soul
from scanner.frontmatter import split_frontmatter

Strategy = Callable[[dict[str, Any], str], str | None]

SOUL_DESCRIPTION_MAX_CHARS = 200
SKILL_DESCRIPTION_MAX_CHARS = 300
SKILL_DESCRIPTION_MAX_LINES = 2


def metadata_field(*keys: str) -> Strategy:
    """Take the first truthy value among ``keys`` in the frontmatter."""

    def strategy(metadata: dict[str, Any], body: str) -> str | None:
        for key in keys:
            value = metadata.get(key)
            if value:
                return str(value)
        return None

    return strategy


def body_pattern(pattern: str, flags: int = 0) -> Strategy:
    """Take the first capture group of ``pattern`` searched in the body."""
    regex = re.compile(pattern, flags)

    def strategy(metadata: dict[str, Any], body: str) -> str | None:
        match = regex.search(body)
        return match.group(1).strip() if match else None

    return strategy


def first_match(
    strategies: Iterable[Strategy],
    metadata: dict[str, Any],
    body: str,
    default: str = "",
) -> str:
    for strategy in strategies:
        value = strategy(metadata, body)
        if value:
            return value
    return default


# --- Identity -------------------------------------------------------------

NAME_FROM_BODY = (body_pattern(r"\*\*Name:\*\*\s*(.+)"),)
ROLE_FROM_BODY = (body_pattern(r"\*\*Creature:\*\*\s*(.+)"),)
EMOJI_FROM_BODY = (body_pattern(r"\*\*Emoji:\*\*\s*(.+)"),)

ROLE_FROM_METADATA = (metadata_field("role", "creature"),)
EMOJI_FROM_METADATA = (metadata_field("emoji"),)


def _identity_from_frontmatter(metadata: dict[str, Any], body: str) -> Identity | None:
    name = metadata_field("name")(metadata, body)
    if not name:
        return None
    return Identity(
        name=name,
        role=first_match(ROLE_FROM_METADATA, metadata, body),
        emoji=first_match(EMOJI_FROM_METADATA, metadata, body),
    )


def _identity_from_markdown(metadata: dict[str, Any], body: str) -> Identity:
    return Identity(
        name=first_match(NAME_FROM_BODY, metadata, body, default="Unknown"),
        role=first_match(ROLE_FROM_BODY, metadata, body),
        emoji=first_match(EMOJI_FROM_BODY, metadata, body),
    )


# Frontmatter wins only when it names the agent; otherwise the whole
# identity comes from "**Field:** value" lines in the body.
IDENTITY_STRATEGIES: tuple[Callable[[dict[str, Any], str], Identity | None], ...] = (
    _identity_from_frontmatter,
    _identity_from_markdown,
)


def parse_identity(text: str) -> Identity:
    metadata, body = split_frontmatter(text)
    for strategy in IDENTITY_STRATEGIES:
        identity = strategy(metadata, body)
        if identity is not None:
            return identity
    return Identity(name="Unknown", role="", emoji="")


# --- Soul -----------------------------------------------------------------

# The bold form is tried before the plain one, which would otherwise
# capture the closing "**" as part of the value.
MODEL_STRATEGIES = (
    metadata_field("model"),
    body_pattern(r"Primary:\s*(.+)", re.IGNORECASE),
    body_pattern(r"\*\*Model:\*\*\s*(.+)", re.IGNORECASE),
    body_pattern(r"Model:\s*(.+)", re.IGNORECASE),
)

LEADING_PARAGRAPH = re.compile(r"\s*\n([^#\n].*?)(?=\n\n|\n##|$)", re.DOTALL)


def _leading_paragraph(metadata: dict[str, Any], body: str) -> str | None:
    """First line of the paragraph that follows a leading blank line."""
    match = LEADING_PARAGRAPH.match(body)
    if not match:
        return None
    return match.group(1).strip()[:SOUL_DESCRIPTION_MAX_CHARS].split("\n")[0]


SOUL_DESCRIPTION_STRATEGIES = (
    metadata_field("description"),
    _leading_paragraph,
)


def parse_soul(text: str) -> Soul:
    metadata, body = split_frontmatter(text)
    return Soul(
        model=first_match(MODEL_STRATEGIES, metadata, body),
        description=first_match(SOUL_DESCRIPTION_STRATEGIES, metadata, body),
    )


# --- Skill ----------------------------------------------------------------


def _first_body_lines(metadata: dict[str, Any], body: str) -> str | None:
    """Join the first run of up to two text lines, skipping headings and blanks."""
    lines: list[str] = []
    for line in body.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            if lines:
                break
            continue
        lines.append(stripped)
        if len(lines) >= SKILL_DESCRIPTION_MAX_LINES:
            break
    return " ".join(lines)[:SKILL_DESCRIPTION_MAX_CHARS] or None


SKILL_NAME_STRATEGIES = (metadata_field("name"),)

SKILL_DESCRIPTION_STRATEGIES = (
    metadata_field("description"),
    _first_body_lines,
)


def skill_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """The nested ``metadata`` mapping of a skill's frontmatter, if any."""
    value = metadata.get("metadata")
    return dict(value) if isinstance(value, dict) else {}
