from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class SkipReason(StrEnum):
    NAME_NOT_ALLOWED = "name_not_allowed"
    MISSING_IDENTITY = "missing_identity"
    MISSING_SKILL_FILE = "missing_skill_file"
    READ_ERROR = "read_error"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class Identity:
    name: str
    role: str
    emoji: str


@dataclass(frozen=True)
class Soul:
    model: str
    description: str


@dataclass
class AgentRecord:
    id: str
    name: str
    role: str
    model: str
    description: str


@dataclass
class SkillRecord:
    id: str
    name: str
    description: str
    location: str  # absolute path, "user:"-prefixed for user skills
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScanOutcome:
    """Result of examining one directory: a record, or why it was skipped."""

    path: str
    record: Any = None
    reason: SkipReason | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass
class ScanReport:
    outcomes: list[ScanOutcome] = field(default_factory=list)

    def add(self, outcome: ScanOutcome) -> None:
        self.outcomes.append(outcome)

    def extend(self, other: "ScanReport") -> None:
        self.outcomes.extend(other.outcomes)

    @property
    def records(self) -> list[Any]:
        return [o.record for o in self.outcomes if o.ok]

    @property
    def skipped(self) -> list[ScanOutcome]:
        return [o for o in self.outcomes if not o.ok]
