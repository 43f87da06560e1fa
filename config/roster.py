"""
Roster of student IDs allowed to register.

The roster is the single source of truth for which student IDs may join
and at which group and access level. It is provisioned out of band as a
JSON file and loaded once per process.
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from database.models import AccessLevel
from .settings import settings, ConfigurationError

DEFAULT_ROSTER_PATH = Path(__file__).with_name("roster.json")


def normalize_student_id(student_id: str) -> str:
    """Canonical form of a roster key (trimmed, upper-case)."""
    return student_id.strip().upper()


class RosterEntry(BaseModel):
    """Enrollment descriptor for a single roster student ID."""
    group_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    access_level: AccessLevel = AccessLevel.STUDENT


class Roster:
    """Read-only mapping from canonical student ID to RosterEntry."""

    def __init__(self, entries: Mapping[str, RosterEntry]):
        self._entries: Dict[str, RosterEntry] = {
            normalize_student_id(key): entry for key, entry in entries.items()
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Mapping]) -> "Roster":
        try:
            entries = {key: RosterEntry.model_validate(value) for key, value in raw.items()}
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid roster entry: {e}", setting="roster_path") from e
        return cls(entries)

    def get(self, student_id: str) -> Optional[RosterEntry]:
        return self._entries.get(normalize_student_id(student_id))

    def __contains__(self, student_id: str) -> bool:
        return normalize_student_id(student_id) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def group_ids(self) -> set[int]:
        """Distinct group IDs referenced by the roster."""
        return {entry.group_id for entry in self._entries.values()}


def load_roster(path: Optional[str] = None) -> Roster:
    """
    Load a roster from a JSON file.

    Args:
        path: File to read; defaults to ROSTER_PATH or the bundled roster

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    roster_file = Path(path or settings.roster_path or DEFAULT_ROSTER_PATH)
    try:
        raw = json.loads(roster_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read roster file {roster_file}: {e}", setting="roster_path") from e

    if not isinstance(raw, dict):
        raise ConfigurationError("Roster file must contain a JSON object", setting="roster_path")

    return Roster.from_dict(raw)


@lru_cache()
def get_roster() -> Roster:
    """Get the process-wide roster, loaded on first use."""
    return load_roster()
