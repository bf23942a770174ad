"""Remote resource and job models.

Thin read-only views over platform and UAA payloads. The cleaner never mutates
them; it only reads identifiers and names to decide and issue deletions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class ResourceRecord:
    """Remote object descriptor.

    Attributes:
        kind: Resource kind (e.g., "organizations", "routes")
        resource_id: Platform identifier (guid, UAA id, client id)
        name: Display name used for classification and log messages
        entity: Raw kind-specific fields (route host/port/path, group members, ...)
    """

    kind: str
    resource_id: str
    name: Optional[str]
    entity: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_v2(cls, kind: str, payload: dict, name_field: str = "name") -> ResourceRecord:
        """Build a record from a v2 resource (``metadata`` + ``entity``)."""
        entity = payload.get("entity", {}) or {}
        return cls(
            kind=kind,
            resource_id=payload["metadata"]["guid"],
            name=entity.get(name_field),
            entity=entity,
        )

    @classmethod
    def from_v3(cls, kind: str, payload: dict, name_field: str = "name") -> ResourceRecord:
        """Build a record from a v3 resource (flat, ``guid`` identifier)."""
        return cls(
            kind=kind,
            resource_id=payload["guid"],
            name=payload.get(name_field),
            entity=payload,
        )

    @classmethod
    def from_uaa(
        cls,
        kind: str,
        payload: dict,
        name_field: str = "name",
        id_field: str = "id",
    ) -> ResourceRecord:
        """Build a record from a UAA resource."""
        return cls(
            kind=kind,
            resource_id=payload[id_field],
            name=payload.get(name_field),
            entity=payload,
        )

    @property
    def label(self) -> str:
        """Human-readable identifier for log messages."""
        return self.name or self.resource_id


class JobState(Enum):
    """Terminal and non-terminal states of a remote job."""

    RUNNING = "running"
    FINISHED = "finished"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: Optional[str]) -> JobState:
        """Map platform job status strings (v2 and v3 spellings) to a state."""
        normalized = (value or "").lower()
        if normalized in ("finished", "complete"):
            return cls.FINISHED
        if normalized == "failed":
            return cls.FAILED
        return cls.RUNNING

    @property
    def is_terminal(self) -> bool:
        return self is not JobState.RUNNING


@dataclass(frozen=True)
class JobHandle:
    """Handle for an asynchronous delete operation.

    Attributes:
        job_id: Remote job identifier
        state: Current state as last reported by the platform
        error: Failure description when state is FAILED
    """

    job_id: str
    state: JobState
    error: Optional[str] = None

    @classmethod
    def from_v2(cls, payload: dict) -> JobHandle:
        """Build a handle from a v2 job payload."""
        entity = payload.get("entity", {}) or {}
        job_id = entity.get("guid") or payload.get("metadata", {}).get("guid", "")
        state = JobState.parse(entity.get("status"))

        error = None
        if state is JobState.FAILED:
            details = entity.get("error_details") or {}
            error = details.get("description") or details.get("error_code") or entity.get("error") or "unknown error"

        return cls(job_id=job_id, state=state, error=error)
