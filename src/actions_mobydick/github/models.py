"""GitHub payload models used by the distribution manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Repository:
    """Repository as returned by the organisation listing endpoint."""

    name: str
    full_name: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Repository:
        name = str(payload["name"])
        return cls(
            name=name,
            full_name=str(payload.get("full_name") or name),
        )


@dataclass(slots=True)
class RepositoryPage:
    """One page of the listing; ``next_page`` is 0 once the listing is exhausted."""

    repositories: list[Repository] = field(default_factory=list)
    next_page: int = 0
