"""Permission entity - catalog entry."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Permission:
    """Permission - atomic capability identified by its code."""

    id: UUID
    permission_code: str
    description: str
