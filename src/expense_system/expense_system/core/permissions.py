from __future__ import annotations

from .enums import Role

REVIEWER_ROLES = frozenset({Role.MANAGER, Role.ADMIN})


def can_review(role: Role) -> bool:
    """Whether a user with ``role`` may see the pending queue and approve/reject."""
    return role in REVIEWER_ROLES
