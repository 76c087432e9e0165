"""Exception classes for projectile_lab."""

from __future__ import annotations


class ProjectileLabError(Exception):
    """Base exception for all projectile_lab errors."""

    pass


class SessionStoreError(ProjectileLabError):
    """Raised when a run snapshot cannot be persisted."""

    def __init__(self, message: str, record_id: str | None = None):
        self.record_id = record_id
        super().__init__(message)
