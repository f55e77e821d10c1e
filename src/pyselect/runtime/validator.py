"""Consistency check between a required Python and the active one."""

from __future__ import annotations

from typing import Callable

from ..utils.path import same_file as default_same_file
from .active import ActiveRuntime
from .errors import RuntimeConflictError


class ConflictValidator:
    """Rejects required candidates that differ from the active runtime."""

    def __init__(
        self,
        active: ActiveRuntime,
        same_file: Callable[[str, str], bool] = default_same_file,
    ):
        self.active = active
        self._same_file = same_file

    def validate_required(self, candidate: str) -> None:
        """Check ``candidate`` against the active runtime, if any.

        Raises:
            RuntimeConflictError: If a runtime is active and ``candidate``
                is not the same file
        """
        if not self.active.is_active():
            return

        active_path = self.active.path()
        if not self._same_file(active_path, candidate):
            raise RuntimeConflictError(requested=candidate, active=active_path)
