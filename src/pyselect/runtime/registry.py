"""Ordered runtime hints plus the required runtime."""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..utils.path import same_file as default_same_file
from .validator import ConflictValidator

logger = logging.getLogger(__name__)


class HintRegistry:
    """Candidate Python binaries collected for the first runtime start.

    ``candidates`` keeps insertion order and never holds two entries that
    are the same file; the first-seen spelling is kept. ``required`` is
    the last required candidate that passed the conflict check.
    """

    def __init__(
        self,
        validator: ConflictValidator,
        same_file: Callable[[str, str], bool] = default_same_file,
    ):
        self.validator = validator
        self._same_file = same_file
        self._candidates: List[str] = []
        self._required: Optional[str] = None
        self._lock = threading.Lock()

    def register(self, candidate: str, required: bool = False) -> None:
        """Record a candidate, validating it first when required.

        Raises:
            RuntimeConflictError: If required and a different runtime is active
        """
        # Validation queries the active runtime; keep it outside the lock
        if required:
            self.validator.validate_required(candidate)

        with self._lock:
            if required:
                self._required = candidate
            if not any(self._same_file(existing, candidate) for existing in self._candidates):
                self._candidates.append(candidate)

        logger.debug(f"Registered {'required' if required else 'hint'} {candidate}")

    def set_required(self, candidate: str) -> None:
        self.register(candidate, required=True)

    def add_hint(self, candidate: str) -> None:
        self.register(candidate, required=False)

    def get_required(self) -> Optional[str]:
        return self._required

    def get_hints(self) -> List[str]:
        with self._lock:
            return list(self._candidates)

    def clear(self) -> None:
        with self._lock:
            self._candidates.clear()
            self._required = None
