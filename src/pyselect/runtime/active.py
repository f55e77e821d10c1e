"""The Python runtime that has been started in this process."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..utils.path import same_file as default_same_file
from .errors import RuntimeConflictError
from .types import RuntimeInfo

logger = logging.getLogger(__name__)


class ActiveRuntime:
    """Holds the one runtime started in the current process.

    Once activated the runtime is fixed: activating the same binary again
    is a no-op and activating a different one raises.
    """

    def __init__(self, same_file: Callable[[str, str], bool] = default_same_file):
        self._same_file = same_file
        self._info: Optional[RuntimeInfo] = None
        self._lock = threading.Lock()

    def is_active(self) -> bool:
        return self._info is not None

    def path(self) -> str:
        """Path of the active runtime.

        Raises:
            RuntimeError: If no runtime is active
        """
        if self._info is None:
            raise RuntimeError("No Python runtime is active")
        return self._info.path

    @property
    def info(self) -> Optional[RuntimeInfo]:
        return self._info

    def activate(self, info: RuntimeInfo) -> RuntimeInfo:
        """Mark ``info`` as the active runtime.

        Returns:
            The runtime that is active afterwards

        Raises:
            RuntimeConflictError: If a different runtime is already active
        """
        with self._lock:
            if self._info is None:
                self._info = info
                logger.debug(f"Activated {info!r}")
                return info
            current = self._info

        if not self._same_file(current.path, info.path):
            raise RuntimeConflictError(requested=info.path, active=current.path)
        return current
