"""Qt worker — runs one engine call off the GUI thread."""

from __future__ import annotations

from typing import Any, Callable

from PySide6.QtCore import QThread, Signal


class EngineWorker(QThread):
    """
    Background worker for a single scan or backup mutation.

    Emits ``succeeded`` with the call's return value, or ``failed`` with the
    error message. The outcome is also kept on ``result`` / ``error``.
    """

    succeeded = Signal(object)
    failed = Signal(str)

    def __init__(
        self,
        fn: Callable[..., Any],
        *args: Any,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._fn = fn
        self._args = args
        self.result: Any = None
        self.error: str = ""

    def run(self) -> None:
        try:
            self.result = self._fn(*self._args)
        except Exception as e:
            self.error = str(e)
            self.failed.emit(self.error)
            return
        self.succeeded.emit(self.result)
