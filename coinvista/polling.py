"""Fixed-interval polling driven by the Qt event loop."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from coinvista.errors import GatewayError

logger = logging.getLogger(__name__)


class PollingTask(QObject):
    """Cancellable periodic fetch for one dataset.

    ``start()`` fetches immediately and then every ``interval_s`` seconds
    until ``stop()``. There is no backoff or jitter: a failed fetch is
    reported through ``failed`` and the next tick is the only retry.

    Signals:
        resultReady: Emitted with the fetch result
        failed: Emitted with the error message when a fetch fails
    """

    resultReady = Signal(object)
    failed = Signal(str)

    def __init__(
        self,
        name: str,
        interval_s: float,
        fetch: Callable[[], Any],
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self.name = name
        self._fetch = fetch
        self._timer = QTimer(self)
        self._timer.setInterval(int(interval_s * 1000))
        self._timer.timeout.connect(self._tick)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if self._timer.isActive():
            return
        logger.debug(f"Polling '{self.name}' every {self.interval_ms} ms")
        self._timer.start()
        self._tick()

    def stop(self) -> None:
        if self._timer.isActive():
            logger.debug(f"Stopped polling '{self.name}'")
        self._timer.stop()

    def set_active(self, active: bool) -> None:
        if active:
            self.start()
        else:
            self.stop()

    def refresh(self) -> None:
        """Fetch once now without touching the schedule."""
        self._tick()

    @Slot()
    def _tick(self) -> None:
        try:
            result = self._fetch()
        except GatewayError as e:
            logger.warning(f"Fetch '{self.name}' failed: {e}")
            self.failed.emit(str(e))
            return
        self.resultReady.emit(result)
