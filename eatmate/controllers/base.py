"""Shared plumbing for per-screen controllers.

Every screen owns one controller instance. The controller is the single
writer of its state; the screen reads it and subscribes for change
notifications. Two guards keep late network responses from corrupting state:

- a monotonic request sequence: only the latest issued request may write
- a closed flag: nothing writes after the screen is torn down
"""

from typing import Any, Callable, Generic, TypeVar

from eatmate.utils.logger import get_logger

logger = get_logger("eatmate.controllers")

T = TypeVar("T")
Listener = Callable[[T], None]


class ScreenController(Generic[T]):
    """Listener registry, close guard and request sequencing for one screen."""

    screen_name = "screen"

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._request_seq = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for change notifications.

        Returns:
            Callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Tear down: drop listeners and ignore any response still in flight."""
        self._closed = True
        self._listeners.clear()
        self._log("debug", "Controller closed")

    def _next_request(self) -> int:
        self._request_seq += 1
        return self._request_seq

    def _is_current(self, request_id: int) -> bool:
        """True if a response for ``request_id`` may still write state."""
        if self._closed:
            self._log("debug", "Discarding response for closed screen", request_id)
            return False
        if request_id != self._request_seq:
            self._log(
                "debug",
                f"Discarding stale response (latest request is {self._request_seq})",
                request_id,
            )
            return False
        return True

    def _notify(self, value: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                # Listeners are view code - a broken one must not break the controller
                self._log("warning", f"Listener failed: {e}")

    def _log(self, level: str, message: str, request_id: Any = None) -> None:
        extra = {"screen": self.screen_name}
        if request_id is not None:
            extra["request_id"] = request_id
        getattr(logger, level)(message, extra=extra)
