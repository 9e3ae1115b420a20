import time


class SystemClock:
    def request_time(self) -> int:
        return int(time.time())


class FrozenClock:
    """Clock that returns a fixed request time. Useful for deterministic testing."""

    def __init__(self, timestamp: int):
        self._timestamp = timestamp

    def request_time(self) -> int:
        return self._timestamp

    def advance(self, seconds: int) -> None:
        """Advance frozen time (for testing)."""
        self._timestamp += seconds
