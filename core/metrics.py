"""Per-tool call and error counters for the /metrics route."""
import time
from collections import defaultdict
from typing import Any, Callable, Dict


class ToolMetrics:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.started_at = clock()
        self._calls: Dict[str, int] = defaultdict(int)
        self._errors: Dict[str, int] = defaultdict(int)

    def record(self, tool_name: str, failed: bool) -> None:
        self._calls[tool_name] += 1
        if failed:
            self._errors[tool_name] += 1

    def uptime(self) -> float:
        return round(self._clock() - self.started_at, 3)

    def snapshot(self) -> Dict[str, Any]:
        return {
            name: {"calls": self._calls[name], "errors": self._errors.get(name, 0)}
            for name in sorted(self._calls)
        }
