import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass
class QueryLog:
    """Represents a logged statement"""

    query: str
    params: list[Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    stack_trace: str | None = None

    def __repr__(self) -> str:
        return f"QueryLog(query={self.query!r}, params={self.params!r}, timestamp={self.timestamp})"


class QueryTracker:
    """Collects the statements a store issues while tracking is enabled"""

    def __init__(self, capture_stack: bool = False):
        self.queries: list[QueryLog] = []
        self._enabled: bool = False
        self._capture_stack = capture_stack

    def enable(self):
        self._enabled = True

    def disable(self):
        self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def log_query(self, query: str, params: list[Any]):
        """Log a statement with its parameters"""
        if not self._enabled:
            return
        stack_trace = None
        if self._capture_stack:
            # Drop this frame and the store frame that called it
            stack_trace = "".join(traceback.format_list(traceback.extract_stack()[:-2]))
        self.queries.append(QueryLog(query=query, params=list(params), stack_trace=stack_trace))

    def get_queries(self) -> list[QueryLog]:
        return self.queries.copy()

    def clear(self):
        self.queries.clear()

    def count(self) -> int:
        return len(self.queries)

    def to_dict(self) -> list[dict[str, Any]]:
        return [
            {
                "query": log.query,
                "params": log.params,
                "timestamp": log.timestamp.isoformat(),
                "stack_trace": log.stack_trace,
            }
            for log in self.queries
        ]
