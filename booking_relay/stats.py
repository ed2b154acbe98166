"""
Success and latency tracking for outbound calls (payment gateway, SMTP).
"""
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class CallRecord:
    """Record of a single outbound call."""
    timestamp: float
    latency_ms: int
    success: bool
    error: Optional[str] = None


class CallStats:
    """Tracks statistics for one kind of outbound call."""

    def __init__(self, kind: str, max_history: int = 1000):
        self.kind = kind
        self._calls: deque[CallRecord] = deque(maxlen=max_history)
        self._total_calls: int = 0
        self._total_failures: int = 0

    def record_success(self, latency_ms: int):
        self._calls.append(CallRecord(
            timestamp=time.time(),
            latency_ms=latency_ms,
            success=True,
        ))
        self._total_calls += 1

        logger.debug("%s call success: latency=%dms", self.kind, latency_ms)

    def record_failure(self, latency_ms: int, error: str):
        self._calls.append(CallRecord(
            timestamp=time.time(),
            latency_ms=latency_ms,
            success=False,
            error=error,
        ))
        self._total_calls += 1
        self._total_failures += 1

        logger.debug("%s call failed: latency=%dms, error=%s", self.kind, latency_ms, error)

    def record(self, success: bool, latency_ms: int, error: Optional[str] = None):
        if success:
            self.record_success(latency_ms)
        else:
            self.record_failure(latency_ms, error or "unknown error")

    def get_summary(self) -> dict:
        """Get a summary of call statistics."""
        if not self._calls:
            return {
                "total_calls": 0,
                "total_failures": 0,
                "failure_rate": 0.0,
                "avg_latency_ms": 0,
                "max_latency_ms": 0,
                "p95_latency_ms": 0,
                "recent_errors": [],
            }

        latencies = [c.latency_ms for c in self._calls]
        sorted_latencies = sorted(latencies)

        p95_idx = int(len(sorted_latencies) * 0.95)
        p95_latency = sorted_latencies[min(p95_idx, len(sorted_latencies) - 1)]

        # Last 5
        recent_errors = [
            {"timestamp": c.timestamp, "error": c.error, "latency_ms": c.latency_ms}
            for c in reversed(list(self._calls))
            if not c.success
        ][:5]

        failure_rate = (self._total_failures / self._total_calls * 100) if self._total_calls > 0 else 0.0

        return {
            "total_calls": self._total_calls,
            "total_failures": self._total_failures,
            "failure_rate": round(failure_rate, 2),
            "avg_latency_ms": round(sum(latencies) / len(latencies)),
            "max_latency_ms": max(latencies),
            "p95_latency_ms": p95_latency,
            "recent_errors": recent_errors,
        }


class RelayStats:
    """Per-app container for gateway and email call statistics."""

    def __init__(self, max_history: int = 1000):
        self.gateway = CallStats("gateway", max_history)
        self.email = CallStats("email", max_history)
        self.signature_rejections: int = 0

    def get_summary(self) -> dict:
        return {
            "gateway": self.gateway.get_summary(),
            "email": self.email.get_summary(),
            "signature_rejections": self.signature_rejections,
        }
