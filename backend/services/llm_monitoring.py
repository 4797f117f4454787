"""
In-process LLM call metrics.

Counters live in memory for the lifetime of the worker and are exposed by
the monitoring routes. Latency is averaged over successful calls only.
"""

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from typing import Dict, Optional
from uuid import uuid4

from core.domain import TokenUsage

logger = logging.getLogger(__name__)

# USD per 1K tokens (input, output)
MODEL_RATES = {
    "sonnet": (0.003, 0.015),
    "haiku": (0.0008, 0.004),
    "opus": (0.015, 0.075),
}
DEFAULT_RATE = MODEL_RATES["sonnet"]


def calculate_cost(usage: TokenUsage, model: str) -> float:
    """Estimate the USD cost of a call from its token usage."""
    input_rate, output_rate = next(
        (rate for family, rate in MODEL_RATES.items() if family in model.lower()),
        DEFAULT_RATE,
    )
    return usage.input * input_rate / 1000 + usage.output * output_rate / 1000


@dataclass
class MonitoringMetrics:
    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    total_tokens: int = 0
    average_latency: float = 0.0
    total_cost: float = 0.0


class CallTracker:
    """Handle yielded by ``LLMMonitoring.track``; callers attach usage to it."""

    def __init__(self):
        self.usage: Optional[TokenUsage] = None
        self.cost: Optional[float] = None

    def record(self, usage: TokenUsage, cost: float) -> None:
        self.usage = usage
        self.cost = cost


class LLMMonitoring:
    def __init__(self):
        self._metrics = MonitoringMetrics()
        self._started: Dict[str, float] = {}

    def start_call(self, call_id: str) -> None:
        self._started[call_id] = time.perf_counter()
        self._metrics.total_calls += 1

    def end_call(
        self,
        call_id: str,
        success: bool,
        token_usage: Optional[TokenUsage] = None,
        cost: Optional[float] = None,
    ) -> None:
        started = self._started.pop(call_id, None)

        if success:
            self._metrics.successful_calls += 1
            if started is not None:
                latency_ms = (time.perf_counter() - started) * 1000
                count = self._metrics.successful_calls
                self._metrics.average_latency = (
                    self._metrics.average_latency * (count - 1) + latency_ms
                ) / count
        else:
            self._metrics.failed_calls += 1

        if token_usage:
            self._metrics.total_tokens += token_usage.total
        if cost:
            self._metrics.total_cost += cost

    def get_metrics(self) -> dict:
        return asdict(self._metrics)

    def reset_metrics(self) -> None:
        self._metrics = MonitoringMetrics()
        self._started.clear()

    @asynccontextmanager
    async def track(self, operation: str):
        """
        Record one LLM call around the wrapped block.

        The block reports usage through the yielded ``CallTracker``. An exception
        counts as a failed call and propagates.
        """
        call_id = f"{operation}-{uuid4().hex[:8]}"
        tracker = CallTracker()
        self.start_call(call_id)
        try:
            yield tracker
        except Exception:
            self.end_call(call_id, False)
            logger.warning("LLM call %s failed", call_id)
            raise
        self.end_call(call_id, True, tracker.usage, tracker.cost)


llm_monitoring = LLMMonitoring()
