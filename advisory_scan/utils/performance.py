"""Performance monitoring utilities for advisory-scan."""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional
from rich.console import Console
from rich.table import Table

from .logging import stderr_console


@dataclass
class PerformanceMetrics:
    """Container for performance metrics."""

    function_name: str
    execution_time: float


class PerformanceMonitor:
    """Timing for named operations."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.metrics: List[PerformanceMetrics] = []
        self.console = console or stderr_console

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        """Context manager for measuring performance.

        Args:
            name: Name of the operation being measured

        Yields:
            None
        """
        start_time = time.perf_counter()
        try:
            yield
        finally:
            self.metrics.append(PerformanceMetrics(
                function_name=name,
                execution_time=time.perf_counter() - start_time,
            ))

    def last(self, name: str) -> Optional[PerformanceMetrics]:
        """Return the most recent metric recorded under ``name``."""
        for metric in reversed(self.metrics):
            if metric.function_name == name:
                return metric
        return None

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary.

        Returns:
            Dictionary with performance summary
        """
        if not self.metrics:
            return {}

        total_time = sum(m.execution_time for m in self.metrics)

        return {
            "total_executions": len(self.metrics),
            "total_time": total_time,
            "average_time": total_time / len(self.metrics),
            "metrics": self.metrics,
        }

    def print_summary(self) -> None:
        """Print performance summary to the console."""
        summary = self.get_summary()
        if not summary:
            return

        table = Table(title="Performance Summary")
        table.add_column("Operation", style="cyan", no_wrap=True)
        table.add_column("Time", style="green")

        for metric in summary["metrics"]:
            table.add_row(metric.function_name, f"{metric.execution_time:.4f}s")

        table.add_row("Total", f"{summary['total_time']:.4f}s")
        self.console.print(table)
