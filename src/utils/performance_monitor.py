"""Performance monitoring for batch geoprocessing.

Tracks execution time, memory and CPU usage of zone aggregation and point
classification runs so slow reference data or oversized batches show up in the
logs.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Any, List

import psutil

logger = logging.getLogger(__name__)


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single monitored operation."""
    operation_name: str
    execution_time: float
    memory_usage_mb: float
    cpu_usage_percent: float
    records_processed: int
    processing_rate: float

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary dictionary."""
        return {
            "operation": self.operation_name,
            "execution_time_seconds": round(self.execution_time, 3),
            "memory_usage_mb": round(self.memory_usage_mb, 2),
            "cpu_usage_percent": round(self.cpu_usage_percent, 2),
            "records_processed": self.records_processed,
            "processing_rate_per_second": round(self.processing_rate, 2)
        }


class PerformanceMonitor:
    """Performance monitoring for geoprocessing operations.

    Records execution time, memory delta, CPU utilization and processing rate
    for each monitored operation and keeps them in ``metrics_history``.
    """

    def __init__(self, slow_operation_threshold: float = 5.0):
        """Initialize performance monitor.

        Args:
            slow_operation_threshold: Seconds above which an operation is logged as slow
        """
        self.slow_operation_threshold = slow_operation_threshold
        self.metrics_history: List[PerformanceMetrics] = []
        self.process = psutil.Process()

    @contextmanager
    def monitor_operation(self, operation_name: str, records_count: int = 0):
        """Context manager for monitoring an operation.

        Args:
            operation_name: Name of the operation being monitored
            records_count: Number of records being processed
        """
        start_time = time.time()
        start_memory = self.process.memory_info().rss / 1024 / 1024  # MB
        start_cpu_times = self.process.cpu_times()

        try:
            yield
        finally:
            execution_time = time.time() - start_time
            end_memory = self.process.memory_info().rss / 1024 / 1024  # MB
            end_cpu_times = self.process.cpu_times()

            memory_usage = max(end_memory - start_memory, 0)
            cpu_seconds = ((end_cpu_times.user - start_cpu_times.user) +
                           (end_cpu_times.system - start_cpu_times.system))
            cpu_usage = cpu_seconds / execution_time * 100 if execution_time > 0 else 0.0
            processing_rate = records_count / execution_time if execution_time > 0 else 0.0

            metrics = PerformanceMetrics(
                operation_name=operation_name,
                execution_time=execution_time,
                memory_usage_mb=memory_usage,
                cpu_usage_percent=cpu_usage,
                records_processed=records_count,
                processing_rate=processing_rate
            )
            self.metrics_history.append(metrics)

            if execution_time > self.slow_operation_threshold:
                logger.warning(f"Slow operation detected: {operation_name} took {execution_time:.2f}s "
                               f"for {records_count} records ({processing_rate:.1f} records/sec)")
            else:
                logger.debug(f"Operation {operation_name}: {execution_time:.2f}s, "
                             f"{records_count} records, {processing_rate:.1f} records/sec")

    def get_operation_metrics(self, operation_name: str) -> List[PerformanceMetrics]:
        """Get metrics for a specific operation type."""
        return [m for m in self.metrics_history if m.operation_name == operation_name]

    def get_performance_summary(self) -> Dict[str, Any]:
        """Get comprehensive performance summary."""
        if not self.metrics_history:
            return {"message": "No performance data collected"}

        total_time = sum(m.execution_time for m in self.metrics_history)
        total_records = sum(m.records_processed for m in self.metrics_history)
        avg_memory = sum(m.memory_usage_mb for m in self.metrics_history) / len(self.metrics_history)

        operations: Dict[str, List[PerformanceMetrics]] = {}
        for metric in self.metrics_history:
            operations.setdefault(metric.operation_name, []).append(metric)

        operation_summaries = {
            op_name: {
                "total_executions": len(metrics),
                "total_time": sum(m.execution_time for m in metrics),
                "total_records": sum(m.records_processed for m in metrics),
            }
            for op_name, metrics in operations.items()
        }

        return {
            "total_operations": len(self.metrics_history),
            "total_execution_time": round(total_time, 2),
            "total_records_processed": total_records,
            "overall_processing_rate": round(total_records / total_time, 2) if total_time > 0 else 0,
            "average_memory_usage_mb": round(avg_memory, 2),
            "operation_breakdown": operation_summaries
        }

    def clear_metrics(self):
        """Clear collected metrics history."""
        self.metrics_history.clear()
        logger.debug("Performance metrics history cleared")
