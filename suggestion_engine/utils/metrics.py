"""
CloudWatch metrics emitter for suggestion generation.

This module provides utilities for emitting CloudWatch metrics for the
suggestion engine, including call latency, cache effectiveness, prefetch
volume and fallback usage.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Set

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

# Upper bound of metric data items sent in one put_metric_data request
MAX_METRICS_PER_REQUEST = 20


class MetricsEmitter:
    """
    Emits CloudWatch metrics for suggestion engine operations.

    Metrics are buffered and published in batches with put_metric_data.
    When called from a running event loop the blocking publish runs in the
    default executor. A batch that fails to publish is logged and dropped,
    so failures never interrupt the caller and never accumulate.

    Attributes:
        namespace: CloudWatch namespace for metrics
        cloudwatch: Boto3 CloudWatch client
        dropped_count: Metrics discarded after failed publishes
    """

    def __init__(
        self,
        namespace: str = 'VoiceSuggestions/Engine',
        cloudwatch_client=None,
        buffer_size: int = 20
    ):
        """
        Initialize metrics emitter.

        Args:
            namespace: CloudWatch namespace for metrics
            cloudwatch_client: Optional CloudWatch client for testing
            buffer_size: Number of buffered metrics that triggers a flush
        """
        self.namespace = namespace
        self.cloudwatch = cloudwatch_client or boto3.client('cloudwatch')
        self._metric_buffer: List[Dict] = []
        self._buffer_size = buffer_size
        self._pending_flushes: Set[asyncio.Future] = set()
        self.dropped_count = 0

    def emit_suggestion_latency(
        self,
        session_id: str,
        latency_ms: float,
        source: str
    ) -> None:
        """
        Emit metric for a suggestion call round trip.

        Args:
            session_id: Session identifier
            latency_ms: Round-trip latency in milliseconds
            source: Entry source (GENERATED or FALLBACK_LOCAL)
        """
        self._add_metric(
            metric_name='SuggestionLatency',
            value=latency_ms,
            unit='Milliseconds',
            dimensions=[
                {'Name': 'SessionId', 'Value': session_id},
                {'Name': 'Source', 'Value': source}
            ]
        )

    def emit_cache_lookup(self, session_id: str, hit: bool) -> None:
        """
        Emit metric for a pause-time cache lookup.

        Args:
            session_id: Session identifier
            hit: Whether a valid entry was found
        """
        self._add_metric(
            metric_name='SuggestionCacheHits' if hit else 'SuggestionCacheMisses',
            value=1,
            unit='Count',
            dimensions=[
                {'Name': 'SessionId', 'Value': session_id}
            ]
        )

    def emit_fallback_used(self, session_id: str, error_code: str) -> None:
        """
        Emit metric for fallback suggestions substituted after a failure.

        Args:
            session_id: Session identifier
            error_code: Error code of the failure
        """
        self._add_metric(
            metric_name='SuggestionFallbacks',
            value=1,
            unit='Count',
            dimensions=[
                {'Name': 'SessionId', 'Value': session_id},
                {'Name': 'ErrorCode', 'Value': error_code}
            ]
        )

    def emit_prefetch_request(self, session_id: str) -> None:
        """
        Emit metric for a background prefetch request.

        Args:
            session_id: Session identifier
        """
        self._add_metric(
            metric_name='PrefetchRequests',
            value=1,
            unit='Count',
            dimensions=[
                {'Name': 'SessionId', 'Value': session_id}
            ]
        )

    def _add_metric(
        self,
        metric_name: str,
        value: float,
        unit: str,
        dimensions: List[Dict]
    ) -> None:
        """
        Add metric to buffer and flush if needed.

        Args:
            metric_name: Name of the metric
            value: Metric value
            unit: Metric unit
            dimensions: Metric dimensions
        """
        self._metric_buffer.append({
            'MetricName': metric_name,
            'Value': value,
            'Unit': unit,
            'Dimensions': dimensions,
            'Timestamp': time.time()
        })

        if len(self._metric_buffer) >= self._buffer_size:
            self.flush()

    def flush(self) -> None:
        """
        Flush buffered metrics to CloudWatch.

        The buffer is handed off before publishing. Inside a running event
        loop the publish is scheduled on the default executor; otherwise it
        runs synchronously.
        """
        if not self._metric_buffer:
            return

        batch = self._metric_buffer
        self._metric_buffer = []

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._publish(batch)
            return

        future = loop.run_in_executor(None, self._publish, batch)
        self._pending_flushes.add(future)
        future.add_done_callback(self._pending_flushes.discard)

    async def wait_for_flushes(self) -> None:
        """Wait until every scheduled publish has finished."""
        if self._pending_flushes:
            await asyncio.gather(*list(self._pending_flushes))

    def _publish(self, batch: List[Dict]) -> bool:
        for start in range(0, len(batch), MAX_METRICS_PER_REQUEST):
            try:
                self.cloudwatch.put_metric_data(
                    Namespace=self.namespace,
                    MetricData=batch[start:start + MAX_METRICS_PER_REQUEST]
                )
            except (BotoCoreError, ClientError) as e:
                # Log error but don't fail the operation
                dropped = len(batch) - start
                self.dropped_count += dropped
                logger.warning(f"Failed to emit metrics, dropped {dropped}: {e}")
                return False

        return True

    @property
    def buffered_count(self) -> int:
        """Number of metrics waiting to be flushed."""
        return len(self._metric_buffer)

    @property
    def pending_flushes(self) -> int:
        """Number of publishes still running in the executor."""
        return len(self._pending_flushes)


def create_metrics_emitter(enabled: bool, namespace: str) -> Optional[MetricsEmitter]:
    """
    Create a metrics emitter when metrics are enabled.

    Args:
        enabled: Whether CloudWatch metrics are enabled
        namespace: CloudWatch namespace

    Returns:
        MetricsEmitter instance, or None when disabled
    """
    if not enabled:
        return None

    return MetricsEmitter(namespace=namespace)
