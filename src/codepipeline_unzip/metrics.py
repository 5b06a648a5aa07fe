"""CloudWatch custom metrics publisher for the unzip action."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import boto3

from .config import DEFAULT_METRICS_NAMESPACE

if TYPE_CHECKING:
    from mypy_boto3_cloudwatch import CloudWatchClient

logger = logging.getLogger(__name__)


class MetricsPublisher:
    """Publishes custom CloudWatch metrics for a job. Failures are only logged."""

    def __init__(
        self,
        client: CloudWatchClient | None = None,
        namespace: str = DEFAULT_METRICS_NAMESPACE,
        enabled: bool = True,
    ) -> None:
        self._namespace = namespace
        self._enabled = enabled
        self._client = client
        if enabled and client is None:
            self._client = boto3.client("cloudwatch")

    def put(self, metric_name: str, value: float, unit: str = "Count") -> None:
        if not self._enabled:
            return
        try:
            self._client.put_metric_data(
                Namespace=self._namespace,
                MetricData=[
                    {
                        "MetricName": metric_name,
                        "Value": value,
                        "Unit": unit,
                    }
                ],
            )
        except Exception:
            logger.exception("Failed to publish metric %s", metric_name)

    def artifact_bytes_downloaded(self, total_bytes: int) -> None:
        self.put("ArtifactBytesDownloaded", total_bytes, unit="Bytes")

    def objects_published(self, count: int) -> None:
        self.put("ObjectsPublished", count)

    def bytes_published(self, total_bytes: int) -> None:
        self.put("BytesPublished", total_bytes, unit="Bytes")

    def job_succeeded(self) -> None:
        self.put("JobsSucceeded", 1)

    def job_failed(self) -> None:
        self.put("JobsFailed", 1)

    def job_duration(self, seconds: float) -> None:
        self.put("JobDurationSeconds", seconds, unit="Seconds")
