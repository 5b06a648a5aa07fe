"""Lambda handler for the CodePipeline unzip action.

Configure the "Invoke / Lambda Function" action with UserParameters such as
{"bucket": "my-bucket", "key_prefix": "my/key/prefix"}.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from .config import Settings
from .event import PipelineJob
from .exceptions import UnzipArtifactError
from .metrics import MetricsPublisher
from .reporter import JobReporter
from .service import ArtifactRepublishService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Entry point for the unzip action.

    Runs the republication and reports the outcome to CodePipeline exactly
    once. Only an event without a job id, or a failure of the report call
    itself, raises out of the handler.
    """
    request_id = getattr(context, "aws_request_id", "local")
    settings = Settings.from_env()
    logging.basicConfig(
        format=f"%(asctime)s [{request_id}] %(levelname)s %(name)s - %(message)s",
        level=settings.log_level,
        force=True,
    )
    logger.setLevel(settings.log_level)

    job = PipelineJob.from_event(event)
    logger.info("Unzip action starting, job_id=%s request_id=%s", job.job_id, request_id)

    start = time.monotonic()
    reporter = JobReporter(job.job_id)
    metrics = MetricsPublisher(
        namespace=settings.metrics_namespace, enabled=settings.metrics_enabled
    )
    service = ArtifactRepublishService(job, settings=settings)

    error: BaseException | None = None
    try:
        service.execute()
    except UnzipArtifactError as exc:
        error = exc
    except Exception as exc:
        logger.exception("Unexpected error during unzip action")
        error = UnzipArtifactError(f"Unexpected error: {exc}")

    result = service.result
    elapsed = time.monotonic() - start
    metrics.artifact_bytes_downloaded(service.downloaded_bytes)
    metrics.objects_published(len(result.published_keys))
    metrics.bytes_published(result.bytes_published)
    metrics.job_duration(elapsed)

    summary: dict[str, Any] = {
        "job_id": job.job_id,
        "request_id": request_id,
        "status": "Succeeded" if error is None else "Failed",
        "published": len(result.published_keys),
        "bytes_published": result.bytes_published,
        "duration_seconds": round(elapsed, 2),
    }

    if error is None:
        metrics.job_succeeded()
        logger.info("Job summary: %s", summary)
        config = service.config
        reporter.report_success(
            f"Published {len(result.published_keys)} object(s) to "
            f"s3://{config.bucket}/{config.key_prefix}/"
        )
    else:
        metrics.job_failed()
        summary["error"] = str(error)
        logger.info("Job summary: %s", summary)
        reporter.report_failure(error)

    return summary
