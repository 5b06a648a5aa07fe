"""Reports the job outcome back to CodePipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import boto3

if TYPE_CHECKING:
    from mypy_boto3_codepipeline import CodePipelineClient

logger = logging.getLogger(__name__)

FAILURE_TYPE_JOB_FAILED = "JobFailed"
MAX_FAILURE_MESSAGE_LENGTH = 5000
MAX_SUMMARY_LENGTH = 2048


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class JobReporter:
    """Wraps the CodePipeline job result API for a single job.

    Only the first report is sent; later calls are ignored so the job
    outcome is reported exactly once.
    """

    def __init__(self, job_id: str, client: CodePipelineClient | None = None) -> None:
        self.job_id = job_id
        self._client = client or boto3.client("codepipeline")
        self._reported = False

    @property
    def reported(self) -> bool:
        return self._reported

    def report_success(self, summary: str | None = None) -> None:
        if self._already_reported():
            return
        logger.info("Job %s succeeded", self.job_id)
        params: dict = {"jobId": self.job_id}
        if summary:
            params["executionDetails"] = {
                "summary": _truncate(summary, MAX_SUMMARY_LENGTH),
                "percentComplete": 100,
            }
        self._reported = True
        self._client.put_job_success_result(**params)

    def report_failure(self, error: BaseException | str) -> None:
        if self._already_reported():
            return
        message = _truncate(str(error) or type(error).__name__, MAX_FAILURE_MESSAGE_LENGTH)
        logger.error("Job %s failed with %s", self.job_id, message)
        self._reported = True
        self._client.put_job_failure_result(
            jobId=self.job_id,
            failureDetails={
                "type": FAILURE_TYPE_JOB_FAILED,
                "message": message,
            },
        )

    def _already_reported(self) -> bool:
        if self._reported:
            logger.warning("Job %s outcome already reported, ignoring", self.job_id)
        return self._reported
