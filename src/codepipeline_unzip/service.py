"""Core sequence of the unzip action: fetch, extract, republish, notify."""

from __future__ import annotations

import logging
from contextlib import closing
from typing import TYPE_CHECKING

from .config import Config, Settings
from .event import PipelineJob
from .extractor import ZipArtifact
from .fetcher import ArtifactFetcher, artifact_s3_client
from .notifier import Notifier
from .republisher import PublishResult, Republisher

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_sns import SNSClient

logger = logging.getLogger(__name__)


class ArtifactRepublishService:
    """Republishes the contents of a job's zip artifact to S3.

    The artifact is read with a client built from the job's own artifact
    credentials; uploads and notifications use the function's identity.
    Reporting the outcome to CodePipeline is left to the caller.
    """

    def __init__(
        self,
        job: PipelineJob,
        settings: Settings | None = None,
        destination_s3: S3Client | None = None,
        sns: SNSClient | None = None,
        artifact_s3: S3Client | None = None,
    ) -> None:
        self._job = job
        self._settings = settings or Settings.from_env()
        self._destination_s3 = destination_s3
        self._sns = sns
        self._artifact_s3 = artifact_s3
        self.config: Config | None = None
        self.downloaded_bytes = 0
        self.result = PublishResult()

    def execute(self) -> PublishResult:
        """Run the full republication sequence.

        Returns:
            PublishResult with the published keys in upload order. The same
            object is kept on ``self.result`` and reflects partial progress
            when a step fails.

        Raises:
            UnzipArtifactError: The first failure of any step; later steps
                are not attempted.
        """
        self.config = Config.from_user_parameters(
            self._job.user_parameters, default_subject=self._settings.notification_subject
        )
        logger.info("User params: %s", self.config)

        artifact = self._job.source_artifact()
        fetcher = ArtifactFetcher(self._artifact_s3 or artifact_s3_client(self._job.credentials))

        with fetcher.fetch(artifact) as local:
            self.downloaded_bytes = local.size
            with ZipArtifact(local.path) as archive:
                republisher = Republisher(self.config, self._destination_s3)
                with closing(archive.entries()) as entries:
                    republisher.publish(entries, self.result)

        self.result.message_id = Notifier(self.config, self._sns).notify(
            self._job.job_id, self.result.published_keys
        )
        return self.result
