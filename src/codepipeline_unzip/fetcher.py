"""Downloads the source artifact into a temporary local file."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config as BotocoreConfig

from .event import ArtifactCredentials, SourceArtifact
from .exceptions import FetchError

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "codepipeline"


def artifact_s3_client(credentials: ArtifactCredentials | None) -> S3Client:
    """Create an S3 client that uses only the job's artifact credentials.

    Artifact buckets are KMS encrypted, which requires SigV4 signing.

    Raises:
        FetchError: If the job carries no artifact credentials.
    """
    if credentials is None:
        raise FetchError("missing artifact credentials")
    return boto3.client(
        "s3",
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        config=BotocoreConfig(signature_version="s3v4"),
    )


@dataclass(frozen=True)
class LocalArtifact:
    """A downloaded artifact on local disk."""

    path: Path
    size: int


class ArtifactFetcher:
    """Fetches an artifact with a client scoped to the artifact store."""

    def __init__(
        self,
        s3_client: S3Client,
        temp_dir: str | None = None,
        transfer_config: TransferConfig | None = None,
    ) -> None:
        self._s3 = s3_client
        self._temp_dir = temp_dir
        self._transfer_config = transfer_config or TransferConfig(use_threads=False)

    @contextmanager
    def fetch(self, artifact: SourceArtifact) -> Iterator[LocalArtifact]:
        """Download the artifact and yield it as a closed local file.

        The temporary file is removed when the context exits, whatever the
        outcome.

        Raises:
            FetchError: If the download fails.
        """
        fd, name = tempfile.mkstemp(prefix=TEMP_FILE_PREFIX, suffix=".zip", dir=self._temp_dir)
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as fileobj:
                try:
                    self._s3.download_fileobj(
                        artifact.bucket, artifact.key, fileobj, Config=self._transfer_config
                    )
                except Exception as exc:
                    raise FetchError(f"Failed to download {artifact.uri}: {exc}") from exc
                fileobj.flush()
                size = os.fstat(fileobj.fileno()).st_size

            logger.info("Downloaded artifact %s (%d bytes)", artifact.uri, size)
            yield LocalArtifact(path=path, size=size)
        finally:
            path.unlink(missing_ok=True)
            logger.debug("Removed temporary artifact %s", path)
