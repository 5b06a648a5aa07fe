"""Uploads extracted archive entries to the destination bucket."""

from __future__ import annotations

import logging
import mimetypes
import zipfile
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

import boto3
from boto3.s3.transfer import TransferConfig

from .config import Config
from .exceptions import ExtractionError, UploadError
from .extractor import ArchiveEntry

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

ACL_BUCKET_OWNER_FULL_CONTROL = "bucket-owner-full-control"


@dataclass
class PublishResult:
    """Summary of a republication run."""

    published_keys: list[str] = field(default_factory=list)
    bytes_published: int = 0
    message_id: str | None = None


class Republisher:
    """Streams each archive entry to ``{key_prefix}/{entry name}``.

    Uploads are sequential and stop at the first failure. Objects already
    written are left in place.
    """

    def __init__(
        self,
        config: Config,
        s3_client: S3Client | None = None,
        transfer_config: TransferConfig | None = None,
    ) -> None:
        self._config = config
        self._s3 = s3_client or boto3.client("s3")
        self._transfer_config = transfer_config or TransferConfig(use_threads=False)

    def destination_key(self, name: str) -> str:
        return f"{self._config.key_prefix}/{name}"

    def publish(
        self, entries: Iterable[ArchiveEntry], result: PublishResult | None = None
    ) -> PublishResult:
        """Upload every entry in iteration order.

        Keys are appended to ``result`` as each upload completes, so a caller
        holding it sees partial progress after a failure.

        Returns:
            PublishResult listing the destination keys in upload order.

        Raises:
            UploadError: On the first entry that fails to upload.
        """
        result = result if result is not None else PublishResult()
        for entry in entries:
            key = self.destination_key(entry.name)
            self._upload(entry, key)
            result.published_keys.append(key)
            result.bytes_published += entry.size

        logger.info(
            "Published %d object(s), %d bytes to s3://%s/%s/",
            len(result.published_keys),
            result.bytes_published,
            self._config.bucket,
            self._config.key_prefix,
        )
        return result

    def _upload(self, entry: ArchiveEntry, key: str) -> None:
        extra_args = {"ACL": ACL_BUCKET_OWNER_FULL_CONTROL}
        content_type, _ = mimetypes.guess_type(entry.name)
        if content_type:
            extra_args["ContentType"] = content_type

        try:
            self._s3.upload_fileobj(
                entry.stream,
                self._config.bucket,
                key,
                ExtraArgs=extra_args,
                Config=self._transfer_config,
            )
        except zipfile.BadZipFile as exc:
            raise ExtractionError(f"Failed to read zip entry '{entry.name}': {exc}") from exc
        except Exception as exc:
            raise UploadError(key, str(exc)) from exc

        logger.info("Uploaded %s to s3://%s/%s (%d bytes)", entry.name, self._config.bucket, key, entry.size)
