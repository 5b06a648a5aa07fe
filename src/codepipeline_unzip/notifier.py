"""Optional SNS notification listing the republished object keys."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import boto3

from .config import Config
from .exceptions import NotificationError

if TYPE_CHECKING:
    from mypy_boto3_sns import SNSClient

logger = logging.getLogger(__name__)


class Notifier:
    """Publishes one completion message per job when a topic is configured."""

    def __init__(self, config: Config, sns_client: SNSClient | None = None) -> None:
        self._config = config
        self._sns = sns_client
        if config.notifications_enabled and sns_client is None:
            self._sns = boto3.client("sns")

    @staticmethod
    def build_message(job_id: str, keys: Sequence[str]) -> str:
        return "\n".join([job_id, *keys])

    def notify(self, job_id: str, keys: Sequence[str]) -> str | None:
        """Publish the completion message.

        Returns:
            The SNS message id, or None when notifications are disabled.

        Raises:
            NotificationError: If the publish call fails.
        """
        if not self._config.notifications_enabled:
            logger.debug("No notification topic configured, skipping notification")
            return None

        topic_arn = self._config.notification_sns_topic_arn
        try:
            response = self._sns.publish(
                TopicArn=topic_arn,
                Subject=self._config.notification_subject,
                Message=self.build_message(job_id, keys),
            )
        except Exception as exc:
            raise NotificationError(f"Failed to publish notification to {topic_arn}: {exc}") from exc

        message_id = response.get("MessageId")
        logger.info("Published notification %s to %s", message_id, topic_arn)
        return message_id
