"""Model of the CodePipeline job event delivered to the Lambda action."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import ConfigurationError, FetchError, InvalidEventError, UnzipArtifactError

JOB_KEY = "CodePipeline.job"
S3_LOCATION_TYPE = "S3"


@dataclass(frozen=True)
class ArtifactCredentials:
    """Short-lived credentials scoped to the pipeline's artifact store."""

    access_key_id: str
    secret_access_key: str
    session_token: str

    def __repr__(self) -> str:
        return f"ArtifactCredentials(access_key_id={self.access_key_id!r})"


@dataclass(frozen=True)
class SourceArtifact:
    """An input artifact location as reported by CodePipeline."""

    name: str
    location_type: str
    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


def _section(mapping: Any, key: str, error: type[UnzipArtifactError]) -> dict[str, Any]:
    """Return ``mapping[key]`` as a dict, treating a missing value as empty."""
    value = mapping.get(key) if isinstance(mapping, dict) else None
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise error(f"malformed '{key}' in job data")
    return value


@dataclass(frozen=True)
class PipelineJob:
    """A single CodePipeline job, owned by one invocation of the handler.

    Only the job id is read up front. The rest of the job data is parsed on
    access, so a malformed body surfaces as a reportable error.
    """

    job_id: str
    data: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> PipelineJob:
        """Build a job from the raw Lambda event.

        Raises:
            InvalidEventError: If the event has no CodePipeline job id.
        """
        job = event.get(JOB_KEY) if isinstance(event, dict) else None
        if not isinstance(job, dict) or not job.get("id"):
            raise InvalidEventError(f"Event does not contain a '{JOB_KEY}' with an id")

        data = job.get("data")
        return cls(job_id=str(job["id"]), data=data if data is not None else {})

    @property
    def user_parameters(self) -> str:
        """The action's UserParameters string, empty when absent.

        Raises:
            ConfigurationError: If the action configuration is malformed.
        """
        if not isinstance(self.data, dict):
            raise ConfigurationError("malformed job data")
        action = _section(self.data, "actionConfiguration", ConfigurationError)
        configuration = _section(action, "configuration", ConfigurationError)
        value = configuration.get("UserParameters") or ""
        if not isinstance(value, str):
            raise ConfigurationError("user params must be a string")
        return value

    @property
    def credentials(self) -> ArtifactCredentials | None:
        """The artifact store credentials, or None when absent.

        Raises:
            FetchError: If the credentials are malformed.
        """
        raw = _section(self.data, "artifactCredentials", FetchError)
        if not raw:
            return None
        return ArtifactCredentials(
            access_key_id=raw.get("accessKeyId", ""),
            secret_access_key=raw.get("secretAccessKey", ""),
            session_token=raw.get("sessionToken", ""),
        )

    @property
    def input_artifacts(self) -> tuple[SourceArtifact, ...]:
        """The input artifacts in event order.

        Raises:
            FetchError: If the artifact list or an entry is malformed.
        """
        if not isinstance(self.data, dict):
            raise FetchError("malformed job data")
        raw_artifacts = self.data.get("inputArtifacts") or []
        if not isinstance(raw_artifacts, list):
            raise FetchError("malformed 'inputArtifacts' in job data")

        artifacts = []
        for artifact in raw_artifacts:
            if not isinstance(artifact, dict):
                raise FetchError("malformed input artifact in job data")
            location = _section(artifact, "location", FetchError)
            s3_location = _section(location, "s3Location", FetchError)
            artifacts.append(
                SourceArtifact(
                    name=artifact.get("name") or "",
                    location_type=location.get("type") or "",
                    bucket=s3_location.get("bucketName") or "",
                    key=s3_location.get("objectKey") or "",
                )
            )
        return tuple(artifacts)

    def source_artifact(self) -> SourceArtifact:
        """Return the first input artifact, which must live in S3.

        Raises:
            FetchError: If there is no input artifact, the artifact list is
                malformed, or the first artifact is not in S3.
        """
        artifacts = self.input_artifacts
        if not artifacts:
            raise FetchError("missing source artifacts")
        artifact = artifacts[0]
        if artifact.location_type != S3_LOCATION_TYPE:
            raise FetchError("location type of first artifact is not of type S3")
        return artifact
