"""Shared fixtures for unzip action tests."""

from __future__ import annotations

import io
import json
import zipfile
from typing import Any
from unittest.mock import MagicMock, patch

import boto3
import pytest
from moto import mock_aws

ARTIFACT_BUCKET = "codepipeline-eu-west-1-111111111111"
ARTIFACT_KEY = "my-pipeline/BuildArtif/abc123"
DEST_BUCKET = "dest-bucket"
JOB_ID = "11111111-abcd-1111-abcd-111111abcdef"
TOPIC_ARN = "arn:aws:sns:eu-west-1:111111111111:artifact-published"
REGION = "eu-west-1"

SAMPLE_ENTRIES = [
    ("app.bin", b"\x00\x01\x02binary"),
    ("README.md", b"# Build 42\n"),
]


def make_zip(entries: list[tuple[str, bytes]]) -> bytes:
    """Build an in-memory zip archive with entries in the given order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries:
            zf.writestr(name, content)
    return buffer.getvalue()


def pipeline_event(
    user_parameters: Any = None,
    bucket: str = ARTIFACT_BUCKET,
    key: str = ARTIFACT_KEY,
    location_type: str = "S3",
    job_id: str = JOB_ID,
) -> dict[str, Any]:
    """Build a CodePipeline job event as delivered to a Lambda action."""
    if user_parameters is None:
        user_parameters = {"bucket": DEST_BUCKET, "key_prefix": "builds/42"}
    if not isinstance(user_parameters, str):
        user_parameters = json.dumps(user_parameters)

    return {
        "CodePipeline.job": {
            "id": job_id,
            "accountId": "111111111111",
            "data": {
                "actionConfiguration": {
                    "configuration": {
                        "FunctionName": "codepipeline-unzip",
                        "UserParameters": user_parameters,
                    }
                },
                "inputArtifacts": [
                    {
                        "name": "BuildArtifact",
                        "revision": None,
                        "location": {
                            "type": location_type,
                            "s3Location": {"bucketName": bucket, "objectKey": key},
                        },
                    }
                ],
                "outputArtifacts": [],
                "artifactCredentials": {
                    "accessKeyId": "artifact-access-key",
                    "secretAccessKey": "artifact-secret-key",
                    "sessionToken": "artifact-session-token",
                },
            },
        }
    }


@pytest.fixture(autouse=True)
def env_vars(monkeypatch):
    """Set credentials and region for moto and disable CloudWatch metrics."""
    env = {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": REGION,
        "METRICS_ENABLED": "false",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    for key in ("LOG_LEVEL", "METRICS_NAMESPACE", "NOTIFICATION_SUBJECT"):
        monkeypatch.delenv(key, raising=False)
    return env


@pytest.fixture
def aws_mocks():
    """Start moto mocks for S3, SNS and CloudWatch."""
    with mock_aws():
        yield


@pytest.fixture
def s3_client(aws_mocks):
    """Create a mocked S3 client."""
    return boto3.client("s3", region_name=REGION)


@pytest.fixture
def artifact_bucket(s3_client):
    """Create the pipeline artifact store bucket."""
    s3_client.create_bucket(
        Bucket=ARTIFACT_BUCKET,
        CreateBucketConfiguration={"LocationConstraint": REGION},
    )
    return ARTIFACT_BUCKET


@pytest.fixture
def dest_bucket(s3_client):
    """Create the destination bucket."""
    s3_client.create_bucket(
        Bucket=DEST_BUCKET,
        CreateBucketConfiguration={"LocationConstraint": REGION},
    )
    return DEST_BUCKET


@pytest.fixture
def sample_artifact(s3_client, artifact_bucket):
    """Upload a zip artifact with the sample entries."""
    s3_client.put_object(Bucket=ARTIFACT_BUCKET, Key=ARTIFACT_KEY, Body=make_zip(SAMPLE_ENTRIES))
    return SAMPLE_ENTRIES


@pytest.fixture
def zip_path(tmp_path):
    """Write the sample entries to a zip file on disk."""
    path = tmp_path / "artifact.zip"
    path.write_bytes(make_zip(SAMPLE_ENTRIES))
    return path


@pytest.fixture
def codepipeline_client():
    """Create a mock CodePipeline client; moto does not implement job results."""
    return MagicMock()


@pytest.fixture
def sns_client():
    """Create a mock SNS client that records publish calls."""
    client = MagicMock()
    client.publish.return_value = {"MessageId": "message-id-1"}
    return client


@pytest.fixture
def pipeline_clients(aws_mocks, codepipeline_client, sns_client):
    """Route CodePipeline and SNS clients to mocks, everything else to moto."""
    real_client = boto3.client

    def client_factory(service_name, *args, **kwargs):
        if service_name == "codepipeline":
            return codepipeline_client
        if service_name == "sns":
            return sns_client
        return real_client(service_name, *args, **kwargs)

    with patch("boto3.client", side_effect=client_factory) as mock_client:
        yield mock_client


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context object."""
    context = MagicMock()
    context.aws_request_id = "test-request-id-123"
    context.function_name = "codepipeline-unzip"
    context.memory_limit_in_mb = 256
    context.get_remaining_time_in_millis.return_value = 900000
    return context
