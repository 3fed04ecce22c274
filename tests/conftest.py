"""
tests/conftest.py - shared fixtures

Environment mappings, sample ECR image details and a botocore-stubbed ECR client.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import boto3
import pytest
from botocore.stub import Stubber

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


REGISTRY_ID = "123456789012"
REGISTRY_URL = f"{REGISTRY_ID}.dkr.ecr.us-east-2.amazonaws.com"
REGION = "us-east-2"
BASE_TIME = datetime(2023, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_image(index, pushed_at=None, repository="web", digest=None):
    """Build an ECR describe_images imageDetails entry."""
    image = {
        "registryId": REGISTRY_ID,
        "repositoryName": repository,
        "imageDigest": digest or f"sha256:{index:064x}",
        "imageTags": [f"build-{index}"],
        "imageSizeInBytes": 1000 + index,
    }
    if pushed_at is not False:
        image["imagePushedAt"] = pushed_at or BASE_TIME + timedelta(hours=index)
    return image


@pytest.fixture
def base_env():
    return {
        "ACCESS_KEY": "AKIATESTING",
        "SECRET_KEY": "testing-secret",
        "DOCKER_REGISTRY_URL": REGISTRY_URL,
        "AWS_REGION": REGION,
        "REPOSITORY": "web",
    }


@pytest.fixture
def seven_images():
    """Seven images pushed one hour apart, listed oldest first."""
    return [make_image(i) for i in range(7)]


@pytest.fixture
def ecr_client():
    return boto3.client(
        "ecr",
        region_name=REGION,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def ecr_stubber(ecr_client):
    with Stubber(ecr_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


def add_describe_pages(stubber, repository, pages):
    """Queue describe_images responses, chaining nextToken between pages."""
    for number, images in enumerate(pages):
        expected = {"registryId": REGISTRY_ID, "repositoryName": repository}
        if number > 0:
            expected["nextToken"] = f"token-{number}"
        response = {"imageDetails": images}
        if number < len(pages) - 1:
            response["nextToken"] = f"token-{number + 1}"
        stubber.add_response("describe_images", response, expected)
