"""ECR client creation and image listing."""

import logging
from typing import Any, Dict, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import AuthConfigError, ListError


logger = logging.getLogger(__name__)


def extract_registry_id(registry_url: str) -> str:
    """Return the registry id, the first label of the registry host.

    >>> extract_registry_id("123456789.dkr.ecr.us-east-2.amazonaws.com")
    '123456789'
    """
    host = registry_url.split('://', 1)[-1]
    return host.split('.')[0]


def get_host_url_for_ecr(registry_id: str, region: str) -> str:
    return f"{registry_id}.dkr.ecr.{region}.amazonaws.com"


def create_ecr_client(access_key: str, secret_key: str, region: str):
    """Create an ECR client from static credentials, bound to region."""
    if not region:
        raise AuthConfigError("No region given for ECR client")

    try:
        client = boto3.client(
            'ecr',
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region
        )
    except (BotoCoreError, ValueError) as e:
        raise AuthConfigError(f"Failed to create ECR client for region {region}: {e}") from e

    logger.debug(f"Created ECR client for region {region}")
    return client


def list_all_images(client, registry_id: str, repository_name: str) -> List[Dict[str, Any]]:
    """Describe every image in a repository, following nextToken pagination.

    A failure on any page discards the pages already read.
    """
    paginator = client.get_paginator('describe_images')
    image_details = []
    pages = 0

    try:
        for page in paginator.paginate(registryId=registry_id, repositoryName=repository_name):
            pages += 1
            image_details.extend(page.get('imageDetails', []))
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error describing images in {repository_name} "
                     f"(registry {registry_id}, page {pages + 1}): {e}")
        raise ListError(repository_name, f"Failed to describe images: {e}") from e

    logger.info(f"Found {len(image_details)} images in {repository_name} across {pages} page(s)")
    return image_details
