# lambda_prune/utils/aws_clients.py
import os
from typing import Callable, Optional

import boto3

from lambda_prune.errors import ConfigurationError


def _region(region: Optional[str] = None) -> str:
    return region or os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or "us-east-1"


def lambda_client(
    *,
    profile: Optional[str] = None,
    region: Optional[str] = None,
    session_factory: Callable[..., boto3.Session] = boto3.Session,
):
    """Build a Lambda client from a session for the given profile/region."""
    session_kwargs = {"region_name": _region(region)}
    if profile:
        session_kwargs["profile_name"] = profile

    session = session_factory(**session_kwargs)
    if session.get_credentials() is None:
        raise ConfigurationError(
            "AWS credentials not found. Please configure via AWS CLI, "
            "environment variables, or pass a profile."
        )

    kwargs = {}
    ep = os.environ.get("AWS_ENDPOINT_URL_LAMBDA")
    if ep:
        kwargs["endpoint_url"] = ep
    return session.client("lambda", **kwargs)
