"""EC2 inventory queries for ec2-run."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

import boto3

from ec2run.constants import STACK_NAME_TAG, InstanceState
from ec2run.models import InstanceRecord
from ec2run.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


def create_session(profile: str | None, region: str) -> boto3.session.Session:
    """Create a boto3 session for a shared-credentials profile and region.

    Parameters
    ----------
    profile : str | None
        Profile name from ~/.aws/credentials, or None for the default chain
    region : str
        AWS region

    Returns
    -------
    boto3.session.Session
        Session bound to the profile and region

    Raises
    ------
    ProviderCredentialsError
        If the profile does not exist
    """
    with handle_aws_errors():
        return boto3.session.Session(profile_name=profile, region_name=region)


class EC2Manager:
    """Query the EC2 inventory for instances belonging to a stack.

    Parameters
    ----------
    region : str
        AWS region for EC2 operations
    session : Any | None
        boto3 session to create the client from. If None, a session is
        created from ``profile`` and ``region``
    profile : str | None
        Shared-credentials profile used when no session is given
    boto3_client_factory : Callable[..., Any] | None
        Optional factory for creating boto3 clients, overriding the session
    """

    def __init__(
        self,
        region: str,
        session: Any | None = None,
        profile: str | None = None,
        boto3_client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self.region = region
        if boto3_client_factory is None:
            if session is None:
                session = create_session(profile, region)
            boto3_client_factory = session.client
        self.ec2_client = boto3_client_factory("ec2", region_name=region)

    def iter_pages(self, matcher: str) -> Iterator[dict[str, Any]]:
        """Yield describe_instances pages for running instances of a stack.

        The paginator follows continuation tokens lazily until exhausted.

        Parameters
        ----------
        matcher : str
            Glob matched against the CloudFormation stack-name tag

        Yields
        ------
        dict[str, Any]
            Raw describe_instances response pages
        """
        paginator = self.ec2_client.get_paginator("describe_instances")
        yield from paginator.paginate(
            Filters=[
                {"Name": f"tag:{STACK_NAME_TAG}", "Values": [matcher]},
                {
                    "Name": "instance-state-name",
                    "Values": [InstanceState.RUNNING.value],
                },
            ]
        )

    def find_running_instances(self, matcher: str) -> list[InstanceRecord]:
        """Find running instances whose stack-name tag matches a glob.

        Every reservation of every page is flattened into the result, in
        discovery order.

        Parameters
        ----------
        matcher : str
            Glob matched against the CloudFormation stack-name tag

        Returns
        -------
        list[InstanceRecord]
            Matching instances, empty if none match

        Raises
        ------
        ProviderCredentialsError
            If AWS credentials are not available
        ProviderAPIError
            If any page request is rejected
        ProviderConnectionError
            If the EC2 endpoint cannot be reached
        """
        logger.debug("Querying running instances matching '%s' in %s", matcher, self.region)

        with handle_aws_errors():
            instances = [
                InstanceRecord.from_api(instance)
                for page in self.iter_pages(matcher)
                for reservation in page.get("Reservations", [])
                for instance in reservation.get("Instances", [])
            ]

        logger.debug("Found %d running instances matching '%s'", len(instances), matcher)
        return instances
