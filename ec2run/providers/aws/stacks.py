"""CloudFormation stack listing."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ec2run.providers.aws.compute import create_session
from ec2run.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


class StackManager:
    """List CloudFormation stacks so operators can discover stack names.

    Parameters
    ----------
    region : str
        AWS region
    session : Any | None
        boto3 session, created from ``profile`` when None
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
        self.cloudformation_client = boto3_client_factory(
            "cloudformation", region_name=region
        )

    def list_stacks(self, name_filter: str | None = None) -> list[str]:
        """List stack names, optionally filtered by substring.

        Parameters
        ----------
        name_filter : str | None
            Substring a stack name must contain; all stacks when empty

        Returns
        -------
        list[str]
            Sorted stack names

        Raises
        ------
        ProviderError
            If any page request fails
        """
        with handle_aws_errors():
            paginator = self.cloudformation_client.get_paginator("describe_stacks")
            names = [
                stack["StackName"]
                for page in paginator.paginate()
                for stack in page.get("Stacks", [])
                if not name_filter or name_filter in stack["StackName"]
            ]

        logger.debug("Found %d stacks matching filter %r", len(names), name_filter)
        return sorted(names)
