"""AWS provider: EC2 inventory and CloudFormation stack listing."""

from __future__ import annotations

from ec2run.providers.aws.compute import EC2Manager, create_session
from ec2run.providers.aws.stacks import StackManager

__all__ = ["EC2Manager", "StackManager", "create_session"]
