"""Value types shared across ec2-run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ec2run.constants import NAME_TAG, ROLES_TAG, SECONDS_PER_HOUR


@dataclass(frozen=True)
class InstanceRecord:
    """Snapshot of a running instance, fetched once per invocation.

    Attributes
    ----------
    instance_id : str
        EC2 instance ID
    name : str
        Value of the Name tag, empty when untagged
    instance_type : str
        EC2 instance type (e.g. m5.large)
    private_ip : str | None
        Private network address used as the ssh target
    launch_time : datetime
        Timezone-aware launch timestamp
    roles : str
        Value of the Roles tag, empty when untagged
    """

    instance_id: str
    name: str
    instance_type: str
    private_ip: str | None
    launch_time: datetime
    roles: str = ""

    @classmethod
    def from_api(cls, instance: dict[str, Any]) -> InstanceRecord:
        """Build a record from one entry of a describe_instances reservation."""
        tags = {tag["Key"]: tag["Value"] for tag in instance.get("Tags", [])}
        launch_time = instance["LaunchTime"]
        if launch_time.tzinfo is None:
            launch_time = launch_time.replace(tzinfo=timezone.utc)

        return cls(
            instance_id=instance["InstanceId"],
            name=tags.get(NAME_TAG, ""),
            instance_type=instance.get("InstanceType", ""),
            private_ip=instance.get("PrivateIpAddress"),
            launch_time=launch_time,
            roles=tags.get(ROLES_TAG, ""),
        )

    def uptime_hours(self, now: datetime | None = None) -> float:
        """Hours elapsed since launch.

        Parameters
        ----------
        now : datetime | None
            Reference time, defaults to the current UTC time

        Returns
        -------
        float
            Uptime in hours
        """
        if now is None:
            now = datetime.now(timezone.utc)
        return (now - self.launch_time).total_seconds() / SECONDS_PER_HOUR

    @property
    def label(self) -> str:
        """Name for progress messages, falling back to the instance ID."""
        return self.name or self.instance_id
