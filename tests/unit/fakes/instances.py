"""Instance records for tests."""

from datetime import datetime, timedelta, timezone

from ec2run.models import InstanceRecord

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_instance(
    name: str,
    hours_after_t0: float = 0.0,
    instance_id: str | None = None,
    private_ip: str | None = "10.0.0.10",
    instance_type: str = "m5.large",
    roles: str = "web",
) -> InstanceRecord:
    """Build an InstanceRecord launched a number of hours after T0."""
    return InstanceRecord(
        instance_id=instance_id or f"i-{name}",
        name=name,
        instance_type=instance_type,
        private_ip=private_ip,
        launch_time=T0 + timedelta(hours=hours_after_t0),
        roles=roles,
    )
