"""Fake EC2Manager for testing with dependency injection."""

from ec2run.models import InstanceRecord


class FakeEC2Manager:
    """Fake inventory that returns preconfigured instances.

    Parameters
    ----------
    instances : list[InstanceRecord] | None
        Instances returned by every query
    error : Exception | None
        Raised by every query instead of returning instances
    """

    def __init__(
        self,
        instances: list[InstanceRecord] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.instances = list(instances or [])
        self.error = error
        self.queries: list[str] = []

    def find_running_instances(self, matcher: str) -> list[InstanceRecord]:
        """Record the matcher and return the configured instances.

        Parameters
        ----------
        matcher : str
            Stack matcher

        Returns
        -------
        list[InstanceRecord]
            Configured instances
        """
        self.queries.append(matcher)
        if self.error is not None:
            raise self.error
        return list(self.instances)
