"""ec2-run - open a shell on a running instance of a stack."""

from ec2run.constants import VERSION

__version__ = VERSION
