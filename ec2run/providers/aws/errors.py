"""Translation of botocore failures into provider exceptions."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    CredentialRetrievalError,
    HTTPClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ProfileNotFound,
    SSOError,
    TokenRetrievalError,
)
from botocore.exceptions import ConnectionError as BotoConnectionError

from ec2run.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
)

logger = logging.getLogger(__name__)

CREDENTIAL_ERRORS = (
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
    NoRegionError,
    CredentialRetrievalError,
    TokenRetrievalError,
    SSOError,
)


@contextmanager
def handle_aws_errors() -> Generator[None, None, None]:
    """Re-raise botocore exceptions as provider exceptions.

    Raises
    ------
    ProviderCredentialsError
        If credentials are missing, expired or cannot be retrieved
    ProviderConnectionError
        If the endpoint cannot be reached or stops responding
    ProviderAPIError
        If the API returns an error response
    ProviderError
        For any other botocore failure
    """
    try:
        yield
    except CREDENTIAL_ERRORS as e:
        raise ProviderCredentialsError(str(e)) from e
    except (BotoConnectionError, HTTPClientError) as e:
        raise ProviderConnectionError(str(e)) from e
    except ClientError as e:
        error = e.response.get("Error", {})
        error_code = error.get("Code")
        logger.debug("AWS API error %s during %s", error_code, e.operation_name)
        raise ProviderAPIError(
            error.get("Message") or str(e),
            error_code=error_code,
            operation=e.operation_name,
        ) from e
    except BotoCoreError as e:
        raise ProviderError(str(e)) from e
