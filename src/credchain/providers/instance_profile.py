"""EC2 instance-profile credential source.

Fetches the temporary credentials of the IAM role attached to the current
EC2 instance from the instance metadata service (IMDS).

The lookup follows the IMDSv2 session flow:

1. ``PUT /latest/api/token`` to obtain a session token.  When the service
   rejects the request (403, 404 or 405, as older or IMDSv1-only
   configurations do) the lookup continues without a token.
2. ``GET /latest/meta-data/iam/security-credentials/`` to discover the role
   name.
3. ``GET /latest/meta-data/iam/security-credentials/<role>`` for the JSON
   credentials document.

Configuration (constructor arguments take precedence):

* ``AWS_EC2_METADATA_SERVICE_ENDPOINT``: base URL of the metadata service.
* ``AWS_METADATA_SERVICE_TIMEOUT``: per-request timeout in seconds.
* ``AWS_EC2_METADATA_DISABLED``: set to ``true`` to skip the lookup.
"""

import logging
import os

import requests

from credchain.auth.interfaces import AWSCredentials, CredentialSource
from credchain.core.exceptions import CredentialsUnavailableError

logger = logging.getLogger(__name__)

_DEFAULT_ENDPOINT = "http://169.254.169.254"
_DEFAULT_TIMEOUT = 1.0

_TOKEN_PATH = "/latest/api/token"
_ROLE_PATH = "/latest/meta-data/iam/security-credentials/"

_TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
_TOKEN_HEADER = "X-aws-ec2-metadata-token"
_TOKEN_TTL_SECONDS = "21600"

# Status codes meaning "IMDSv2 not available here, use IMDSv1".
_TOKEN_FALLBACK_STATUSES = (403, 404, 405)

_ENV_ENDPOINT = "AWS_EC2_METADATA_SERVICE_ENDPOINT"
_ENV_TIMEOUT = "AWS_METADATA_SERVICE_TIMEOUT"
_ENV_DISABLED = "AWS_EC2_METADATA_DISABLED"


class InstanceProfileCredentials(CredentialSource):
    """Resolves role credentials from the EC2 instance metadata service."""

    name = "instance-profile"

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
    ):
        """Initialise the source.

        Args:
            endpoint: Base URL of the metadata service.  Defaults to
                ``AWS_EC2_METADATA_SERVICE_ENDPOINT`` or
                ``http://169.254.169.254``.
            timeout: Per-request timeout in seconds.  Defaults to
                ``AWS_METADATA_SERVICE_TIMEOUT`` or 1 second.
        """
        self._endpoint = endpoint
        self._timeout = timeout

    # -------------------------
    # CredentialSource interface
    # -------------------------

    def get_credentials(self) -> AWSCredentials:
        """Return the credentials of the instance's IAM role.

        Raises:
            CredentialsUnavailableError: If lookups are disabled, the
                metadata service is unreachable, no role is attached, or the
                credentials document is unusable.
        """
        if os.getenv(_ENV_DISABLED, "").lower() == "true":
            raise CredentialsUnavailableError(
                f"Instance metadata lookups are disabled ({_ENV_DISABLED})."
            )

        endpoint = self._resolve_endpoint()
        timeout = self._resolve_timeout()
        try:
            headers = self._session_headers(endpoint, timeout)
            role = self._fetch_role_name(endpoint, timeout, headers)
            document = self._fetch_json(
                f"{endpoint}{_ROLE_PATH}{role}", timeout, headers
            )
        except requests.RequestException as e:
            raise CredentialsUnavailableError(
                f"Instance metadata service unavailable at {endpoint}: {e}"
            ) from e

        code = document.get("Code", "Success")
        if code != "Success":
            raise CredentialsUnavailableError(
                f"Instance profile {role!r} returned status {code!r}."
            )
        try:
            return AWSCredentials(
                access_key_id=document["AccessKeyId"],
                secret_access_key=document["SecretAccessKey"],
                session_token=document.get("Token"),
                source=self.name,
            )
        except KeyError as e:
            raise CredentialsUnavailableError(
                f"Instance profile {role!r} credentials are missing {e.args[0]}."
            ) from e

    # -------------------------
    # Internal helpers
    # -------------------------

    def _resolve_endpoint(self) -> str:
        endpoint = self._endpoint or os.getenv(_ENV_ENDPOINT) or _DEFAULT_ENDPOINT
        return endpoint.rstrip("/")

    def _resolve_timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        raw = os.getenv(_ENV_TIMEOUT)
        if not raw:
            return _DEFAULT_TIMEOUT
        try:
            return float(raw)
        except ValueError:
            logger.warning(
                "Ignoring invalid %s=%r; using %ss", _ENV_TIMEOUT, raw, _DEFAULT_TIMEOUT
            )
            return _DEFAULT_TIMEOUT

    def _session_headers(self, endpoint: str, timeout: float) -> dict[str, str]:
        """Request an IMDSv2 session token.

        Returns:
            The headers to send with metadata requests: the token header, or
            an empty dict when falling back to IMDSv1.
        """
        response = requests.put(
            f"{endpoint}{_TOKEN_PATH}",
            headers={_TOKEN_TTL_HEADER: _TOKEN_TTL_SECONDS},
            timeout=timeout,
        )
        if response.status_code in _TOKEN_FALLBACK_STATUSES:
            logger.debug(
                "IMDSv2 token request returned %s; falling back to IMDSv1",
                response.status_code,
            )
            return {}
        response.raise_for_status()
        return {_TOKEN_HEADER: response.text}

    def _fetch_role_name(
        self, endpoint: str, timeout: float, headers: dict[str, str]
    ) -> str:
        response = requests.get(
            f"{endpoint}{_ROLE_PATH}", headers=headers, timeout=timeout
        )
        if response.status_code == 404:
            raise CredentialsUnavailableError(
                "No IAM role is attached to this instance."
            )
        response.raise_for_status()
        roles = response.text.strip().splitlines()
        if not roles:
            raise CredentialsUnavailableError(
                "No IAM role is attached to this instance."
            )
        logger.debug("Found instance profile role %s", roles[0])
        return roles[0].strip()

    def _fetch_json(
        self, url: str, timeout: float, headers: dict[str, str]
    ) -> dict:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        try:
            document = response.json()
        except ValueError as e:
            raise CredentialsUnavailableError(
                "Instance profile credentials are not valid JSON."
            ) from e
        if not isinstance(document, dict):
            raise CredentialsUnavailableError(
                "Instance profile credentials are not a JSON object."
            )
        return document
