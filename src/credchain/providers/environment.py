"""Credential sources backed by local configuration.

Two implementations are defined here:

* :class:`AppSettingsCredentials` (``environment``) reads a static key pair
  from the application settings file written by ``credchain settings
  setup``.

* :class:`SystemEnvironmentCredentials` (``system-environment``) reads the
  standard ``AWS_*`` process environment variables.
"""

import logging
import os
from collections.abc import Mapping

from credchain.auth import settings as settings_store
from credchain.auth.interfaces import AWSCredentials, CredentialSource
from credchain.core.exceptions import CredentialsUnavailableError

logger = logging.getLogger(__name__)

_ENV_ACCESS_KEY = "AWS_ACCESS_KEY_ID"
_ENV_SECRET_KEY = "AWS_SECRET_ACCESS_KEY"
# AWS_SESSION_TOKEN is the standard name; AWS_SECURITY_TOKEN is legacy.
_ENV_TOKENS = ("AWS_SESSION_TOKEN", "AWS_SECURITY_TOKEN")


class AppSettingsCredentials(CredentialSource):
    """Reads an access key pair from the application settings file."""

    name = "environment"

    def get_credentials(self) -> AWSCredentials:
        """Return the key pair stored in the settings file.

        Raises:
            CredentialsUnavailableError: If the file is missing, unreadable,
                lacks either key, or holds non-string values.
        """
        stored = settings_store.load()
        access_key = stored.get("access_key_id")
        secret_key = stored.get("secret_access_key")
        token = stored.get("session_token") or None
        if not access_key or not secret_key:
            raise CredentialsUnavailableError(
                "No access key pair in application settings "
                f"({settings_store.settings_path()})."
            )
        if not all(isinstance(v, str) for v in (access_key, secret_key)) or (
            token is not None and not isinstance(token, str)
        ):
            raise CredentialsUnavailableError(
                "Application settings values must be strings "
                f"({settings_store.settings_path()})."
            )
        logger.debug(
            "Loaded access key pair from %s", settings_store.settings_path()
        )
        return AWSCredentials(
            access_key_id=access_key,
            secret_access_key=secret_key,
            session_token=token,
            source=self.name,
        )


class SystemEnvironmentCredentials(CredentialSource):
    """Reads ``AWS_ACCESS_KEY_ID`` and friends from the process environment."""

    name = "system-environment"

    def __init__(self, environ: Mapping[str, str] | None = None):
        """Initialise the source.

        Args:
            environ: Mapping to read variables from.  Defaults to
                :data:`os.environ`, looked up at call time.
        """
        self._environ = environ

    def get_credentials(self) -> AWSCredentials:
        """Return the key pair found in the environment.

        Raises:
            CredentialsUnavailableError: If either key variable is unset or
                empty.
        """
        environ = os.environ if self._environ is None else self._environ
        access_key = environ.get(_ENV_ACCESS_KEY)
        secret_key = environ.get(_ENV_SECRET_KEY)

        missing = [
            var
            for var, value in (
                (_ENV_ACCESS_KEY, access_key),
                (_ENV_SECRET_KEY, secret_key),
            )
            if not value
        ]
        if missing:
            raise CredentialsUnavailableError(
                f"Environment variable(s) not set: {', '.join(missing)}."
            )

        token = next((environ[var] for var in _ENV_TOKENS if environ.get(var)), None)
        return AWSCredentials(
            access_key_id=access_key,
            secret_access_key=secret_key,
            session_token=token,
            source=self.name,
        )
