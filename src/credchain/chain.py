"""Ordered, customisable chain of credential providers."""

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from credchain.auth.interfaces import CredentialSource
from credchain.core.exceptions import AuthenticationFailure, DuplicateProviderError
from credchain.providers import default_sources

CredentialsGenerator = Callable[[], Any]


def describe_error(error: BaseException) -> str:
    """Return the error message, or the exception type name when it is empty."""
    return str(error) or type(error).__name__


class CredentialProviderChain:
    """Tries a sequence of named credential generators until one succeeds.

    Each provider is a zero-argument callable that either returns
    credentials or raises.  :meth:`resolve` calls the providers in the order
    they were registered and returns the first result; failures are logged
    and skipped.  Only when every provider has failed does the chain raise
    :class:`~credchain.core.exceptions.AuthenticationFailure`.

    Nothing is cached: every :meth:`resolve` call invokes the generators
    afresh.

    Example usage::

        chain = CredentialProviderChain()           # default sources
        chain.remove_provider("instance-profile")
        credentials = chain.resolve()
    """

    def __init__(
        self,
        sources: Iterable[CredentialSource] | None = None,
        *,
        logger: logging.Logger | None = None,
    ):
        """Initialise the chain.

        Args:
            sources: Sources to register, in try order.  ``None`` registers
                the default sources (``instance-profile``, ``environment``,
                ``system-environment``); pass an empty list to start empty.
            logger: Logger that receives one record per attempt.  Defaults
                to this module's logger.

        Raises:
            DuplicateProviderError: If two sources share a name.
        """
        self._generators: dict[str, CredentialsGenerator] = {}
        self._lock = threading.Lock()
        self._logger = logger or logging.getLogger(__name__)

        if sources is None:
            sources = default_sources()
        for source in sources:
            self.add_source(source)

    # -------------------------
    # Registration
    # -------------------------

    def add_provider(self, name: str, generator: CredentialsGenerator) -> None:
        """Add a provider to the end of the chain.

        Args:
            name: Unique provider name, used in log messages.
            generator: Zero-argument callable returning credentials, or
                raising when none are available.

        Raises:
            DuplicateProviderError: If ``name`` is already registered.  The
                existing provider is left in place.
        """
        with self._lock:
            if name in self._generators:
                raise DuplicateProviderError(name)
            self._generators[name] = generator

    def add_source(self, source: CredentialSource) -> None:
        """Add a :class:`CredentialSource` under its own name.

        Raises:
            DuplicateProviderError: If ``source.name`` is already registered.
        """
        self.add_provider(source.name, source.get_credentials)

    def remove_provider(self, name: str) -> None:
        """Remove a provider from the chain.  Unknown names are ignored."""
        with self._lock:
            self._generators.pop(name, None)

    def clear(self) -> None:
        """Remove every provider from the chain."""
        with self._lock:
            self._generators.clear()

    def names(self) -> list[str]:
        """Return the registered provider names in try order."""
        with self._lock:
            return list(self._generators)

    def __len__(self) -> int:
        with self._lock:
            return len(self._generators)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._generators

    # -------------------------
    # Resolution
    # -------------------------

    def resolve(self) -> Any:
        """Return the credentials of the first provider that succeeds.

        Providers are tried in registration order.  Each failure is logged
        as ``(name) <error>`` and the next provider is tried; a success is
        logged as ``(name) Credentials found.``.

        Returns:
            The value returned by the first successful generator.

        Raises:
            AuthenticationFailure: If every provider failed or the chain is
                empty.  ``errors`` holds each provider's exception.
        """
        with self._lock:
            snapshot = list(self._generators.items())

        errors: list[tuple[str, Exception]] = []
        for name, generator in snapshot:
            try:
                credentials = generator()
            except Exception as e:
                self._logger.warning("(%s) %s", name, describe_error(e))
                errors.append((name, e))
                continue
            self._logger.info("(%s) Credentials found.", name)
            return credentials

        self._logger.error("No credentials found.")
        raise AuthenticationFailure("No credentials found.", errors)
