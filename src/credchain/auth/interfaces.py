"""Abstract interfaces for credential sources.

The chain itself treats credentials as opaque values.  The sources bundled
with this package all produce :class:`AWSCredentials`, and share the
:class:`CredentialSource` contract so that any future source can be added
to a chain without changing the chain.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AWSCredentials:
    """Access key pair, with an optional session token.

    The secret parts are excluded from ``repr()`` so that credentials can be
    logged or printed without leaking them.

    Attributes:
        access_key_id: The AWS access key ID.
        secret_access_key: The AWS secret access key.
        session_token: Session token for temporary credentials, if any.
        source: Name of the source that produced the credentials.
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    source: str | None = None

    def masked_access_key(self) -> str:
        """Return the access key ID with all but its last four characters hidden.

        Returns:
            A string such as ``"****************MPLE"``.
        """
        visible = self.access_key_id[-4:]
        return "*" * (len(self.access_key_id) - len(visible)) + visible

    @property
    def is_temporary(self) -> bool:
        """``True`` when the credentials carry a session token."""
        return self.session_token is not None


class CredentialSource(ABC):
    """Abstract base class for credential sources.

    Subclasses set :attr:`name`, the stable identifier under which the
    source is registered in a
    :class:`~credchain.chain.CredentialProviderChain`.

    Example usage::

        chain = CredentialProviderChain(sources=[])
        chain.add_source(SystemEnvironmentCredentials())
        credentials = chain.resolve()
    """

    name: str = ""

    @abstractmethod
    def get_credentials(self) -> AWSCredentials:
        """Return credentials from this source.

        Returns:
            An :class:`AWSCredentials` instance.

        Raises:
            CredentialsUnavailableError: If the source cannot produce
                credentials.
        """
