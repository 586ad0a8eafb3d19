"""Domain exceptions for the credchain library."""


class CredchainError(Exception):
    """Base class for all credchain library exceptions."""


class DuplicateProviderError(CredchainError):
    """Raised when a provider name is registered twice on the same chain.

    The chain is left exactly as it was before the failed registration.
    """

    def __init__(self, name: str):
        super().__init__(f"A provider named {name!r} is already registered.")
        self.name = name


class CredentialsUnavailableError(CredchainError):
    """Raised by a credential source that has nothing to offer.

    The chain treats this like any other per-source failure: it logs the
    message and moves on to the next source.
    """


class AuthenticationFailure(CredchainError):
    """Raised when every provider in the chain failed, or the chain is empty.

    Attributes:
        errors: ``(provider name, exception)`` pairs in the order the
            providers were tried.  Empty when the chain had no providers.
    """

    def __init__(
        self,
        message: str = "No credentials found.",
        errors: list[tuple[str, Exception]] | None = None,
    ):
        super().__init__(message)
        self.errors = list(errors or [])
