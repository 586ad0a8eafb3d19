"""Configurable ordered chain of credential providers."""

from credchain.auth.interfaces import AWSCredentials, CredentialSource
from credchain.chain import CredentialProviderChain
from credchain.core.exceptions import (
    AuthenticationFailure,
    CredchainError,
    CredentialsUnavailableError,
    DuplicateProviderError,
)

__all__ = [
    "AWSCredentials",
    "AuthenticationFailure",
    "CredchainError",
    "CredentialProviderChain",
    "CredentialSource",
    "CredentialsUnavailableError",
    "DuplicateProviderError",
]
