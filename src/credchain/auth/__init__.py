"""Credential value types, source interface and settings storage."""

from credchain.auth.interfaces import AWSCredentials, CredentialSource

__all__ = ["AWSCredentials", "CredentialSource"]
