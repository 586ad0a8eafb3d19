"""Bundled credential sources."""

from credchain.auth.interfaces import CredentialSource
from credchain.providers.environment import (
    AppSettingsCredentials,
    SystemEnvironmentCredentials,
)
from credchain.providers.instance_profile import InstanceProfileCredentials

__all__ = [
    "AppSettingsCredentials",
    "InstanceProfileCredentials",
    "SystemEnvironmentCredentials",
    "default_sources",
]


def default_sources() -> list[CredentialSource]:
    """Return fresh instances of the default sources, in try order.

    Order: ``instance-profile``, ``environment``, ``system-environment``.
    """
    return [
        InstanceProfileCredentials(),
        AppSettingsCredentials(),
        SystemEnvironmentCredentials(),
    ]
