"""
WingOps Services Layer

Pipeline stages and the external-tool wrappers behind them.
"""

from .command_runner import CommandRunner
from .preconditions import (
    PreconditionChecker,
    ToolPrecondition,
    FilePrecondition,
    SecretPrecondition,
    SessionPrecondition,
)
from .secret_service import (
    SecretStore,
    KeyVaultSecretStore,
    EnvSecretStore,
    SecretResolver,
    create_secret_store,
)
from .provider import ProvisioningClient, AzureCliProvider
from .report_service import Reporter
from .startup import StartupWaiter

__all__ = [
    "CommandRunner",
    "PreconditionChecker",
    "ToolPrecondition",
    "FilePrecondition",
    "SecretPrecondition",
    "SessionPrecondition",
    "SecretStore",
    "KeyVaultSecretStore",
    "EnvSecretStore",
    "SecretResolver",
    "create_secret_store",
    "ProvisioningClient",
    "AzureCliProvider",
    "Reporter",
    "StartupWaiter",
]
