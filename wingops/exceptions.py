"""
WingOps Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
"""

from typing import List, Optional


class WingOpsError(Exception):
    """Base exception for all WingOps errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(WingOpsError):
    """Raised when configuration is invalid or missing."""

    pass


class PreconditionError(WingOpsError):
    """Raised when required tools, files, credentials or sessions are missing."""

    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        message = f"{len(self.issues)} precondition(s) not met"
        context = "; ".join(self.issues)
        super().__init__(message, context)


class SecretResolutionError(WingOpsError):
    """Raised when a required secret is absent or empty."""

    def __init__(self, missing: List[str], store: str = "secret store"):
        self.missing = list(missing)
        self.store = store
        message = f"Required secret(s) missing from {store}: {', '.join(self.missing)}"
        super().__init__(message)


class ExternalCallError(WingOpsError):
    """Raised when an external tool returns a non-success status."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: Optional[int] = None,
        context: Optional[str] = None,
    ):
        self.command = command
        self.returncode = returncode
        super().__init__(message, context)


class ParseError(WingOpsError):
    """Raised when essential structured output cannot be parsed."""

    pass


class EnvironmentNotFoundError(ConfigurationError):
    """Raised when an environment is not defined in wingops.yml."""

    def __init__(self, environment: str, available: List[str]):
        self.environment = environment
        self.available = available
        message = f"Environment '{environment}' not found in configuration"
        context = f"Available environments: {', '.join(available) or 'none'}"
        super().__init__(message, context)
