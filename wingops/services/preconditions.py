"""
Precondition Checking

Evaluates every required tool, file, secret and session up front and reports
all failures together before any external system is touched.
"""

import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, Tuple

from wingops.exceptions import PreconditionError, WingOpsError
from wingops.logger import OpsLogger
from wingops.models.results import ValidationResult


class Precondition(ABC):
    """A single named requirement."""

    name: str = ""

    @abstractmethod
    def check(self) -> Tuple[bool, str]:
        """Return (ok, detail). Detail explains a failure or adds context."""


class ToolPrecondition(Precondition):
    """Executable available on PATH."""

    def __init__(self, tool: str, hint: Optional[str] = None):
        self.tool = tool
        self.hint = hint
        self.name = f"Tool '{tool}' on PATH"

    def check(self) -> Tuple[bool, str]:
        location = shutil.which(self.tool)
        if location:
            return True, location
        return False, self.hint or f"Install {self.tool} and add it to PATH"


class FilePrecondition(Precondition):
    """File or directory exists."""

    def __init__(self, path: Path, label: Optional[str] = None):
        self.path = Path(path)
        self.name = label or f"File {self.path}"

    def check(self) -> Tuple[bool, str]:
        if self.path.exists():
            return True, str(self.path)
        return False, f"Not found: {self.path}"


class SecretPrecondition(Precondition):
    """
    Secret resolvable from the store. Only the name is ever reported.

    The store may be given as a zero-argument callable so that building it
    happens inside the check and its failure is reported with the rest.
    """

    def __init__(self, store, secret_name: str):
        self._store = store
        self.secret_name = secret_name
        self.name = f"Secret '{secret_name}'"

    @property
    def store(self):
        return self._store() if callable(self._store) else self._store

    def check(self) -> Tuple[bool, str]:
        store = self.store
        value = store.get_secret(self.secret_name)
        if value and value.strip():
            return True, f"resolvable from {store.describe()}"
        return False, f"Missing or empty in {store.describe()}"


class SessionPrecondition(Precondition):
    """Authenticated Azure CLI session."""

    name = "Azure CLI session"

    def __init__(self, runner):
        self.runner = runner

    def check(self) -> Tuple[bool, str]:
        result = self.runner.run(
            ["az", "account", "show", "--query", "name", "-o", "tsv"], check=False
        )
        if result.is_success and result.stdout.strip():
            return True, f"Subscription: {result.stdout.strip()}"
        return False, "Not logged in. Run: az login"


class PreconditionChecker:
    """Evaluates conditions independently and collects every failure."""

    def __init__(self, logger: Optional[OpsLogger] = None):
        self.logger = logger

    def check(self, conditions: Iterable[Precondition]) -> ValidationResult:
        result = ValidationResult()

        for condition in conditions:
            try:
                ok, detail = condition.check()
            except WingOpsError as e:
                ok, detail = False, e.message
            except Exception as e:
                ok, detail = False, f"{type(e).__name__}: {e}"

            if ok:
                self._report_pass(condition.name, detail)
            else:
                result.add_issue(f"{condition.name}: {detail}")
                self._report_fail(condition.name, detail)

        return result

    def require(self, conditions: Iterable[Precondition]) -> ValidationResult:
        """Like check(), but raises PreconditionError listing every issue."""
        result = self.check(conditions)
        if not result.is_valid:
            raise PreconditionError(result.issues)
        return result

    def _report_pass(self, name: str, detail: str) -> None:
        if self.logger:
            self.logger.success(f"{name} ({detail})")

    def _report_fail(self, name: str, detail: str) -> None:
        if self.logger:
            self.logger.failure(f"{name}: {detail}")
