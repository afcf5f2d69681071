"""Custom exceptions for templating context with remediation hints."""

from enum import Enum
from pathlib import Path
from typing import List, Optional


class ErrorKind(str, Enum):
    """Failure and warning categories reported by the render pipeline."""

    CONFIG_NOT_FOUND = "ConfigNotFound"
    CONFIG_INVALID = "ConfigInvalid"
    CONFIG_MISMATCH = "ConfigMismatch"
    TEMPLATE_FILE_NOT_FOUND = "TemplateFileNotFound"
    INJECTOR_FALLBACK_USED = "InjectorFallbackUsed"
    PLACEHOLDER_UNRESOLVED = "PlaceholderUnresolved"
    COMPILER_MISSING_PACKAGE = "CompilerMissingPackage"
    COMPILER_FATAL = "CompilerFatal"
    COMPILER_TIMEOUT = "CompilerTimeout"
    COMPILER_UNAVAILABLE = "CompilerUnavailable"
    WORKSPACE_IO_FAILURE = "WorkspaceIOFailure"


class CvforgeError(Exception):
    """
    Base exception for render pipeline failures.

    Attributes:
        kind: ErrorKind category
        message: Short human-readable description
        detail: Diagnostic detail (log excerpts, paths), shown only in diagnostic mode
    """

    kind: ErrorKind = ErrorKind.COMPILER_FATAL

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ConfigNotFoundError(CvforgeError):
    """Raised when no config file exists for a template id."""

    kind = ErrorKind.CONFIG_NOT_FOUND

    def __init__(self, template_id: str, config_path: Path, available: Optional[List[str]] = None):
        self.template_id = template_id
        self.config_path = config_path
        self.available = available or []

        message = f"Template config not found: {template_id}"
        if self.available:
            message += f". Available templates: {', '.join(self.available)}"

        super().__init__(message, detail=f"Expected: {config_path}")
        self.args = (f"{message}\n{self.detail}",)


class ConfigInvalidError(CvforgeError, ValueError):
    """Raised when a config fails validation; carries every field-level message."""

    kind = ErrorKind.CONFIG_INVALID

    def __init__(self, template_id: str, errors: List[str]):
        self.template_id = template_id
        self.errors = list(errors)

        message = f"Invalid template config for {template_id}: {len(self.errors)} problem(s)"
        super().__init__(message, detail="\n".join(f"  - {e}" for e in self.errors))
        self.args = (f"{message}\n{self.detail}",)


class ConfigMismatchError(CvforgeError, ValueError):
    """Raised when a config's templateId disagrees with its file name."""

    kind = ErrorKind.CONFIG_MISMATCH

    def __init__(self, requested_id: str, declared_id: str):
        self.requested_id = requested_id
        self.declared_id = declared_id
        super().__init__(
            f"Template ID mismatch: requested '{requested_id}' but config declares '{declared_id}'"
        )


class TemplateFileNotFoundError(CvforgeError):
    """Raised when a template's main source file cannot be located."""

    kind = ErrorKind.TEMPLATE_FILE_NOT_FOUND

    def __init__(self, main_file: str, template_dir: Path, available: Optional[List[str]] = None):
        self.main_file = main_file
        self.template_dir = template_dir
        self.available = available or []

        message = f"Template file not found: {main_file}"
        if self.available:
            message += f". Available .tex files: {', '.join(self.available)}"

        super().__init__(message, detail=f"Searched in: {template_dir}")
        self.args = (f"{message}\n{self.detail}",)
