"""Custom exceptions for rendering context."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from cvforge.contexts.templating.exceptions import CvforgeError, ErrorKind


class CompilerUnavailableError(CvforgeError):
    """Raised when the TeX engine executable cannot be found."""

    kind = ErrorKind.COMPILER_UNAVAILABLE

    def __init__(self, engine: str):
        self.engine = engine
        super().__init__(
            f"LaTeX engine '{engine}' is not installed or not on PATH",
            detail="Install TeX Live, MiKTeX or MacTeX, or set a different engine",
        )


class CompilerTimeoutError(CvforgeError):
    """Raised when the engine exceeds its time budget and is killed."""

    kind = ErrorKind.COMPILER_TIMEOUT

    def __init__(self, engine: str, timeout_s: float, detail: Optional[str] = None):
        self.engine = engine
        self.timeout_s = timeout_s
        super().__init__(f"{engine} timed out after {timeout_s:g}s and was terminated", detail)


class CompilerMissingPackageError(CvforgeError):
    """Raised when compilation fails because a .sty/.cls/input file is missing."""

    kind = ErrorKind.COMPILER_MISSING_PACKAGE

    def __init__(self, missing_file: str, detail: Optional[str] = None):
        self.missing_file = missing_file
        super().__init__(f"LaTeX file not found: {missing_file}", detail)


class CompilerFatalError(CvforgeError):
    """Raised when no PDF was produced; detail carries the log excerpt."""

    kind = ErrorKind.COMPILER_FATAL

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, detail)


class WorkspaceIOError(CvforgeError):
    """Raised when a workspace cannot be created or populated."""

    kind = ErrorKind.WORKSPACE_IO_FAILURE

    def __init__(self, message: str, path: Optional[Path] = None, original_error: Exception = None):
        self.path = path
        self.original_error = original_error
        detail = None
        if path or original_error:
            detail = f"Path: {path}\nOriginal error: {original_error}"
        super().__init__(message, detail)


@dataclass(frozen=True)
class RenderError:
    """
    Failure returned to callers instead of PDF bytes.

    detail is only populated in diagnostic mode.
    """

    kind: ErrorKind
    message: str
    detail: Optional[str] = None

    @classmethod
    def from_exception(cls, error: CvforgeError, diagnostic: bool = False) -> "RenderError":
        return cls(
            kind=error.kind,
            message=error.message,
            detail=error.detail if diagnostic else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {"kind": self.kind.value, "message": self.message}
        if self.detail:
            payload["detail"] = self.detail
        return payload
