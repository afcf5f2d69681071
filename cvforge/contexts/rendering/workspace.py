"""
Render Workspaces

Every render gets its own uniquely named directory holding the template's
ancillary files, the generated source and the engine's output. Nothing is
shared between renders and a workspace is never reused. Deletion is deferred
by a grace delay so the caller can finish reading the PDF.
"""

import os
import shutil
import tempfile
import threading
import uuid
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from cvforge.contexts.rendering.exceptions import WorkspaceIOError
from cvforge.contexts.rendering.logger import _log_debug, _log_warning
from cvforge.utils.timestamp import now_exact

load_dotenv()

WORKSPACE_ROOT = Path(
    os.getenv("CVFORGE_WORKSPACE_ROOT", Path(tempfile.gettempdir()) / "cvforge")
)
CLEANUP_DELAY_S = float(os.getenv("CVFORGE_CLEANUP_DELAY_S", "30"))

# Some family sources load figureversions, which only ships with XeTeX-oriented
# font setups; pdflatex gets an empty package with the same interface.
FIGUREVERSIONS_STUB = r"""\NeedsTeXFormat{LaTeX2e}
\ProvidesPackage{figureversions}[2024/01/01 stub for pdflatex]
\providecommand{\figureversion}[1]{}
\endinput
"""


class Workspace:
    """
    One render's private directory.

    Example:
        workspace = Workspace.create()
        workspace.populate(template_dir)
        tex_path = workspace.write_source("main.tex", source)
        ...
        workspace.schedule_cleanup()
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._timer: Optional[threading.Timer] = None

    @classmethod
    def create(cls, root: Path = None) -> "Workspace":
        """
        Create a fresh workspace directory under root.

        Raises:
            WorkspaceIOError: Directory could not be created
        """
        root = Path(root) if root is not None else WORKSPACE_ROOT
        path = root / f"render_{now_exact()}_{uuid.uuid4().hex[:8]}"
        try:
            path.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise WorkspaceIOError("Could not create render workspace", path, e) from e
        _log_debug(f"Created workspace {path}")
        return cls(path)

    def populate(self, template_dir: Path) -> List[str]:
        """
        Copy a template's non-hidden files and folders into the workspace.

        Returns:
            Names copied

        Raises:
            WorkspaceIOError: Template directory missing or copy failed
        """
        template_dir = Path(template_dir)
        if not template_dir.is_dir():
            raise WorkspaceIOError("Template directory not found", template_dir)

        copied = []
        try:
            for entry in sorted(template_dir.iterdir()):
                if entry.name.startswith("."):
                    continue
                target = self.path / entry.name
                if entry.is_dir():
                    shutil.copytree(
                        entry, target, ignore=shutil.ignore_patterns(".*"), dirs_exist_ok=True
                    )
                else:
                    shutil.copy2(entry, target)
                copied.append(entry.name)
        except OSError as e:
            raise WorkspaceIOError("Could not copy template files", template_dir, e) from e

        _log_debug(f"Copied {len(copied)} template entries into workspace")
        return copied

    def write_source(self, name: str, text: str) -> Path:
        """Write the final source file."""
        path = self.path / name
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise WorkspaceIOError("Could not write template source", path, e) from e
        return path

    def write_engine_shims(self, engine: str) -> None:
        """Drop compatibility stubs the chosen engine needs."""
        if engine != "pdflatex":
            return
        stub = self.path / "figureversions.sty"
        if not stub.exists():
            stub.write_text(FIGUREVERSIONS_STUB, encoding="utf-8")

    def schedule_cleanup(self, delay_s: float = CLEANUP_DELAY_S) -> Optional[threading.Timer]:
        """
        Delete the workspace after delay_s seconds on a daemon timer.

        A delay of 0 or less deletes immediately and returns None.
        """
        if delay_s <= 0:
            self.cleanup()
            return None

        timer = threading.Timer(delay_s, self.cleanup)
        timer.daemon = True
        timer.start()
        self._timer = timer
        _log_debug(f"Workspace cleanup scheduled in {delay_s:g}s: {self.path.name}")
        return timer

    def cancel_cleanup(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def cleanup(self) -> None:
        """Delete the workspace now; failures are logged, never raised."""
        try:
            shutil.rmtree(self.path)
            _log_debug(f"Removed workspace {self.path.name}")
        except FileNotFoundError:
            pass
        except OSError as e:
            _log_warning(f"Failed to remove workspace {self.path}: {e}")

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def __repr__(self) -> str:
        return f"Workspace({self.path})"
