"""
LaTeX Compilation Module

Runs a TeX engine over a workspace's main source. A compilation is accepted
when the PDF exists: engines exit nonzero on recoverable problems while still
producing a usable document, so the exit code only decides whether later
passes are worth running.
"""

import os
import re
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from cvforge.contexts.rendering.exceptions import (
    CompilerFatalError,
    CompilerMissingPackageError,
    CompilerTimeoutError,
    CompilerUnavailableError,
)
from cvforge.contexts.rendering.logger import _log_debug, _log_warning
from cvforge.utils.pdf_processing import page_count

load_dotenv()

COMPILE_TIMEOUT_S = float(os.getenv("CVFORGE_COMPILE_TIMEOUT_S", "60"))
# Tail of engine stdout/stderr kept per compilation
MAX_OUTPUT_CHARS = int(os.getenv("CVFORGE_MAX_OUTPUT_CHARS", str(10 * 1024 * 1024)))

SUPPORTED_ENGINES = ("pdflatex", "xelatex", "lualatex")

# Fatal log lines surfaced as error detail
FATAL_EXCERPT_LINES = 3

_FATAL_LINE_RE = re.compile(r"^! (.+)$", re.MULTILINE)
_MISSING_FILE_RE = re.compile(r"! LaTeX Error: File `([^']+)' not found")


def _bounded_output(text: Optional[str]) -> str:
    """Last MAX_OUTPUT_CHARS characters of engine output."""
    if not text:
        return ""
    if len(text) <= MAX_OUTPUT_CHARS:
        return text
    dropped = len(text) - MAX_OUTPUT_CHARS
    _log_warning(f"Engine output truncated ({dropped} leading characters dropped)")
    return text[-MAX_OUTPUT_CHARS:]


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether a PDF was produced
        engine: Engine used
        pdf_path: Path to generated PDF (None if failed)
        log_path: Path to the engine's .log file (None if never written)
        stdout: Standard output from all passes
        stderr: Standard error from all passes
        errors: Parsed LaTeX errors
        warnings: Parsed LaTeX warnings
        fatal_lines: Last fatal ('! ...') log lines
        missing_file: File named by a "File `x' not found" error
        return_codes: Exit code of each pass that ran
        page_count: Number of pages in generated PDF (None if not available)
    """

    success: bool
    engine: str = "pdflatex"
    pdf_path: Optional[Path] = None
    log_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    fatal_lines: List[str] = field(default_factory=list)
    missing_file: Optional[str] = None
    return_codes: List[int] = field(default_factory=list)
    page_count: Optional[int] = None


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = [match.group(1).strip() for match in _FATAL_LINE_RE.finditer(log_content)]

    # Error patterns that don't start with "!"
    additional_error_patterns = [
        r"Undefined control sequence",
        r"File ended while scanning use of",
        r"Emergency stop",
    ]
    for pattern in additional_error_patterns:
        match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
        if match and match.group(1) not in errors:
            errors.append(match.group(1))

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    warnings = []
    for pattern in warning_patterns:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings


def find_missing_file(log_content: str) -> Optional[str]:
    """Name of the first missing package/class/input file reported in a log."""
    match = _MISSING_FILE_RE.search(log_content)
    return match.group(1) if match else None


def fatal_excerpt(log_content: str, limit: int = FATAL_EXCERPT_LINES) -> List[str]:
    """Last `limit` fatal ('! ...') lines of a log, oldest first."""
    lines = [f"! {match.group(1).strip()}" for match in _FATAL_LINE_RE.finditer(log_content)]
    return lines[-limit:]


def is_compiler_available(engine: str = "pdflatex") -> bool:
    """Check whether a TeX engine executable is on PATH."""
    return shutil.which(engine) is not None


def compile_latex(
    tex_file: Path,
    engine: str = "pdflatex",
    num_passes: int = 2,
    timeout_s: float = COMPILE_TIMEOUT_S,
) -> CompilationResult:
    """
    Compile a LaTeX file to PDF inside its own directory.

    Pure compilation function: the file's directory is the working directory
    and receives every output. Each pass is bounded by timeout_s; an expired
    pass is killed.

    Args:
        tex_file: Path to the .tex file to compile
        engine: TeX engine executable (pdflatex, xelatex, lualatex)
        num_passes: Number of passes (default: 2 for cross-references)
        timeout_s: Per-pass time limit in seconds

    Returns:
        CompilationResult with success status and diagnostic information

    Raises:
        CompilerUnavailableError: Engine not installed
        CompilerTimeoutError: A pass exceeded timeout_s
    """
    tex_file = Path(tex_file)
    if not tex_file.exists():
        raise FileNotFoundError(f"TeX file not found: {tex_file}")
    if not is_compiler_available(engine):
        raise CompilerUnavailableError(engine)

    compile_dir = tex_file.parent
    pdf_path = compile_dir / f"{tex_file.stem}.pdf"
    log_path = compile_dir / f"{tex_file.stem}.log"

    # Stale output would make success detection ambiguous
    for stale in (pdf_path, log_path):
        if stale.exists():
            stale.unlink()

    cmd = [engine, "-interaction=nonstopmode", "-halt-on-error", "-file-line-error", tex_file.name]
    all_stdout = []
    all_stderr = []
    return_codes = []

    for pass_number in range(1, num_passes + 1):
        try:
            result = subprocess.run(
                cmd,
                cwd=compile_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
                timeout=timeout_s,
            )
        except subprocess.TimeoutExpired as e:
            # subprocess.run has already killed the child
            partial = e.stdout if isinstance(e.stdout, str) else ""
            raise CompilerTimeoutError(engine, timeout_s, detail=partial[-2000:] or None) from e
        except FileNotFoundError as e:
            raise CompilerUnavailableError(engine) from e

        all_stdout.append(_bounded_output(result.stdout))
        all_stderr.append(_bounded_output(result.stderr))
        return_codes.append(result.returncode)
        _log_debug(f"{engine} pass {pass_number}/{num_passes} exited with {result.returncode}")

        # Later passes only help when the first one produced something
        if result.returncode != 0 and not pdf_path.exists():
            break

    errors: List[str] = []
    warnings: List[str] = []
    fatal_lines: List[str] = []
    missing_file = None
    if log_path.exists():
        # TeX writes logs in latin-1 (font metadata contains non-UTF-8)
        log_content = log_path.read_text(encoding="latin-1")
        errors, warnings = _parse_latex_log(log_content)
        fatal_lines = fatal_excerpt(log_content)
        missing_file = find_missing_file(log_content)

    success = pdf_path.exists() and pdf_path.stat().st_size > 0
    if not success and not errors:
        errors.append("PDF file was not generated")
    if success and any(code != 0 for code in return_codes):
        _log_warning(f"{engine} exited nonzero but produced a PDF; accepting it")

    return CompilationResult(
        success=success,
        engine=engine,
        pdf_path=pdf_path if success else None,
        log_path=log_path if log_path.exists() else None,
        stdout=_bounded_output("\n".join(all_stdout)),
        stderr=_bounded_output("\n".join(all_stderr)),
        errors=errors,
        warnings=warnings,
        fatal_lines=fatal_lines,
        missing_file=missing_file,
        return_codes=return_codes,
        page_count=page_count(pdf_path) if success else None,
    )


def raise_for_failure(result: CompilationResult) -> None:
    """
    Turn a failed CompilationResult into the matching exception.

    Raises:
        CompilerMissingPackageError: Log names a missing file
        CompilerFatalError: Any other failure, with the fatal log excerpt
    """
    if result.success:
        return

    detail_lines = result.fatal_lines or result.errors[-FATAL_EXCERPT_LINES:]
    detail = "\n".join(detail_lines) if detail_lines else None

    if result.missing_file:
        raise CompilerMissingPackageError(result.missing_file, detail=detail)

    summary = result.errors[-1] if result.errors else "PDF file was not generated"
    raise CompilerFatalError(f"LaTeX compilation failed: {summary}", detail=detail)

