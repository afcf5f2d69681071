"""
Document Renderer

Public entry point of the render pipeline:

    config -> main source -> workspace -> inject -> customize -> sanitize -> compile -> PDF bytes

Each render owns a fresh workspace whose deletion is scheduled (after a grace
delay) whether the render succeeds or not. Blocking work can be pushed onto a
bounded thread pool with render_document_async().
"""

import asyncio
import functools
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from dotenv import load_dotenv

from cvforge.contexts.rendering.compiler import (
    COMPILE_TIMEOUT_S,
    CompilationResult,
    compile_latex,
    raise_for_failure,
)
from cvforge.contexts.rendering.exceptions import RenderError, WorkspaceIOError
from cvforge.contexts.rendering.logger import (
    _log_error,
    _log_info,
    _log_warning,
    log_compilation_result,
    log_render_start,
)
from cvforge.contexts.rendering.workspace import CLEANUP_DELAY_S, WORKSPACE_ROOT, Workspace
from cvforge.contexts.templating.config_store import PROJECT_ROOT, TemplateConfigStore
from cvforge.contexts.templating.customizations import Customizations
from cvforge.contexts.templating.customizer import Customizer, plan_operations
from cvforge.contexts.templating.exceptions import CvforgeError, TemplateFileNotFoundError
from cvforge.contexts.templating.injector import DataInjector, TemplateIdentity
from cvforge.contexts.templating.logger import log_customization_plan
from cvforge.contexts.templating.placeholders import describe_placeholders, extract_sections
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.contexts.templating.sanitizer import sanitize
from cvforge.contexts.templating.template_config import TemplateConfig
from cvforge.utils.text_processing import safe_filename, set_max_consecutive_blank_lines

load_dotenv()

TEMPLATE_STORE_PATH = Path(
    os.getenv("CVFORGE_TEMPLATE_STORE_PATH", PROJECT_ROOT / "templates" / "store")
)
MAX_WORKERS = int(os.getenv("CVFORGE_MAX_WORKERS", "4"))
DIAGNOSTIC_MODE = os.getenv("CVFORGE_DIAGNOSTIC", "false").lower() == "true"

Compiler = Callable[..., CompilationResult]


@dataclass
class RenderResult:
    """
    Outcome of one render.

    Attributes:
        success: Whether PDF bytes were produced
        template_id: Template rendered
        pdf_bytes: The compiled document (None on failure)
        error: Structured failure (None on success)
        engine: TeX engine used
        page_count: Pages in the PDF
        workspace: Workspace directory (deleted after the grace delay)
        warnings: Non-fatal anomalies (fallback adapter, unresolved tokens, skipped customizations)
        tex_source: Final source handed to the engine
    """

    success: bool
    template_id: str
    pdf_bytes: Optional[bytes] = None
    error: Optional[RenderError] = None
    engine: Optional[str] = None
    page_count: Optional[int] = None
    workspace: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)
    tex_source: Optional[str] = None


@dataclass
class PreparedSource:
    """A template source after injection, customization and sanitization."""

    text: str
    engine: str
    warnings: List[str] = field(default_factory=list)


class DocumentRenderer:
    """
    Renders resume data into PDFs through template families.

    Args:
        config_store: Shared config store (one per process)
        store_dir: Template store holding one folder per template
        workspace_root: Parent directory of per-render workspaces
        injector: Data injector (default dispatch rules)
        compiler: Compilation function, compile_latex() by default
        compile_timeout_s: Per-pass engine time limit
        cleanup_delay_s: Grace delay before a workspace is deleted
        diagnostic: Include error detail in RenderError
        max_workers: Thread pool size for render_document_async()
    """

    def __init__(
        self,
        config_store: TemplateConfigStore = None,
        store_dir: Path = None,
        workspace_root: Path = None,
        injector: DataInjector = None,
        compiler: Compiler = compile_latex,
        compile_timeout_s: float = COMPILE_TIMEOUT_S,
        cleanup_delay_s: float = CLEANUP_DELAY_S,
        diagnostic: bool = DIAGNOSTIC_MODE,
        max_workers: int = MAX_WORKERS,
    ):
        self.config_store = config_store or TemplateConfigStore()
        self.store_dir = Path(store_dir) if store_dir is not None else TEMPLATE_STORE_PATH
        self.workspace_root = Path(workspace_root) if workspace_root is not None else WORKSPACE_ROOT
        self.injector = injector or DataInjector()
        self.compiler = compiler
        self.compile_timeout_s = compile_timeout_s
        self.cleanup_delay_s = cleanup_delay_s
        self.diagnostic = diagnostic
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    # Template discovery

    def load_config(self, template_id: str) -> TemplateConfig:
        return self.config_store.load_config(template_id)

    def get_available_templates(self) -> List[Dict[str, Any]]:
        return self.config_store.get_available_templates()

    def resolve_main_file(self, config: TemplateConfig) -> Path:
        """
        Locate a template's main source.

        Falls back to '<stem>*.tex' variants of mainFile in the template folder.

        Raises:
            TemplateFileNotFoundError: Nothing suitable exists (lists available .tex files)
        """
        template_dir = self.store_dir / config.store_dir_name
        main_path = template_dir / config.main_file
        if main_path.is_file():
            return main_path

        if template_dir.is_dir():
            stem = Path(config.main_file).stem
            variants = sorted(template_dir.glob(f"{stem}*.tex"))
            if variants:
                _log_warning(f"{config.main_file} not found; using {variants[0].name}")
                return variants[0]
            available = sorted(p.name for p in template_dir.glob("*.tex"))
        else:
            available = []

        raise TemplateFileNotFoundError(config.main_file, template_dir, available)

    def read_template_source(self, template_id: str) -> tuple[TemplateConfig, Path, str]:
        """Config, main source path and raw main source text for a loosely named template."""
        config = self.load_config(self.config_store.resolve_template_id(template_id))
        main_path = self.resolve_main_file(config)
        try:
            text = main_path.read_text(encoding="utf-8")
        except OSError as e:
            raise WorkspaceIOError("Could not read template source", main_path, e) from e
        return config, main_path, text

    def extract_placeholders(self, template_id: str) -> Dict[str, Any]:
        """
        Editable placeholders and detectable sections of a template.

        Returns:
            {"placeholders": {name: {label, type, default, currentValue}},
             "sections": [{id, label, exists, content}]}
        """
        config, _, text = self.read_template_source(template_id)
        return {
            "placeholders": describe_placeholders(config, text),
            "sections": extract_sections(text, config),
        }

    # Pipeline

    def prepare_source(
        self,
        config: TemplateConfig,
        raw_text: str,
        resume: ResumeView,
        customizations: Customizations,
        workspace_dir: Optional[Path] = None,
    ) -> PreparedSource:
        """Inject, customize and sanitize a raw template source."""
        warnings: List[str] = []
        identity = TemplateIdentity.from_config(config)

        injection = self.injector.inject_report(identity, resume, raw_text, workspace_dir)
        if injection.used_fallback:
            warnings.append(
                f"InjectorFallbackUsed: {config.template_id} populated by "
                f"'{injection.adapter.name}' adapter"
            )

        operations = plan_operations(customizations, config)
        log_customization_plan(config.template_id, operations)
        customizer = Customizer(config.template_id, injection.text, config).apply(operations)
        customizer.apply_placeholder_defaults()
        for op in customizer.skipped:
            warnings.append(f"Customization skipped: {op}")

        report = sanitize(customizer.get_modified_tex(), workspace_dir)
        if report.removed_tokens:
            warnings.append(
                f"PlaceholderUnresolved: {', '.join(report.removed_tokens)}"
            )

        return PreparedSource(
            text=set_max_consecutive_blank_lines(report.text, max_consecutive=1),
            engine=config.engine or injection.adapter.engine,
            warnings=warnings,
        )

    def render_document(
        self,
        template_id: str,
        resume_data: Union[Mapping[str, Any], ResumeView, None],
        customizations: Union[Customizations, Mapping[str, Any], None] = None,
        keep_workspace: bool = False,
    ) -> RenderResult:
        """
        Render resume data with a template.

        Never raises for pipeline failures: they come back as RenderResult.error.

        Args:
            template_id: Template to use
            resume_data: Resume data mapping (read-only)
            customizations: Customizations or a camelCase request dict
            keep_workspace: Skip the scheduled deletion (debugging)

        Returns:
            RenderResult with PDF bytes or a RenderError
        """
        if not isinstance(customizations, Customizations):
            customizations = Customizations.from_dict(customizations)
        resume = resume_data if isinstance(resume_data, ResumeView) else ResumeView(resume_data)

        workspace: Optional[Workspace] = None
        try:
            config, main_path, raw_text = self.read_template_source(template_id)
            template_id = config.template_id

            workspace = Workspace.create(self.workspace_root)
            workspace.populate(main_path.parent)

            prepared = self.prepare_source(config, raw_text, resume, customizations, workspace.path)
            log_render_start(template_id, prepared.engine, workspace.path)

            workspace.write_engine_shims(prepared.engine)
            tex_path = workspace.write_source(safe_filename(main_path.name), prepared.text)

            result = self._compile(template_id, tex_path, prepared.engine)
            raise_for_failure(result)

            return RenderResult(
                success=True,
                template_id=template_id,
                pdf_bytes=result.pdf_path.read_bytes(),
                engine=prepared.engine,
                page_count=result.page_count,
                workspace=workspace.path,
                warnings=prepared.warnings,
                tex_source=prepared.text,
            )
        except CvforgeError as e:
            _log_error(f"Render of {template_id} failed: {e.kind.value}: {e.message}")
            return RenderResult(
                success=False,
                template_id=template_id,
                error=RenderError.from_exception(e, diagnostic=self.diagnostic),
                workspace=workspace.path if workspace else None,
            )
        finally:
            if workspace is not None and not keep_workspace:
                workspace.schedule_cleanup(self.cleanup_delay_s)

    def _compile(self, template_id: str, tex_path: Path, engine: str) -> CompilationResult:
        start_time = time.time()
        result = self.compiler(tex_path, engine=engine, timeout_s=self.compile_timeout_s)
        log_compilation_result(template_id, result, time.time() - start_time)
        return result

    async def render_document_async(
        self,
        template_id: str,
        resume_data: Union[Mapping[str, Any], ResumeView, None],
        customizations: Union[Customizations, Mapping[str, Any], None] = None,
    ) -> RenderResult:
        """render_document() on the renderer's thread pool."""
        loop = asyncio.get_running_loop()
        call = functools.partial(self.render_document, template_id, resume_data, customizations)
        return await loop.run_in_executor(self._get_executor(), call)

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="cvforge-render"
            )
        return self._executor

    def close(self) -> None:
        """Shut down the thread pool (pending renders finish first)."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        _log_info("Renderer closed")


_default_renderer: Optional[DocumentRenderer] = None


def get_renderer() -> DocumentRenderer:
    """Process-wide renderer built from environment settings."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = DocumentRenderer()
    return _default_renderer


def render_document(
    template_id: str,
    resume_data: Mapping[str, Any],
    customizations: Optional[Mapping[str, Any]] = None,
) -> RenderResult:
    return get_renderer().render_document(template_id, resume_data, customizations)


def extract_placeholders(template_id: str) -> Dict[str, Any]:
    return get_renderer().extract_placeholders(template_id)


def load_config(template_id: str) -> TemplateConfig:
    return get_renderer().load_config(template_id)


def get_available_templates() -> List[Dict[str, Any]]:
    return get_renderer().get_available_templates()
