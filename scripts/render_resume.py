#!/usr/bin/env python3
"""
Resume Rendering CLI

Renders resume data (YAML or JSON) into a PDF through a stored template and
inspects the template store.

Commands:
    templates    - List available templates
    placeholders - Show a template's editable placeholders and sections
    render       - Render resume data with a template
    check        - Report which TeX engines are installed

Examples:\n

    render_resume.py templates                                             # List templates

    render_resume.py placeholders simple-hipster-cv                        # Inspect a template

    render_resume.py render simple-hipster-cv resume.yaml -o resume.pdf    # Render a resume

    render_resume.py render altacv-modern resume.yaml -c custom.yaml -d    # With customizations
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from cvforge.contexts.rendering import DocumentRenderer
from cvforge.contexts.rendering.compiler import SUPPORTED_ENGINES, is_compiler_available
from cvforge.contexts.rendering.logger import setup_rendering_logger
from cvforge.contexts.templating.config_store import PROJECT_ROOT
from cvforge.contexts.templating.exceptions import CvforgeError
from cvforge.utils.text_processing import safe_filename
from cvforge.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("CVFORGE_LOGS_PATH", PROJECT_ROOT / "outs" / "logs"))


def display_path(path: Path) -> str:
    """Return path relative to PROJECT_ROOT for cleaner display."""
    try:
        return str(Path(path).resolve().relative_to(PROJECT_ROOT))
    except ValueError:
        return str(path)


def load_mapping(path: Path) -> dict:
    """Load a YAML or JSON file as a plain dict."""
    data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    if not isinstance(data, dict):
        typer.secho(f"Error: {path} must contain a mapping\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return data


app = typer.Typer(
    help="Render resumes through LaTeX templates and inspect the template store",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("templates")
def templates_command():
    """
    List available templates with their engine and features.

    Examples:\n

        $ render_resume.py templates
    """
    renderer = DocumentRenderer()
    templates = renderer.get_available_templates()

    if not templates:
        typer.secho("No templates found", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)

    typer.secho(f"\n{len(templates)} templates\n", fg=typer.colors.BLUE, bold=True)
    for template in templates:
        features = [name for name, enabled in template["features"].items() if enabled]
        typer.secho(f"  {template['templateId']}", bold=True)
        typer.echo(f"    Name:     {template['name']}")
        typer.echo(f"    Engine:   {template.get('engine') or 'family default'}")
        typer.echo(f"    Features: {', '.join(features) if features else 'none'}")
    typer.echo("")


@app.command("placeholders")
def placeholders_command(
    template_id: Annotated[
        str,
        typer.Argument(help="Template to inspect"),
    ],
):
    """
    Show a template's editable placeholders and detectable sections.

    Examples:\n

        $ render_resume.py placeholders simple-hipster-cv
    """
    renderer = DocumentRenderer()
    try:
        info = renderer.extract_placeholders(template_id)
    except CvforgeError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nPlaceholders in {template_id}:", fg=typer.colors.BLUE, bold=True)
    for name, details in info["placeholders"].items():
        typer.echo(f"  {name:<30} {details['label']} ({details['type']})")

    typer.secho("\nSections:", fg=typer.colors.BLUE, bold=True)
    for section in info["sections"]:
        marker = "✓" if section["exists"] else "✗"
        typer.echo(f"  {marker} {section['id']:<20} {section['label']}")
    typer.echo("")


@app.command("render")
def render_command(
    template_id: Annotated[
        str,
        typer.Argument(help="Template to render with"),
    ],
    resume_file: Annotated[
        Path,
        typer.Argument(help="Resume data file (YAML or JSON)", exists=True, dir_okay=False),
    ],
    customizations_file: Annotated[
        Optional[Path],
        typer.Option(
            "--customizations",
            "-c",
            help="Customizations file (YAML or JSON, camelCase keys)",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Where to write the PDF (default: <template>_<timestamp>.pdf)",
        ),
    ] = None,
    keep_workspace: Annotated[
        bool,
        typer.Option(
            "--keep-workspace",
            "-k",
            help="Keep the render workspace (source, log, aux files) for inspection",
        ),
    ] = False,
    diagnostic: Annotated[
        bool,
        typer.Option(
            "--diagnostic",
            "-d",
            help="Include compiler detail in error output",
        ),
    ] = False,
):
    """
    Render resume data into a PDF.

    Examples:\n

        $ render_resume.py render simple-hipster-cv resume.yaml

        $ render_resume.py render customised-curve-cv resume.json -o cv.pdf -k
    """
    log_file = setup_rendering_logger(LOGS_PATH / f"render_{now()}")

    resume_data = load_mapping(resume_file)
    customizations = load_mapping(customizations_file) if customizations_file else None

    typer.secho(f"\nRendering: {template_id}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Resume: {display_path(resume_file)}")
    typer.echo("")

    renderer = DocumentRenderer(diagnostic=diagnostic)
    result = renderer.render_document(
        template_id, resume_data, customizations, keep_workspace=keep_workspace
    )

    typer.echo("")
    if result.success:
        output = output or Path(f"{safe_filename(template_id)}_{now()}.pdf")
        output.write_bytes(result.pdf_bytes)
        typer.secho("✓ Render succeeded", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  Engine: {result.engine}")
        typer.echo(f"  Pages: {result.page_count}")
        typer.echo(f"  PDF: {display_path(output)}")
        for warning in result.warnings:
            typer.secho(f"  ! {warning}", fg=typer.colors.YELLOW)
    else:
        error = result.error
        typer.secho(f"✗ Render failed: {error.kind.value}", fg=typer.colors.RED, bold=True)
        typer.secho(f"  {error.message}", fg=typer.colors.RED)
        if error.detail:
            typer.echo(f"\n{error.detail}")

    if keep_workspace and result.workspace:
        typer.echo(f"  Workspace: {result.workspace}")
    typer.echo(f"  Log: {display_path(log_file)}")
    typer.echo("")

    renderer.close()
    raise typer.Exit(code=0 if result.success else 1)


@app.command("check")
def check_command():
    """
    Report which TeX engines are on PATH.

    Examples:\n

        $ render_resume.py check
    """
    typer.secho("\nTeX engines:", fg=typer.colors.BLUE, bold=True)
    available = 0
    for engine in SUPPORTED_ENGINES:
        if is_compiler_available(engine):
            available += 1
            typer.secho(f"  ✓ {engine}", fg=typer.colors.GREEN)
        else:
            typer.secho(f"  ✗ {engine} (not installed)", fg=typer.colors.RED)
    typer.echo("")
    raise typer.Exit(code=0 if available else 1)


if __name__ == "__main__":
    app()
