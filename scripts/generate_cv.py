#!/usr/bin/env python3
"""
Résumé Generation CLI

Generates PDF résumés from form submissions and presentation templates.

Commands:
    generate       - Normalize a submission, populate a template and convert to PDF
    normalize      - Print the normalized field map for a submission
    check-template - Inspect a template for unknown or malformed placeholders

Examples:\n

    generate_cv.py generate submission.json --template templates/1.pptx --out cv.pdf

    generate_cv.py generate submission.json -t templates/1.pptx -o cv.pdf --profile compact

    generate_cv.py normalize submission.json --no-clamp

    generate_cv.py check-template templates/1.pptx
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from vitae.contexts.rendering import generate_document
from vitae.contexts.templating import inspect_template, load_pipeline_config, normalize
from vitae.utils.logger import setup_logger
from vitae.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Generate PDF résumés from form submissions and presentation templates",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_submission(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.secho(f"Error: could not read submission {path}: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _load_config(profile: Optional[str], no_clamp: bool):
    overrides = {"clamp_enabled": False} if no_clamp else {}
    try:
        return load_pipeline_config(profile=profile, **overrides)
    except (ValueError, OSError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("generate")
def generate_command(
    submission: Annotated[
        Path,
        typer.Argument(help="Submission JSON file (flat, nested or enveloped)"),
    ],
    template: Annotated[
        Path,
        typer.Option("--template", "-t", help="Presentation template (.pptx)"),
    ],
    out: Annotated[
        Path,
        typer.Option("--out", "-o", help="Output PDF path"),
    ] = Path("cv.pdf"),
    profile: Annotated[
        Optional[str],
        typer.Option("--profile", "-p", help="Budget profile from budget_profiles.yaml"),
    ] = None,
    no_clamp: Annotated[
        bool,
        typer.Option("--no-clamp", help="Only normalize whitespace; do not truncate text"),
    ] = False,
    require_photo: Annotated[
        bool,
        typer.Option("--require-photo", help="Fail when no photo could be resolved"),
    ] = False,
    keep_workdir: Annotated[
        bool,
        typer.Option("--keep-workdir", "-k", help="Keep the temporary working directory"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logs and converter output on the console"),
    ] = False,
):
    """
    Generate a PDF résumé from a submission and a template.

    Examples:\n

        $ generate_cv.py generate submission.json -t templates/1.pptx -o cv.pdf

        $ generate_cv.py generate submission.json -t templates/1.pptx --require-photo
    """
    log_dir = LOGS_PATH / f"generate_{now()}"
    log_file = setup_logger(
        context_name="generate",
        log_dir=log_dir,
        extra_provenance={"Submission": str(submission), "Template": str(template)},
        console_level="DEBUG" if verbose else "INFO",
    )

    raw = _load_submission(submission)
    config = _load_config(profile, no_clamp)

    typer.secho(f"\nGenerating: {submission.name} -> {out}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Template: {template}")
    typer.echo("")

    result = asyncio.run(
        generate_document(
            raw,
            template,
            config=config,
            require_photo=require_photo,
            keep_workdir=keep_workdir,
            verbose=verbose,
        )
    )

    typer.echo("")
    if result.success:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(result.pdf_bytes)
        typer.secho("✓ Generation succeeded", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  PDF: {out}")
    else:
        typer.secho(
            f"✗ Generation failed with {len(result.errors)} errors", fg=typer.colors.RED, bold=True
        )
        typer.echo("\nErrors:")
        for error in result.errors:
            typer.secho(f"  - {error}", fg=typer.colors.RED)

    if result.normalized is not None and result.normalized.photo_error:
        typer.secho(f"  Photo: {result.normalized.photo_error}", fg=typer.colors.YELLOW)
    if result.workdir:
        typer.echo(f"  Working directory: {result.workdir}")
    typer.echo(f"  Log: {log_file}")
    typer.echo("")

    raise typer.Exit(code=0 if result.success else 1)


@app.command("normalize")
def normalize_command(
    submission: Annotated[
        Path,
        typer.Argument(help="Submission JSON file (flat, nested or enveloped)"),
    ],
    profile: Annotated[
        Optional[str],
        typer.Option("--profile", "-p", help="Budget profile from budget_profiles.yaml"),
    ] = None,
    no_clamp: Annotated[
        bool,
        typer.Option("--no-clamp", help="Only normalize whitespace; do not truncate text"),
    ] = False,
):
    """
    Print the normalized field map for a submission as JSON.

    The photo is summarized by size and source rather than dumped.

    Examples:\n

        $ generate_cv.py normalize submission.json

        $ generate_cv.py normalize submission.json --profile compact
    """
    setup_logger(context_name="normalize", log_dir=LOGS_PATH / f"normalize_{now()}")

    raw = _load_submission(submission)
    config = _load_config(profile, no_clamp)
    normalized = asyncio.run(normalize(raw, config))

    output = dict(normalized.fields)
    output["photo"] = (
        {"bytes": len(normalized.photo), "source": normalized.photo_source}
        if normalized.photo is not None
        else None
    )
    if normalized.photo_error:
        output["photo_error"] = normalized.photo_error

    typer.echo(json.dumps(output, indent=2, ensure_ascii=False))


@app.command("check-template")
def check_template_command(
    template: Annotated[
        Path,
        typer.Argument(help="Presentation template (.pptx)"),
    ],
    profile: Annotated[
        Optional[str],
        typer.Option("--profile", "-p", help="Budget profile defining the schema"),
    ] = None,
):
    """
    Inspect a template for unknown, split or malformed placeholders.

    Examples:\n

        $ generate_cv.py check-template templates/1.pptx
    """
    setup_logger(context_name="check_template", log_dir=LOGS_PATH / f"check_template_{now()}")

    if not template.exists():
        typer.secho(f"Error: template not found: {template}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    report = inspect_template(template, _load_config(profile, False))

    typer.secho(f"\nTemplate: {template}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Placeholders: {', '.join(report.placeholders) or '(none)'}")
    typer.echo(f"  Image placeholders: {', '.join(report.image_placeholders) or '(none)'}")
    if report.split_placeholders:
        typer.secho(
            f"  Split across runs: {', '.join(report.split_placeholders)}", fg=typer.colors.YELLOW
        )
    if report.unknown_placeholders:
        typer.secho(
            f"  Unknown placeholders: {', '.join(report.unknown_placeholders)}",
            fg=typer.colors.RED,
        )
    for issue in report.issues:
        typer.secho(
            f"  Slide {issue.slide}, run {issue.run_index}: {issue.kind} ({issue.text!r})",
            fg=typer.colors.RED,
        )

    typer.echo("")
    if report.ok:
        typer.secho("✓ Template OK", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("✗ Template has problems", fg=typer.colors.RED, bold=True)
    typer.echo("")

    raise typer.Exit(code=0 if report.ok else 1)


if __name__ == "__main__":
    app()
