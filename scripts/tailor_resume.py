#!/usr/bin/env python3
"""
Resume Tailoring CLI

Tailors a YAML resume to a job description, or runs content selection alone on
an existing score document.

Commands:
    tailor - Full tailoring (4-stage pipeline, single-prompt fallback, original)
    select - Selection and filtering only, from a saved score document

Examples:\n

    tailor_resume.py tailor resume.yaml job.txt                      # Print tailored YAML

    tailor_resume.py tailor resume.yaml job.txt -o tailored.yaml     # Write to file

    tailor_resume.py tailor resume.yaml job.txt --language fr        # Write in French

    tailor_resume.py select resume.yaml scores.json -o filtered.yaml # No LLM calls
"""

import asyncio
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from quiver.contexts.tailoring import load_tailoring_config, select_resume_content, tailor_resume
from quiver.contexts.tailoring.logger import setup_tailoring_logger
from quiver.contexts.targeting.logger import setup_targeting_logger
from quiver.utils.llm import get_provider

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Tailor YAML resumes to job descriptions with relevance-scored content selection",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _read_text(path: Path) -> str:
    if not path.is_file():
        typer.secho(f"Error: File not found: {path}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def _check_config(config_path: Optional[Path]) -> None:
    if config_path is not None and not config_path.is_file():
        typer.secho(f"Error: Config file not found: {config_path}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _session_dir(prefix: str, log_dir: Optional[Path]) -> Path:
    if log_dir is not None:
        return log_dir
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return LOGS_PATH / f"{prefix}_{timestamp}"


def _write_output(content: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    typer.secho(f"✓ Written to {output}", fg=typer.colors.GREEN, bold=True)


@app.command("tailor")
def tailor_command(
    resume_path: Annotated[Path, typer.Argument(help="Base resume YAML file")],
    job_path: Annotated[Path, typer.Argument(help="Job description text file")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write tailored YAML here (default: stdout)"),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="LLM provider: openai or anthropic"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Model name (default: provider default)"),
    ] = None,
    language: Annotated[
        Optional[str],
        typer.Option("--language", "-l", help="ISO 639-1 code of the output language"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Tailoring config YAML override"),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Session log directory (default: LOGS_PATH/tailor_<time>)"),
    ] = None,
):
    """
    Tailor a resume to a job description.

    Runs the 4-stage pipeline (keywords, scoring, selection, optimization). If it
    fails, falls back to a single-prompt rewrite, then to the original resume.

    Examples:\n

        $ tailor_resume.py tailor resume.yaml job.txt -o out.yaml

        $ tailor_resume.py tailor resume.yaml job.txt -p anthropic --language de
    """
    resume_yaml = _read_text(resume_path)
    job_description = _read_text(job_path)
    _check_config(config_path)

    try:
        config = load_tailoring_config(config_path)
        llm = get_provider(provider, model)
    except (ValueError, KeyError, ImportError, OSError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if language:
        config.target_language = language

    log_file = setup_tailoring_logger(
        _session_dir("tailor", log_dir), provider_name=llm.name, config_path=config_path
    )

    typer.secho(f"\nTailoring: {resume_path.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Job: {job_path.name}")
    typer.echo(f"Provider: {llm.name}")
    typer.echo("")

    tailored = asyncio.run(tailor_resume(llm, resume_yaml, job_description, config))

    if tailored == resume_yaml:
        typer.secho("✗ Tailoring failed, original resume kept", fg=typer.colors.YELLOW, bold=True)
    _write_output(tailored, output)

    typer.echo(f"  Log: {log_file}")
    typer.echo("")


@app.command("select")
def select_command(
    resume_path: Annotated[Path, typer.Argument(help="Base resume YAML file")],
    scores_path: Annotated[Path, typer.Argument(help="Score document (JSON)")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write filtered YAML here (default: stdout)"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Tailoring config YAML override"),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Session log directory (default: LOGS_PATH/select_<time>)"),
    ] = None,
):
    """
    Select resume content from an existing score document.

    Applies thresholds, floors, caps, and category quotas without calling a
    language model, then prints the filtered resume.

    Examples:\n

        $ tailor_resume.py select resume.yaml scores.json

        $ tailor_resume.py select resume.yaml scores.json -c configs/tailoring.yaml
    """
    resume_yaml = _read_text(resume_path)
    scores_json = _read_text(scores_path)
    _check_config(config_path)

    log_file = setup_targeting_logger(_session_dir("select", log_dir), config_path=config_path)

    try:
        config = load_tailoring_config(config_path)
        filtered_yaml, metrics = select_resume_content(resume_yaml, scores_json, config)
    except (ValueError, KeyError, OSError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    _write_output(filtered_yaml, output)

    typer.echo(f"  Selected: {metrics.items_selected}/{metrics.total_items_scored} items")
    typer.echo(f"  Scores: {metrics.score_range}")
    typer.echo(f"  Log: {log_file}")
    typer.echo("")


if __name__ == "__main__":
    app()
