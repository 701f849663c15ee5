"""CLI commands for the AI digest pipeline."""

import json
import logging
import sys
import uuid
from pathlib import Path

import click
import structlog

from src.config.constants import COMPONENT_CLI
from src.config.error_hints import format_validation_error
from src.config.loader import ConfigValidationError, load_pipeline_config
from src.config.schemas.base import SourceTier
from src.config.schemas.pipeline import PipelineConfig
from src.observability.logging import bind_run_context, configure_logging
from src.pipeline import run_digest
from src.renderer import JsonRenderer, render_digest_json
from src.settings import get_settings


logger = structlog.get_logger()


def _load_or_exit(config_path: Path | None) -> PipelineConfig:
    """Load configuration, printing validation errors and exiting on failure."""
    try:
        return load_pipeline_config(config_path)
    except ConfigValidationError as e:
        click.echo(f"Configuration validation failed: {e.file_path}", err=True)
        for error in e.errors:
            formatted = format_validation_error(
                location=error["loc"],
                message=error["msg"],
                error_type=error.get("type", "unknown"),
                include_hint=True,
            )
            click.echo(f"  - {formatted}", err=True)
        sys.exit(1)


def _with_seed(config: PipelineConfig, seed: int | None) -> PipelineConfig:
    if seed is None:
        return config
    data = config.model_dump()
    data["digest"]["seed"] = seed
    return PipelineConfig.model_validate(data)


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """AI news digest pipeline CLI."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a pipeline YAML file (built-in defaults when omitted).",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the digest JSON to this file instead of stdout.",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for placeholder and duration choices.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def run(
    config_path: Path | None,
    output_path: Path | None,
    seed: int | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Fetch, rank and summarize today's AI news.

    The digest is always produced: source failures shrink it and a
    pipeline failure yields the static fallback digest.
    """
    run_id = str(uuid.uuid4())
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        json_format=json_logs,
    )
    bind_run_context(run_id)
    log = logger.bind(component=COMPONENT_CLI, command="run", run_id=run_id)

    config = _with_seed(_load_or_exit(config_path), seed)
    log.info(
        "digest_run_started",
        config_path=str(config_path) if config_path else None,
        output_path=str(output_path) if output_path else None,
        sources=len(config.sources.sources),
    )

    digest = run_digest(config=config, settings=get_settings(), run_id=run_id)

    if output_path is None:
        click.echo(render_digest_json(digest))
    else:
        file_info = JsonRenderer(run_id=run_id).render(digest, output_path)
        click.echo(f"Digest written to {file_info.path} ({file_info.bytes_written} bytes)")

    log.info(
        "digest_run_finished",
        fallback=digest.metadata.fallback,
        summary_source=digest.metadata.summary_source.value,
    )


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a pipeline YAML file.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output as JSON.",
)
def status(config_path: Path | None, json_output: bool) -> None:
    """Show summarization key status and source counts.

    The key itself is never printed, only whether it is set and its length.
    """
    configure_logging(json_format=False, level=logging.WARNING)
    settings = get_settings()
    config = _load_or_exit(config_path)

    key = (settings.claude_api_key or "").strip()
    enabled = config.sources.enabled_for_tier
    report = {
        "summary_key_configured": bool(key),
        "summary_key_length": len(key),
        "summary_model": settings.claude_model or config.summary.model,
        "timezone": settings.digest_timezone or config.digest.timezone,
        "tier1_sources": len(enabled(SourceTier.PRIMARY)),
        "tier2_sources": len(enabled(SourceTier.SECONDARY)),
    }

    if json_output:
        click.echo(json.dumps(report, indent=2))
        return

    click.echo("Digest Status")
    click.echo("=" * 40)
    if key:
        click.echo(f"  Summarization key: configured (length {len(key)})")
    else:
        click.echo("  Summarization key: not configured (fallback summary)")
    click.echo(f"  Summary model: {report['summary_model']}")
    click.echo(f"  Timezone: {report['timezone']}")
    click.echo(f"  Tier 1 sources: {report['tier1_sources']}")
    click.echo(f"  Tier 2 sources: {report['tier2_sources']}")


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a pipeline YAML file.",
)
def sources(config_path: Path | None) -> None:
    """List configured sources."""
    configure_logging(json_format=False, level=logging.WARNING)
    config = _load_or_exit(config_path)

    for source in config.sources.sources:
        state = "enabled" if source.enabled else "disabled"
        strategies = ",".join(s.value for s in source.strategies)
        click.echo(
            f"{source.id:<28} tier={source.tier.value} {source.method.value:<15} "
            f"{state:<8} [{strategies}] {source.url}"
        )


@cli.command()
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a pipeline YAML file.",
)
def validate(config_path: Path) -> None:
    """Validate a configuration file without running the pipeline."""
    configure_logging(json_format=False, level=logging.WARNING)
    config = _load_or_exit(config_path)

    click.echo("Configuration is valid!")
    click.echo(f"  Sources: {len(config.sources.sources)}")
    click.echo(f"  Keywords: {len(config.ranking.keyword_weights)}")
    click.echo(f"  Trusted domains: {len(config.ranking.source_trust)}")
