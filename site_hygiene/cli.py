"""CLI entrypoint for site-hygiene."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from site_hygiene import __version__
from site_hygiene.audit import run_audit
from site_hygiene.cleanup import run_cleanup
from site_hygiene.config import AppConfig, load_app_config
from site_hygiene.discovery import DiscoveryError, discover_files
from site_hygiene.output import (
    render_audit_human,
    render_audit_json,
    render_cleanup_header,
    render_cleanup_human,
)
from site_hygiene.rules import list_rule_info
from site_hygiene.rules.base import AuditRule, CleanupRule, Severity

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    name="site-hygiene",
    no_args_is_help=True,
    help="Clean legacy WordPress fragments and audit static HTML pages for SEO issues.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Root command callback."""
    _ = version
    _configure_logging(verbose)


@app.command("cleanup")
def cleanup_command(
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Report removals without modifying files.")
    ] = False,
    root: Annotated[Path, typer.Option(help="Site root directory.")] = Path("."),
    table_version: Annotated[
        int | None, typer.Option("--table-version", help="Cleanup rule table version.")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Remove legacy WordPress fragments from HTML files."""
    app_config = _load_config_or_raise(root, config_file)
    rules = _build_cleanup_rules_or_raise(app_config, table_version)
    files = _discover_or_exit(
        root, include=app_config.cleanup.include, exclude=app_config.cleanup.exclude
    )

    typer.echo(render_cleanup_header(rules, dry_run=dry_run, file_count=len(files)))
    stats = run_cleanup(files, root=root, rules=rules, dry_run=dry_run)
    typer.echo(render_cleanup_human(stats))


@app.command("audit")
def audit_command(
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Accepted for symmetry; audits never write.")
    ] = False,
    show_all: Annotated[
        bool, typer.Option("--all", help="Include files with only info findings.")
    ] = False,
    json_output: Annotated[
        bool, typer.Option("--json", help="Print the full statistics as JSON.")
    ] = False,
    severity: Annotated[
        str | None,
        typer.Option(help="Minimum severity: error|warning|info.", show_default="info"),
    ] = None,
    root: Annotated[Path, typer.Option(help="Site root directory.")] = Path("."),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Audit HTML pages against SEO heuristics."""
    _ = dry_run
    app_config = _load_config_or_raise(root, config_file)
    min_severity = _resolve_severity(severity, app_config.audit.min_severity)
    rules = _build_audit_rules_or_raise(app_config, min_severity)
    files = _discover_or_exit(
        root, include=app_config.audit.include, exclude=app_config.audit.exclude
    )

    stats = run_audit(files, root=root, rules=rules, min_severity=min_severity)
    if json_output:
        typer.echo(render_audit_json(stats, root=str(root)))
        return
    typer.echo(f"Found {len(files)} HTML files to scan\n")
    typer.echo(render_audit_human(stats, show_all=show_all))


@app.command("rules")
def rules_command(
    root: Annotated[Path, typer.Option(help="Site root directory.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List cleanup and audit rules."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    app_config = _load_config_or_raise(root, config_file)
    rule_info = list_rule_info(
        cleanup_rules=_build_cleanup_rules_or_raise(app_config, None),
        audit_rules=_build_audit_rules_or_raise(app_config, app_config.audit.min_severity),
    )

    if output_format == "json":
        payload = {
            "rules": [
                {
                    "rule_id": item.rule_id,
                    "name": item.name,
                    "pipeline": item.pipeline,
                    "kind": item.kind,
                    "enabled": item.enabled,
                }
                for item in rule_info
            ],
            "meta": {"config_source": app_config.source},
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available rules:"]
    for item in rule_info:
        status = "enabled" if item.enabled else "disabled"
        lines.append(f"- {item.pipeline}:{item.rule_id} [{status}] ({item.kind}) - {item.name}")
    typer.echo("\n".join(lines))


def main() -> None:
    """Console script entrypoint."""
    logging.basicConfig(format=LOG_FORMAT)
    app()


def _configure_logging(verbose: bool) -> None:
    logging.getLogger("site_hygiene").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_config_or_raise(root: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(root, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_cleanup_rules_or_raise(
    app_config: AppConfig, table_version: int | None
) -> tuple[CleanupRule, ...]:
    try:
        return app_config.cleanup.build_rules(table_version)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="cleanup rules") from exc


def _build_audit_rules_or_raise(
    app_config: AppConfig, min_severity: Severity
) -> tuple[AuditRule, ...]:
    try:
        return app_config.audit.build_rules(min_severity)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="audit rules") from exc


def _resolve_severity(value: str | None, default: Severity) -> Severity:
    if value is None:
        return default
    try:
        return Severity.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--severity") from exc


def _discover_or_exit(root: Path, *, include: list[str], exclude: list[str]) -> list[Path]:
    try:
        return discover_files(root, include=include, exclude=exclude)
    except DiscoveryError as exc:
        typer.echo(f"Fatal error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
