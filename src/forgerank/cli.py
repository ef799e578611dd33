"\"\"\"Typer CLI entrypoint for the ranking pipeline.\"\"\""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import uvicorn
import yaml

from .api import create_app
from .container import create_container
from .logging import configure_logging
from .pipeline import AuditLogger
from .schemas.config import load_config

app = typer.Typer(help="Evidence-based candidate ranking CLI.")


def _load_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    try:
        return load_config(loaded).to_settings()
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid config: {exc}", param_name="config") from exc


@app.command()
def run(
    candidates: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidates JSONL path."),
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job configuration JSON path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    tau: Optional[float] = typer.Option(None, min=0.0, max=1.0, help="Capability gate threshold override."),
    as_of: Optional[str] = typer.Option(None, help="Reference date (YYYY-MM or ISO) for recency calculations."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Score a batch of candidates offline."""
    settings = _load_settings(config)

    configure_logging(log_level)

    audit_logger = AuditLogger(audit_log) if audit_log else None
    if tau is None:
        tau = settings.get("core", {}).get("tau")

    try:
        pipeline = create_container(settings=settings).pipeline()
        result = pipeline.run(
            candidates_path=candidates,
            job_path=job,
            output_path=output,
            tau=tau,
            as_of=as_of,
            audit_logger=audit_logger,
        )
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"Processed {len(result.analyses)} candidates "
        f"({result.count('ranked')} ranked, {result.count('review')} review, "
        f"{result.count('filtered')} filtered, {len(result.errors)} errors). "
        f"Results saved to {output}."
    )


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Serve the HTTP API with uvicorn."""
    settings = _load_settings(config)
    configure_logging(log_level)
    uvicorn.run(create_app(settings=settings), host=host, port=port, log_level=log_level.lower())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
