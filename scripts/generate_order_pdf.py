#!/usr/bin/env python3
"""
Order Form PDF CLI

Renders title order records to PDF and runs the API server.

Commands:
    render - Render a JSON order record to PDF
    serve  - Run the HTTP API

Examples:\n

    generate_order_pdf.py render order.json                   # PDF into the current directory

    generate_order_pdf.py render order.json -o outs/results   # PDF into outs/results

    generate_order_pdf.py serve --port 3000                   # Start the API
"""

import json
import os
import shutil
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from dotenv import load_dotenv
from typing_extensions import Annotated

from titleorder.api.logger import setup_api_logger
from titleorder.contexts.rendering import (
    DocumentGenerationError,
    PipelineConfig,
    discard_artifact,
    generate_pdf,
)
from titleorder.contexts.rendering.logger import setup_rendering_logger
from titleorder.contexts.templating import DocumentRecord
from titleorder.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
PORT = int(os.getenv("PORT", "3000"))


app = typer.Typer(
    help="Render title order forms to PDF and serve the order form API",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    record_file: Annotated[
        Path,
        typer.Argument(help="JSON file holding one order record", exists=True, dir_okay=False),
    ],
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Directory for the finished PDF"),
    ] = Path("."),
    template: Annotated[
        Optional[Path],
        typer.Option("--template", "-t", help="Order form template (default: bundled)"),
    ] = None,
    timeout: Annotated[
        float,
        typer.Option("--timeout", help="Seconds before the compiler is killed", min=1),
    ] = PipelineConfig.timeout,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log full compiler output"),
    ] = False,
):
    """
    Render a JSON order record to PDF.

    Examples:\n

        $ generate_order_pdf.py render order.json

        $ generate_order_pdf.py render order.json -o outs/results --verbose
    """
    log_file = setup_rendering_logger(LOGS_PATH / f"render_{now()}")
    typer.echo(f"Log: {log_file}")

    record = DocumentRecord.from_dict(json.loads(record_file.read_text(encoding="utf-8")))
    config = PipelineConfig(timeout=timeout, verbose=verbose)
    if template is not None:
        config.template_path = template

    try:
        pdf_path = generate_pdf(record, config)
    except DocumentGenerationError as e:
        typer.secho(f"✗ {e} (see {log_file})", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output_dir.mkdir(parents=True, exist_ok=True)
    destination = output_dir / pdf_path.name
    shutil.copyfile(pdf_path, destination)
    discard_artifact(pdf_path)

    typer.secho(f"✓ PDF saved to: {destination}", fg=typer.colors.GREEN)


@app.command("serve")
def serve_command(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "0.0.0.0",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = PORT,
):
    """Run the HTTP API with uvicorn."""
    setup_api_logger(LOGS_PATH / f"api_{now()}", port)
    uvicorn.run("titleorder.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
