"""File service CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from fileservice import (
    APIConfig,
    FileServiceClient,
    InvalidArgumentError,
    ProxyConfig,
    SSLConfig,
    TransportError,
    setup_logging
)
from fileservice.core.upload.models import UploadProgress

app = typer.Typer(
    name="fileservice",
    help="Resumable chunked uploads to the metadata file service",
    add_completion=False
)
console = Console()

TOKEN_OPTION = typer.Option(..., "--token", "-t", envvar="FILESERVICE_TOKEN", help="Bearer access token")
URL_OPTION = typer.Option(..., "--url", "-u", envvar="FILESERVICE_URL", help="Service base address")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging")
PROXY_OPTION = typer.Option(None, "--proxy", envvar="FILESERVICE_PROXY", help="HTTP(S) proxy URL")
INSECURE_OPTION = typer.Option(False, "--insecure", help="Skip TLS certificate verification")


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def _configure(verbose: bool):
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
        setup_logging(logging.DEBUG)


def _api_config(proxy: Optional[str], insecure: bool) -> APIConfig:
    try:
        proxy_config = ProxyConfig(url=proxy) if proxy else None
    except InvalidArgumentError as e:
        raise typer.BadParameter(str(e), param_hint="--proxy") from e
    return APIConfig(proxy=proxy_config, ssl=SSLConfig(verify=not insecure))


def _navigated(event):
    console.print(f"[dim]{event.method} {event.uri} -> {event.status_code}[/dim]")


@app.command()
def check(
    resource_id: int = typer.Argument(..., help="Resource id"),
    token: str = TOKEN_OPTION,
    url: str = URL_OPTION,
    proxy: Optional[str] = PROXY_OPTION,
    insecure: bool = INSECURE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Check whether a resource already holds a file."""
    _configure(verbose)
    config = _api_config(proxy, insecure)

    async def do_check():
        async with FileServiceClient(token, url, config=config) as client:
            if verbose:
                client.on('navigated', _navigated)
            return await client.check_file(resource_id)

    try:
        result = run_async(do_check())
    except TransportError as e:
        console.print(f"[red]Connection failed: {e}[/red]")
        raise typer.Exit(1)

    if result.found:
        table = Table(show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Address", result.full_uri)
        table.add_row("File name", result.file_name_on_server or "-")
        table.add_row("Last modified", result.last_modified.isoformat() if result.last_modified else "-")
        table.add_row("Hash", result.hash_for_file_on_server or "-")
        console.print(table)
    elif result.not_found:
        console.print(f"[yellow]No file on server for resource {resource_id}[/yellow]")
    else:
        console.print(f"[red]Server error {result.status_code}: {result.error}[/red]")
        raise typer.Exit(1)


@app.command("create-session")
def create_session(
    resource_id: int = typer.Argument(..., help="Resource id"),
    token: str = TOKEN_OPTION,
    url: str = URL_OPTION,
    proxy: Optional[str] = PROXY_OPTION,
    insecure: bool = INSECURE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Open a new upload session for a resource."""
    _configure(verbose)
    config = _api_config(proxy, insecure)

    async def do_create():
        async with FileServiceClient(token, url, config=config) as client:
            if verbose:
                client.on('navigated', _navigated)
            return await client.create_upload_session(resource_id)

    try:
        result = run_async(do_create())
    except TransportError as e:
        console.print(f"[red]Connection failed: {e}[/red]")
        raise typer.Exit(1)

    if result.created:
        session = result.session
        console.print(f"[green]Session created:[/green] {session.session_id}")
        if session.chunk_size:
            console.print(f"Chunk size: {session.chunk_size:,} bytes")
        if session.expires_at:
            console.print(f"Expires: {session.expires_at.isoformat()}")
    elif result.rejected:
        console.print(f"[red]Rejected ({result.error_code or 'no code'}): {result.error}[/red]")
        raise typer.Exit(1)
    else:
        console.print(f"[red]Server error {result.status_code}: {result.error}[/red]")
        raise typer.Exit(1)


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    resource_id: int = typer.Argument(..., help="Resource id"),
    token: str = TOKEN_OPTION,
    url: str = URL_OPTION,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="File name on the server"),
    part_size: Optional[int] = typer.Option(None, "--part-size", "-s", help="Part size in bytes"),
    force: bool = typer.Option(False, "--force", "-f", help="Upload even if the server has the same file"),
    start_part: int = typer.Option(0, "--start-part", help="Resume from this part index"),
    proxy: Optional[str] = PROXY_OPTION,
    insecure: bool = INSECURE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Upload a file in parts."""
    _configure(verbose)
    config = _api_config(proxy, insecure)

    async def do_upload():
        async with FileServiceClient(token, url, config=config) as client:
            if verbose:
                client.on('navigated', _navigated)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                task = progress.add_task(f"Uploading {file_path.name}", total=None)

                def on_progress(p: UploadProgress):
                    progress.update(task, total=p.total_parts, completed=p.uploaded_parts)

                return await client.upload_file(
                    file_path,
                    resource_id,
                    file_name=name,
                    part_size=part_size,
                    skip_if_unchanged=not force,
                    start_part=start_part,
                    progress_callback=on_progress
                )

    try:
        result = run_async(do_upload())
    except TransportError as e:
        console.print(f"[red]Connection failed: {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if result.skipped:
        console.print("[yellow]Server already has this file, nothing uploaded[/yellow]")
    elif result.is_complete:
        console.print(
            f"[green]Uploaded {result.file_name} ({result.parts_uploaded}/{result.total_parts} parts)[/green]"
        )
    else:
        if result.failed_part is not None:
            console.print(
                f"[red]Part at offset {result.failed_part.offset} failed "
                f"({result.part_result.status_code}). Resume with --start-part {result.parts_uploaded}[/red]"
            )
        elif result.session_result is not None and result.session_result.rejected:
            console.print(f"[red]Session rejected ({result.session_result.error_code or 'no code'})[/red]")
        if result.error:
            console.print(f"[red]{result.error}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
