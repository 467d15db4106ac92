"""ADLS upload CLI - Main commands."""
import asyncio
import signal
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

app = typer.Typer(
    name="adls-upload",
    help="Chunked uploads to Azure Data Lake Storage",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def build_upload_url(base_url: str, name: str, sas: Optional[str] = None) -> str:
    """Join the directory URL, the file name and the SAS token."""
    url = f"{base_url.rstrip('/')}/{name}"
    if sas:
        url += sas if sas.startswith('?') else f"?{sas}"
    return url


@app.command()
def upload(
    paths: List[Path] = typer.Argument(..., help="Local files to upload"),
    url: str = typer.Option(..., "--url", "-u", help="Container/directory URL"),
    sas: str = typer.Option(None, "--sas", "-s", help="SAS token appended to every file URL"),
    chunk_size: int = typer.Option(None, "--chunk-size", "-c", help="Bytes per chunk (default 100 MiB)"),
    retries: int = typer.Option(None, "--retries", "-r", help="Attempts per chunk (default 5)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Upload files to Azure Data Lake Storage."""
    from adls_uploader import ADLSUploader, LocalFile, InvalidFileError, UploadState, setup_logging

    if verbose:
        import logging
        logging.basicConfig(level=logging.DEBUG)
        setup_logging(logging.DEBUG)

    files = []
    for path in paths:
        try:
            files.append(LocalFile.from_path(path))
        except InvalidFileError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        if sum(1 for f in files if f.name == path.name) > 1:
            console.print(f"[yellow]Skipping duplicate name: {path}[/yellow]")
            files.pop()

    results: Dict[str, str] = {}

    async def do_upload():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            total_task = progress.add_task("Total", total=100)
            tasks = {
                file.name: progress.add_task(f"  {file.name}", total=100, visible=False)
                for file in files
            }

            def on_item_start(item):
                progress.update(tasks[item.file.name], visible=True)

            def on_item_progress(item):
                progress.update(tasks[item.file.name], completed=item.progress)

            def on_item_complete(item):
                if uploader.state is UploadState.CANCELLED:
                    results[item.file.name] = f"[yellow]cancelled at {item.progress:.0f}%[/yellow]"
                    return
                progress.update(tasks[item.file.name], completed=100)
                results[item.file.name] = "[green]uploaded[/green]"

            def on_item_error(item, error):
                results[item.file.name] = f"[red]failed: {error}[/red]"

            def on_progress(percent):
                progress.update(total_task, completed=percent)

            uploader = ADLSUploader(
                get_item_upload_url=lambda item: build_upload_url(url, item.file.name, sas),
                chunk_size=chunk_size,
                chunk_upload_retries=retries,
                on_item_start=on_item_start,
                on_item_progress=on_item_progress,
                on_item_complete=on_item_complete,
                on_item_error=on_item_error,
                on_progress=on_progress,
            )
            uploader.add_files(files)

            loop = asyncio.get_running_loop()
            try:
                loop.add_signal_handler(signal.SIGINT, uploader.cancel)
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform; Ctrl-C aborts the loop instead
                pass
            try:
                await uploader.upload()
            finally:
                try:
                    loop.remove_signal_handler(signal.SIGINT)
                except (NotImplementedError, RuntimeError):
                    pass

    run_async(do_upload())

    table = Table(title="Upload summary")
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Result")
    for file in files:
        table.add_row(file.name, f"{file.size:,}", results.get(file.name, "[yellow]cancelled[/yellow]"))
    console.print(table)

    if len(results) != len(files) or any(r != "[green]uploaded[/green]" for r in results.values()):
        raise typer.Exit(1)


@app.command()
def version():
    """Show the installed version."""
    from adls_uploader import __version__
    console.print(f"adls-uploader {__version__}")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
