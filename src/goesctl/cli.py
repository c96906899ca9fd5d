from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from goesctl.utils import setup_logging

load_dotenv()
app = typer.Typer(
    name="goesctl",
    help="Download GOES full disk imagery for a past time range.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
context = {}


class ProgressStyle(str, Enum):
    EMPTY = "empty"
    SIMPLE = "simple"
    RICH = "rich"


def release_reporter() -> None:
    reporter = context.pop("progress", None)
    if reporter is not None:
        reporter.cleanup()


@app.callback()
def main(
    log_level: Annotated[str, typer.Option("--log-level", "-l", help="Set logging level")] = "INFO",
    progress: Annotated[
        ProgressStyle, typer.Option("--progress", "-p", help="How to report progress")
    ] = ProgressStyle.EMPTY,
):
    from goesctl.progress import create_reporter, registry

    setup_logging(log_level=log_level, reporter_cls=registry.get(progress.value))
    context["progress"] = create_reporter(reporter_name=progress.value)


@app.command()
def download(
    start: Annotated[
        str | None,
        typer.Option("--start", help="Start time in ISO 8601 format (e.g., 2024-11-30T12:00:00Z)"),
    ] = None,
    ago: Annotated[
        str | None,
        typer.Option("--ago", help="Start as an offset from now, like '2d12h20m'"),
    ] = None,
    duration: Annotated[
        str | None,
        typer.Option("--duration", "-d", help="Length of the range, like '2d12h20m' (defaults to now - start)"),
    ] = None,
    stride: Annotated[
        int | None, typer.Option("--stride", "-s", help="Minutes between images, a multiple of 10 [default: 10]")
    ] = None,
    root: Annotated[Path, typer.Option("--root", "-r", help="Directory where the image folder is created")] = Path("."),
    max_workers: Annotated[
        int | None, typer.Option("--max-workers", "-m", min=1, help="Maximum parallel downloads [default: 8]")
    ] = None,
    satellite: Annotated[
        str | None, typer.Option("--satellite", help="GOES-East (GOES16) or GOES-West (GOES18)")
    ] = None,
    size: Annotated[str | None, typer.Option("--size", help="Image size, e.g. 1808x1808")] = None,
):
    """Fetch every image between the start and the end of the range, one every `stride` minutes."""
    from pydantic import ValidationError

    from goesctl.config import get_settings
    from goesctl.downloaders import create_downloader
    from goesctl.errors import GoesCtlError
    from goesctl.pipeline import PipelineConfig, run_pipeline
    from goesctl.sources import create_imagery

    defaults = get_settings().pipeline
    try:
        config = PipelineConfig(
            start=start,
            ago=ago,
            duration=duration,
            stride_minutes=stride if stride is not None else defaults.get("stride_minutes", 10),
            root=root,
            max_concurrency=max_workers if max_workers is not None else defaults.get("max_concurrency", 8),
        )
        try:
            imagery = create_imagery(satellite=satellite, size=size)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--satellite/--size")
        downloader = create_downloader(max_concurrency=config.max_concurrency)
        report = run_pipeline(config, imagery=imagery, downloader=downloader)
    except GoesCtlError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as e:
        # stride and concurrency can come from config.yml or GOESCTL_* variables
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        release_reporter()

    typer.echo(f"Saved images into: {report.directory}")
    for outcome in report.outcomes:
        if outcome.success:
            typer.echo(f"Saved image to {outcome.path}")
        else:
            typer.echo(f"Error fetching image at {outcome.timestamp.isoformat()}: {outcome.reason}", err=True)


if __name__ == "__main__":
    app()
