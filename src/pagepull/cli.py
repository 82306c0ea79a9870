"""Command-line interface for pagepull."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .concurrency.manager import ConcurrencyManager
from .conversion.extractor import ContentExtractor
from .core.batch import BatchFetcher
from .errors import PagepullError, ValidationError
from .http.client import RenderApiClient
from .logging_config import setup_logging
from .models.config import PagepullConfig
from .models.events import BatchEvent, BatchEventType
from .models.page import BatchReport, ExtractMode, WaitStrategy
from .security.url_validator import UrlValidator
from .tools import format_page, format_report, format_usage

WAIT_CHOICES = [strategy.value for strategy in WaitStrategy]


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="pagepull",
        description="Scrape web pages through a rendering API and print their main content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scrape one page as Markdown
  pagepull scrape https://example.com/article

  # Scrape several pages in parallel (up to 10)
  pagepull scrape https://a.example.com https://b.example.com

  # Plain text, waiting only for the load event
  pagepull scrape https://example.com --text --wait-for load

  # Check remaining credits
  pagepull usage

The API key is read from PAGEPULL_API_KEY unless a config file sets one.
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML config file",
    )
    common.add_argument(
        "--api-url",
        default=None,
        help="Render service base URL (overrides config and PAGEPULL_API_URL)",
    )
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log errors, no progress")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape = subparsers.add_parser("scrape", parents=[common], help="Scrape one or more URLs")
    scrape.add_argument("urls", nargs="+", metavar="URL", help="URLs to scrape")
    scrape.add_argument(
        "--wait-for",
        "-w",
        choices=WAIT_CHOICES,
        default=None,
        help="Page load condition to wait for (default: networkidle)",
    )
    scrape.add_argument(
        "--text",
        action="store_true",
        help="Output plain text instead of Markdown",
    )
    scrape.add_argument(
        "--json",
        action="store_true",
        help="Output the batch report as JSON",
    )
    scrape.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the result to a file instead of stdout",
    )

    subparsers.add_parser("usage", parents=[common], help="Show plan and remaining credits")

    return parser


def load_config(args: argparse.Namespace) -> PagepullConfig:
    """Build the config from an optional file plus command-line overrides."""
    config = PagepullConfig.from_yaml_file(args.config) if args.config else PagepullConfig()

    if args.api_url:
        config.api = config.api.model_copy(update={"base_url": args.api_url.rstrip("/")})

    if args.verbose:
        config.log_level = "DEBUG"
    elif args.quiet:
        config.log_level = "ERROR"

    return config


def render_report(report: BatchReport, as_json: bool) -> str:
    """Turn a report into the text written to the output."""
    if as_json:
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
    if report.total == 1:
        result = report.results[0]
        return format_page(result) if result.success else f"Error: {result.error}"
    return format_report(report)


def write_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        sys.stdout.write(text + "\n")
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")


def run_scrape(args: argparse.Namespace, config: PagepullConfig, console: Console) -> int:
    """Run the scrape command."""
    validator = UrlValidator()
    for url in args.urls:
        result = validator.validate(url)
        if not result.is_valid:
            console.print(f"[red]Error:[/red] {escape(str(result.rejection_reason))}")
            return 1

    wait_for = WaitStrategy(args.wait_for) if args.wait_for else config.batch.default_wait_for
    mode = ExtractMode.TEXT if args.text else ExtractMode.MARKDOWN
    extractor = ContentExtractor.from_config(config.extraction)
    workers = config.extraction.cpu_workers

    async def run() -> BatchReport:
        async with RenderApiClient.from_config(config.api) as client:
            concurrency = ConcurrencyManager(max_workers=workers) if workers else None
            try:
                if args.quiet:
                    fetcher = BatchFetcher(client, extractor, config.batch.max_urls, concurrency=concurrency)
                    return await fetcher.fetch_all(args.urls, wait_for, mode)

                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    console=console,
                    transient=True,
                ) as progress:
                    task = progress.add_task("Starting...", total=None)
                    done = 0

                    def on_event(event: BatchEvent) -> None:
                        nonlocal done
                        if event.type == BatchEventType.BATCH_STARTED:
                            progress.update(task, description=f"[cyan]{event.message}")
                        elif event.type in (BatchEventType.PAGE_COMPLETED, BatchEventType.PAGE_FAILED):
                            done += 1
                            progress.update(
                                task,
                                description=f"[cyan]Scraped {done}/{event.total}: {escape(str(event.url))}",
                            )
                            if event.is_error:
                                console.print(f"[red]Failed:[/red] {escape(f'{event.url} - {event.error}')}")
                        elif event.type == BatchEventType.BATCH_COMPLETED:
                            progress.update(task, description=f"[green]{event.message}")

                    fetcher = BatchFetcher(
                        client,
                        extractor,
                        config.batch.max_urls,
                        on_event=on_event,
                        concurrency=concurrency,
                    )
                    return await fetcher.fetch_all(args.urls, wait_for, mode)
            finally:
                if concurrency is not None:
                    concurrency.shutdown()

    try:
        report = asyncio.run(run())
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    write_output(render_report(report, args.json), args.output)

    if not args.quiet:
        console.print(f"[bold]Results:[/bold] {report.success_count}/{report.total} successful")
        if args.output:
            console.print(f"Written to {escape(str(args.output))}")

    return 0 if report.all_succeeded else 1


def run_usage(args: argparse.Namespace, config: PagepullConfig, console: Console) -> int:
    """Run the usage command."""

    async def run() -> str:
        async with RenderApiClient.from_config(config.api) as client:
            usage = await client.get_usage()
        return format_usage(usage)

    try:
        text = asyncio.run(run())
    except PagepullError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    write_output(text, None)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Progress and diagnostics go to stderr; stdout carries only the result
    console = Console(stderr=True)

    try:
        config = load_config(args)
    except PagepullError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
        force=True,
    )

    if args.command == "usage":
        return run_usage(args, config, console)
    return run_scrape(args, config, console)


if __name__ == "__main__":
    sys.exit(main())
