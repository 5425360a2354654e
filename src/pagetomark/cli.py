"""Command-line interface for pagetomark."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .core.converter import Converter
from .logging_config import setup_logging
from .models.config import ConverterConfig
from .models.results import LinkStatus, ProcessedLink
from .naming import combine_markdown, combined_filename, unique_markdown_path


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="pagetomark",
        description="Convert web pages and video transcripts to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert an article and a video into ./markdown
  pagetomark https://example.com/post https://youtu.be/dQw4w9WgXcQ

  # Fetch pages through a CORS relay and merge everything into one file
  pagetomark URL1 URL2 --cors-proxy https://cors.example.workers.dev --combined

  # Print Markdown instead of writing files
  pagetomark https://example.com/post --stdout
        """,
    )

    parser.add_argument(
        "urls",
        nargs="*",
        metavar="URL",
        help="Links to convert (web pages, video URLs or bare video IDs)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file (default: PAGETOMARK_* environment variables)",
    )

    # Output
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=Path("markdown"),
        help="Output directory (default: ./markdown)",
    )
    output_group.add_argument(
        "--combined",
        action="store_true",
        help="Write all converted links to a single file",
    )
    output_group.add_argument(
        "--stdout",
        action="store_true",
        help="Print Markdown to stdout instead of writing files",
    )

    # Network settings
    network_group = parser.add_argument_group("network settings")
    network_group.add_argument(
        "--cors-proxy",
        type=str,
        metavar="URL",
        help="Relay used to fetch pages",
    )
    network_group.add_argument(
        "--proxy-mode",
        choices=["raw", "json"],
        default=None,
        help="Relay contract: raw body or {contents} envelope (default: raw)",
    )
    network_group.add_argument(
        "--relay",
        type=str,
        metavar="URL",
        help="Transcript relay service",
    )
    network_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="S",
        help="Per-request timeout in seconds (default: 20)",
    )
    network_group.add_argument(
        "--max-concurrent",
        type=int,
        default=None,
        help="Links converted at once (default: 5)",
    )

    # Transcripts
    transcript_group = parser.add_argument_group("transcripts")
    transcript_group.add_argument(
        "--language",
        type=str,
        metavar="CODE",
        help="Preferred caption language (default: en)",
    )

    # Verbosity
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    verbosity_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    return parser


def build_config(args: argparse.Namespace) -> ConverterConfig:
    """
    Merge the config source (file or environment) with command-line flags.

    Raises:
        ValidationError: if the merged values are invalid
        OSError: if the config file cannot be read
    """
    base = ConverterConfig.from_yaml_file(args.config) if args.config else ConverterConfig.from_env()
    data = base.model_dump()

    if args.cors_proxy:
        data["proxy"]["cors_proxy_url"] = args.cors_proxy
    if args.proxy_mode:
        data["proxy"]["cors_proxy_mode"] = args.proxy_mode
    if args.relay:
        data["proxy"]["transcript_relay_url"] = args.relay

    if args.timeout is not None:
        data["network"]["timeout"] = args.timeout
    if args.max_concurrent is not None:
        data["max_concurrent"] = args.max_concurrent

    if args.language:
        language = args.language.lower()
        languages = [code for code in data["transcript"]["languages"] if code != language]
        data["transcript"]["primary_language"] = language
        data["transcript"]["languages"] = [language, *languages]

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return ConverterConfig.model_validate(data)


def write_results(links: list[ProcessedLink], args: argparse.Namespace, console: Console) -> None:
    """Write completed links according to the output flags."""
    results = [link.result for link in links if link.result is not None]
    if not results:
        return

    if args.stdout:
        sys.stdout.write(combine_markdown(results))
        sys.stdout.write("\n")
        return

    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    if args.combined:
        path = output_dir / combined_filename()
        path.write_text(combine_markdown(results), encoding="utf-8")
        if not args.quiet:
            console.print(f"Saved {len(results)} documents to [bold]{path}[/bold]")
        return

    taken: set[Path] = set()
    for result in results:
        path = unique_markdown_path(output_dir, result, taken)
        path.write_text(result.markdown, encoding="utf-8")
        if not args.quiet:
            console.print(f"  Saved [bold]{path}[/bold]")


def print_status(link: ProcessedLink, console: Console) -> None:
    if link.status is LinkStatus.COMPLETED and link.result is not None:
        console.print(f"[green]Done:[/green] {link.url} - {link.result.title}")
    else:
        console.print(f"[red]Failed:[/red] {link.url} - {link.error}")


def run_converter(args: argparse.Namespace) -> int:
    """Run the converter with given arguments."""
    # Markdown owns stdout in --stdout mode; status goes to stderr
    console = Console(stderr=args.stdout)

    if not args.urls:
        console.print("[red]Error:[/red] Please provide at least one URL to convert")
        return 1

    try:
        config = build_config(args)
    except (ValidationError, OSError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        stream=sys.stderr if args.stdout else None,
    )

    async def run() -> int:
        if not args.quiet:
            console.print(f"[bold blue]pagetomark[/bold blue] v{__version__}")
            console.print(f"Links: {len(args.urls)}")
            console.print()

        try:
            async with Converter(config) as converter:
                if args.quiet:
                    links = await converter.convert_many(args.urls)
                else:
                    with Progress(
                        SpinnerColumn(),
                        TextColumn("[progress.description]{task.description}"),
                        console=console,
                        transient=True,
                    ) as progress:
                        progress.add_task(f"[cyan]Converting {len(args.urls)} links...", total=None)
                        links = await converter.convert_many(args.urls)

            if not args.quiet:
                for link in links:
                    print_status(link, console)

            write_results(links, args, console)

            failed = sum(1 for link in links if link.status is not LinkStatus.COMPLETED)
            if not args.quiet:
                console.print()
                console.print("[bold]Results:[/bold]")
                console.print(f"  Converted: {len(links) - failed}")
                console.print(f"  Failed: {failed}")

            return 0 if failed == 0 else 1

        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            if args.verbose:
                console.print_exception()
            return 1

    return asyncio.run(run())


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_converter(args)


if __name__ == "__main__":
    sys.exit(main())
