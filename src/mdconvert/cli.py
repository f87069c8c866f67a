"""Command-line interface for mdconvert."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

from . import __version__
from .conversion.selector import MarkdownService
from .logging_config import setup_logging
from .models.config import ConversionConfig


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="mdconvert",
        description="Convert HTML to clean Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert a saved page
  mdconvert page.html -o page.md

  # Read from stdin
  curl -s https://example.com | mdconvert

  # Try the native renderer first
  mdconvert page.html --native --native-library ./libs/html-to-markdown.so

  # Check the installation
  mdconvert --doctor
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="HTML file to convert (default: stdin)",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write Markdown to this file (default: stdout)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--doctor",
        action="store_true",
        help="Run diagnostic checks",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML config file (default: read settings from the environment)",
    )

    # Backend settings
    backend_group = parser.add_argument_group("backend settings")
    backend_group.add_argument(
        "--native",
        dest="native",
        action="store_true",
        default=None,
        help="Try the native renderer before the fallback renderer",
    )
    backend_group.add_argument(
        "--no-native",
        dest="native",
        action="store_false",
        help="Only use the fallback renderer",
    )
    backend_group.add_argument(
        "--native-library",
        type=Path,
        default=None,
        help="Path to the native renderer shared library",
    )
    backend_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the native renderer",
    )

    # Output settings
    output_group = parser.add_argument_group("output settings")
    output_group.add_argument(
        "--link-style",
        choices=["inlined", "referenced"],
        default=None,
        help="Link style for the fallback renderer (default: inlined)",
    )
    output_group.add_argument(
        "--heading-style",
        choices=["atx", "setext"],
        default=None,
        help="Heading style for the fallback renderer (default: atx)",
    )

    # Logging
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose logging",
    )
    log_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only log errors",
    )

    return parser


def build_config(args: argparse.Namespace) -> ConversionConfig:
    """Build the conversion config from the config file/environment plus CLI flags."""
    base = ConversionConfig.from_yaml_file(args.config) if args.config else ConversionConfig.from_env()

    overrides: dict = {}
    if args.native is not None:
        overrides["use_native_renderer"] = args.native
    if args.native_library:
        overrides["native_library_path"] = args.native_library
    if args.timeout is not None:
        overrides["native_timeout"] = args.timeout
    if args.link_style:
        overrides["link_style"] = args.link_style
    if args.heading_style:
        overrides["heading_style"] = args.heading_style

    if not overrides:
        return base
    return ConversionConfig(**{**base.model_dump(), **overrides})


def read_input(source: str) -> str:
    """Read HTML from a file path, or stdin for "-"."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8", errors="replace")


def run_conversion(args: argparse.Namespace) -> int:
    """Convert the input described by the parsed arguments."""
    console = Console(stderr=True)

    try:
        config = build_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    if args.verbose:
        setup_logging("DEBUG")
    elif args.quiet:
        setup_logging("ERROR")
    else:
        setup_logging("WARNING")

    try:
        html = read_input(args.input)
    except OSError as e:
        console.print(f"[red]Error reading input:[/red] {e}")
        return 1

    service = MarkdownService(config)
    result = asyncio.run(service.convert(html))

    if not result.ok:
        console.print(f"[red]Conversion failed:[/red] {result.error}")
        return 1

    if result.is_empty and html.strip():
        console.print("[red]Conversion produced no output[/red]")
        return 1

    if args.output:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(result.markdown, encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Error writing output:[/red] {e}")
            return 1
        if not args.quiet:
            console.print(
                f"[green]Wrote[/green] {len(result.markdown)} characters to {args.output} "
                f"({result.backend.value} renderer)"
            )
    else:
        sys.stdout.write(result.markdown)

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.doctor:
        from .doctor import run_doctor

        try:
            config = build_config(args)
        except Exception as e:
            Console(stderr=True).print(f"[red]Configuration error:[/red] {e}")
            return 1
        return run_doctor(config=config)

    return run_conversion(args)


if __name__ == "__main__":
    sys.exit(main())
