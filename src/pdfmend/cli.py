# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for pdfmend.

This module provides the command-line interface for normalizing damaged
Japanese font names and stamping text onto PDF pages.
"""

# Standard Library
import logging
import sys
from pathlib import Path

# Third Party
import click
from colorama import Fore, Style, init

# Local
from . import __version__
from .exceptions import FontLoadError, ProcessingError, UnsupportedPDFError
from .placement import Anchor
from .processor import (
    ProcessResult,
    TextStamp,
    check_file,
    generate_output_path,
    process_directory,
    process_file,
)
from .utils import setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_PROCESSING_FAILED = 3
EXIT_NOT_NORMALIZABLE = 4
EXIT_PERMISSION_ERROR = 5

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}\u2713{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}\u2717 Error:{Style.RESET_ALL} {msg}", err=True)


def print_warning(msg: str) -> None:
    """Prints a warning in yellow.

    Args:
        msg: The warning to output.
    """
    click.echo(f"{Fore.YELLOW}\u26a0{Style.RESET_ALL} {msg}")


def _print_result(result: ProcessResult, quiet: bool) -> None:
    """Prints the processing result in a formatted way.

    Args:
        result: The processing result.
        quiet: If True, only output errors.
    """
    if result.success:
        if not quiet:
            details = []
            if result.fonts_normalized:
                details.append("font names normalized")
            if result.pages_stamped:
                details.append(f"{result.pages_stamped} page(s) stamped")
            suffix = f" ({', '.join(details)})" if details else ""
            print_success(
                f"Processed: {result.input_path.name} -> "
                f"{result.output_path.name}{suffix}"
            )
            for warning in result.warnings:
                print_warning(warning)
    else:
        print_error(f"{result.input_path.name}: {result.error}")


def _parse_anchor(ctx: click.Context, param: click.Parameter, value: str) -> Anchor:
    """Click callback converting ``--position`` into an Anchor."""
    try:
        return Anchor.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.command()
@click.argument("input_path", required=False, type=click.Path(exists=True))
@click.argument("output", required=False, type=click.Path())
@click.option(
    "--check",
    is_flag=True,
    help="Only report whether font names can be normalized (exit code 4 if not)",
)
@click.option(
    "--normalize/--no-normalize",
    default=True,
    help="Normalize damaged Japanese font names (default: enabled)",
)
@click.option("-t", "--text", help="Text to draw on the pages")
@click.option(
    "--font-file",
    type=click.Path(exists=True, dir_okay=False),
    help="TrueType font used for --text",
)
@click.option(
    "--font-resource",
    help="Existing page font resource used for --text (e.g. F1)",
)
@click.option(
    "--font-size",
    type=float,
    default=10.0,
    show_default=True,
    help="Font size for --text",
)
@click.option(
    "-p",
    "--position",
    "anchor",
    default="top,right",
    show_default=True,
    callback=_parse_anchor,
    help="Text anchor: top/middle/bottom and left/center/right, comma separated",
)
@click.option("--offset-x", type=float, default=0.0, help="Horizontal offset")
@click.option("--offset-y", type=float, default=0.0, help="Vertical offset")
@click.option("--pages", help="Pages to stamp, e.g. 1,3-5 (default: all)")
@click.option(
    "--isolate/--no-isolate",
    default=True,
    help="Wrap existing page content in q/Q before drawing (default: enabled)",
)
@click.option(
    "-r",
    "--recursive",
    is_flag=True,
    help="Process directories recursively",
)
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Overwrite existing files",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only output errors",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Detailed output",
)
@click.version_option(version=__version__)
def main(
    input_path: str | None,
    output: str | None,
    check: bool,
    normalize: bool,
    text: str | None,
    font_file: str | None,
    font_resource: str | None,
    font_size: float,
    anchor: Anchor,
    offset_x: float,
    offset_y: float,
    pages: str | None,
    isolate: bool,
    recursive: bool,
    force: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Repairs damaged Japanese font names and stamps text on PDF pages.

    INPUT is the path to the input PDF or a directory.
    OUTPUT is optionally the path for the output PDF or directory.
    """
    # Initialize colorama for Windows compatibility
    init()

    if input_path is None:
        click.echo(click.get_current_context().get_help())
        sys.exit(EXIT_GENERAL_ERROR)

    setup_logging(verbose=verbose, quiet=quiet)

    input_path_obj = Path(input_path)

    stamp = None
    if text is not None:
        if font_file is None and font_resource is None:
            print_error("--text requires --font-file or --font-resource")
            sys.exit(EXIT_GENERAL_ERROR)
        stamp = TextStamp(
            text=text,
            font_file=Path(font_file) if font_file else None,
            font_resource=font_resource,
            font_size=font_size,
            anchor=anchor,
            offset_x=offset_x,
            offset_y=offset_y,
            isolate_graphics_state=isolate,
            pages=pages,
        )

    try:
        if check:
            exit_code = _check(input_path_obj, quiet)
        elif input_path_obj.is_file():
            exit_code = _process_single_file(
                input_path_obj, output, normalize, stamp, force, quiet
            )
        elif input_path_obj.is_dir():
            exit_code = _process_directory(
                input_path_obj, output, normalize, stamp, force, recursive, quiet
            )
        else:
            print_error(f"Invalid path: {input_path}")
            exit_code = EXIT_FILE_NOT_FOUND

    except FileNotFoundError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except PermissionError as e:
        print_error(f"Access denied: {e}")
        exit_code = EXIT_PERMISSION_ERROR
    except (ProcessingError, UnsupportedPDFError, FontLoadError) as e:
        print_error(str(e))
        exit_code = EXIT_PROCESSING_FAILED
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)


def _check(input_path: Path, quiet: bool) -> int:
    """Reports whether a file has font names that can be normalized.

    Args:
        input_path: Path to the input PDF.
        quiet: Whether to only output errors.

    Returns:
        Exit code.
    """
    if not input_path.is_file():
        print_error(f"--check expects a PDF file: {input_path}")
        return EXIT_GENERAL_ERROR

    if check_file(input_path):
        if not quiet:
            print_success(f"{input_path.name}: font names can be normalized")
        return EXIT_SUCCESS

    if not quiet:
        print_warning(f"{input_path.name}: no damaged font names found")
    return EXIT_NOT_NORMALIZABLE


def _process_single_file(
    input_path: Path,
    output: str | None,
    normalize: bool,
    stamp: TextStamp | None,
    force: bool,
    quiet: bool,
) -> int:
    """Processes a single PDF file.

    Args:
        input_path: Path to the input PDF.
        output: Optional output path.
        normalize: Whether to normalize font names.
        stamp: Optional text stamp.
        force: Whether to overwrite existing files.
        quiet: Whether to only output errors.

    Returns:
        Exit code.
    """
    output_path = Path(output) if output else generate_output_path(input_path)

    if output_path.exists() and not force:
        print_error(
            f"Output file already exists: {output_path}. Use --force to overwrite."
        )
        return EXIT_GENERAL_ERROR

    if not quiet:
        click.echo(f"Processing {input_path.name}...")

    result = process_file(input_path, output_path, normalize=normalize, stamp=stamp)
    _print_result(result, quiet)

    return EXIT_SUCCESS if result.success else EXIT_PROCESSING_FAILED


def _process_directory(
    input_dir: Path,
    output: str | None,
    normalize: bool,
    stamp: TextStamp | None,
    force: bool,
    recursive: bool,
    quiet: bool,
) -> int:
    """Processes all PDFs in a directory.

    Args:
        input_dir: Input directory.
        output: Optional output directory.
        normalize: Whether to normalize font names.
        stamp: Optional text stamp.
        force: Whether to overwrite existing output files.
        recursive: Whether to process recursively.
        quiet: Whether to only output errors.

    Returns:
        Exit code.
    """
    output_dir = Path(output) if output else None

    if not quiet:
        mode = "recursive" if recursive else "non-recursive"
        click.echo(f"Processing directory {input_dir} ({mode})...")

    results = process_directory(
        input_dir,
        output_dir,
        recursive=recursive,
        normalize=normalize,
        stamp=stamp,
        show_progress=not quiet,
        force_overwrite=force,
    )

    successful = [r for r in results if r.success]
    failed = [r for r in results if not r.success]

    if not quiet:
        click.echo()
        click.echo("Summary:")
        print_success(f"{len(successful)} file(s) successfully processed")
        if failed:
            print_error(f"{len(failed)} file(s) failed")
            for result in failed:
                click.echo(f"  - {result.input_path.name}: {result.error}", err=True)

    if failed:
        return EXIT_PROCESSING_FAILED
    return EXIT_SUCCESS


if __name__ == "__main__":
    main()
