#!/usr/bin/env python3
"""
cli.py

Command-line interface for turning Python import-time traces into icicle graphs.

  import-icicle run -- -c "import json"      profile a command and open the graph
  import-icicle graph trace.txt -o out.html  render a captured trace
  import-icicle parse trace.txt              dump the parsed records as JSON
  import-icicle tree trace.txt               browse the import tree in the terminal
"""
import json
import logging
import os
import tempfile
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from import_icicle.errors import EmptyTrace, ImportTraceError
from import_icicle.exporters import folded, graph_json, icicle_html, view_tree
from import_icicle.layout import (
    DEFAULT_MIN_LABEL_WIDTH,
    DEFAULT_PRECISION,
    DEFAULT_ROW_HEIGHT,
    DEFAULT_WIDTH,
    LayoutConfig,
    layout_tree,
)
from import_icicle.parser import parse_import_time
from import_icicle.runner import capture_import_trace
from import_icicle.tree import load_tree

logger = logging.getLogger(__name__)

ENV_PREFIX = "IMPORT_ICICLE"


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(message: str):
    click.echo(f"error: {message}", err=True)
    raise SystemExit(1)


def layout_options(func):
    """Canvas options shared by `graph` and `run`."""
    options = [
        click.option("--width", type=float, default=DEFAULT_WIDTH, show_default=True,
                     envvar=f"{ENV_PREFIX}_WIDTH", help="Canvas width in pixels."),
        click.option("--row-height", type=float, default=DEFAULT_ROW_HEIGHT, show_default=True,
                     envvar=f"{ENV_PREFIX}_ROW_HEIGHT", help="Height of one import depth."),
        click.option("--precision", type=click.IntRange(0, 12), default=DEFAULT_PRECISION,
                     show_default=True, envvar=f"{ENV_PREFIX}_PRECISION",
                     help="Decimal places kept in box coordinates."),
        click.option("--min-label-width", type=float, default=DEFAULT_MIN_LABEL_WIDTH,
                     show_default=True, envvar=f"{ENV_PREFIX}_MIN_LABEL_WIDTH",
                     help="Boxes narrower than this are drawn without a label."),
        click.option("--title", default=graph_json.DEFAULT_TITLE, show_default=True,
                     help="Title shown above the graph."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _make_config(width, row_height, precision, min_label_width) -> LayoutConfig:
    try:
        return LayoutConfig(width, row_height, precision, min_label_width)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _load(text: str):
    try:
        return load_tree(text)
    except ImportTraceError as exc:
        _fail(str(exc))


def write_text_output(text: str, output):
    if output is None:
        click.echo(text, nl=not text.endswith("\n"))
        return
    Path(output).write_text(text, encoding="utf-8")
    logger.info("wrote %s", output)


def write_html_or_open(html: str, output, open_: bool):
    """
    Write the page to output, or to a temporary file whose path is printed.
    Optionally open the result in the default browser.
    """
    if output is None:
        fd, path = tempfile.mkstemp(prefix="import-icicle-", suffix=".html")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(html)
        click.echo(path)
    else:
        path = str(output)
        Path(path).write_text(html, encoding="utf-8")
    if open_:
        if click.launch(path) != 0:
            logger.warning("failed to open %s in a browser", path)


@click.group()
@click.version_option(package_name="import-icicle")
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr.")
def main(verbose):
    """
    Visualize Python import times (`python -X importtime`) as icicle graphs.
    """
    _setup_logging(verbose)


@main.command()
@click.argument("input", type=click.File("r"), default="-")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Write JSON here instead of stdout.")
def parse(input, output):
    """Parse a trace and print its records as JSON."""
    try:
        records = parse_import_time(input.read())
    except ImportTraceError as exc:
        _fail(str(exc))
    if not records:
        _fail(str(EmptyTrace("no import time records found")))
    write_text_output(json.dumps(graph_json.records_json(records), indent=2) + "\n", output)


@main.command()
@click.argument("input", type=click.File("r"), default="-")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Output file. HTML defaults to a temporary file, other formats to stdout.")
@click.option("--open", "open_", is_flag=True, help="Open the HTML page in a browser.")
@click.option("--format", "fmt", type=click.Choice(["html", "json", "folded"]), default="html",
              show_default=True, help="Output format.")
@layout_options
def graph(input, output, open_, fmt, width, row_height, precision, min_label_width, title):
    """Render a captured trace as an icicle graph."""
    config = _make_config(width, row_height, precision, min_label_width)
    tree = _load(input.read())
    if fmt == "folded":
        write_text_output(folded.export_folded(tree), output)
        return
    boxes = layout_tree(tree, config)
    if fmt == "json":
        data = graph_json.build_graph(tree, boxes, config, title=title)
        write_text_output(json.dumps(data, indent=2) + "\n", output)
        return
    write_html_or_open(icicle_html.render_html(tree, boxes, config, title=title), output, open_)


@main.command()
@click.argument("input", type=click.File("r"), default="-")
@click.option("--min-us", type=click.IntRange(min=0), default=0,
              help="Hide modules whose cumulative time is below this (μs).")
def tree(input, min_us):
    """Show the import tree in the terminal."""
    import_tree = _load(input.read())
    Console().print(view_tree.build_console_tree(import_tree, min_us=min_us))


@main.command(context_settings={"ignore_unknown_options": True})
@click.option("--python", default="python", show_default=True, envvar=f"{ENV_PREFIX}_PYTHON",
              help="Interpreter used when the command is not a python script.")
@click.option("--open/--no-open", "open_", default=True, show_default=True,
              help="Open the HTML page in a browser.")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the HTML page here instead of a temporary file.")
@layout_options
@click.argument("args", nargs=-1, required=True, type=click.UNPROCESSED)
def run(python, open_, output, width, row_height, precision, min_label_width, title, args):
    """
    Run ARGS under the import profiler and render the result.

    \b
      import-icicle run -- -c "import asyncio"
      import-icicle run -- myscript.py --flag
    """
    config = _make_config(width, row_height, precision, min_label_width)
    try:
        text, returncode = capture_import_trace(python, args)
    except OSError as exc:
        _fail(f"failed to run command: {exc}")
    if returncode != 0:
        click.echo(f"warning: command exited with status {returncode}", err=True)
    tree = _load(text)
    boxes = layout_tree(tree, config)
    write_html_or_open(icicle_html.render_html(tree, boxes, config, title=title), output, open_)


if __name__ == "__main__":
    main()
