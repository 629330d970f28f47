"""Command-line interface for citeparse.

Provides commands to convert citation files to JSONL and to report the
format of a file.
"""

import importlib.metadata
import sys
import time
from pathlib import Path

import click

from citeparse.errors import CitationFormat, ParseError, UnknownFormatError
from citeparse.parse.csv_config import CsvConfig

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("citeparse")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

FORMAT_CHOICES = [fmt.value for fmt in CitationFormat if fmt is not CitationFormat.UNKNOWN]
TAB_ALIASES = ("tab", "\\t")


def _resolve_delimiter(delimiter: str | None, input_path: Path) -> str | None:
    if delimiter is None:
        return "\t" if input_path.suffix.lower() == ".tsv" else None
    if delimiter.lower() in TAB_ALIASES:
        return "\t"
    return delimiter


def _build_csv_config(
    delimiter: str | None,
    no_header: bool,
    flexible: bool,
) -> CsvConfig | None:
    if delimiter is None and not no_header and not flexible:
        return None

    config = CsvConfig(has_header=not no_header, flexible=flexible)
    if delimiter is not None:
        config.delimiter = delimiter
    return config


@click.group()
@click.version_option(version=__version__, prog_name="citeparse")
def cli() -> None:
    """Parse bibliographic citation files into structured records.

    Use 'citeparse COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output JSONL file path (default: standard output)",
)
@click.option(
    "--format",
    "citation_format",
    type=click.Choice(FORMAT_CHOICES),
    default=None,
    help="Force the input format instead of detecting it",
)
@click.option(
    "--delimiter",
    type=str,
    default=None,
    help="CSV field delimiter; 'tab' or '\\t' for tabs (default: ',' or tab for .tsv)",
)
@click.option("--no-header", is_flag=True, help="CSV input has no header row")
@click.option(
    "--flexible",
    is_flag=True,
    help="Tolerate CSV rows with a column count different from the header",
)
@click.option(
    "--auto-detect",
    is_flag=True,
    help="Sniff the CSV delimiter and header row from the file",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append structured run events to this JSONL file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def parse(
    input_path: str,
    output: str | None,
    citation_format: str | None,
    delimiter: str | None,
    no_header: bool,
    flexible: bool,
    auto_detect: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Parse a citation file to JSONL.

    INPUT_PATH is a RIS, PubMed, CSV or EndNote XML file. The format is
    detected from file content, then from the file extension, unless
    --format is given.

    Examples
    --------
        citeparse parse references.ris -o citations.jsonl
        citeparse parse export.nbib --log events.jsonl
        citeparse parse scopus.csv --flexible -o citations.jsonl
        citeparse parse library.txt --format endnote_xml
    """
    from citeparse.api import iter_jsonl, write_jsonl
    from citeparse.audit import AuditLogger
    from citeparse.diagnostics import render_diagnostic
    from citeparse.parse.ingestion import ingest_file, read_text
    from citeparse.utils import generate_run_id

    input_path_obj = Path(input_path)
    forced = CitationFormat(citation_format) if citation_format else None
    csv_config = _build_csv_config(
        _resolve_delimiter(delimiter, input_path_obj), no_header, flexible
    )

    logger = None
    if log_path is not None:
        logger = AuditLogger(generate_run_id(), Path(log_path), stage="parse")
        logger.run_started(
            command=sys.argv,
            parameters={
                "input": input_path,
                "output": output,
                "format": citation_format,
                "csv": csv_config.to_dict() if csv_config is not None else None,
                "auto_detect": auto_detect,
            },
        )

    start = time.perf_counter()
    try:
        if verbose:
            click.echo(f"Parsing file: {input_path_obj.name}", err=True)

        try:
            citations, result = ingest_file(
                input_path_obj,
                citation_format=forced,
                csv_config=csv_config,
                csv_auto_detect=auto_detect,
            )
        except ParseError as e:
            source, _, _ = read_text(input_path_obj)
            click.secho(
                render_diagnostic(e, input_path_obj.name, source),
                fg="red",
                err=True,
                nl=False,
            )
            if logger is not None:
                logger.parse_failed(input_path_obj.name, e)
                logger.run_finished("failed", time.perf_counter() - start)
            sys.exit(1)
        except (UnknownFormatError, OSError) as e:
            click.secho(f"Error: {e}", fg="red", err=True)
            if logger is not None:
                logger.event(
                    "parse_failed",
                    data={"message": str(e)},
                    level="ERROR",
                    file=input_path_obj.name,
                )
                logger.run_finished("failed", time.perf_counter() - start)
            sys.exit(1)

        if verbose:
            click.echo(
                f"Detected {result.format_detected.display_name} "
                f"({result.encoding_used}), {len(citations)} citations",
                err=True,
            )
        if logger is not None:
            logger.file_parsed(
                result.filename,
                result.format_detected.value,
                result.citations_parsed,
                result.file_digest,
            )

        if output is None:
            for line in iter_jsonl(citations):
                click.echo(line)
        else:
            write_jsonl(citations, output)
            click.secho(
                f"✓ Successfully wrote {len(citations)} citations to {output}", fg="green"
            )

        if logger is not None:
            logger.run_finished("success", time.perf_counter() - start, citations=len(citations))
    finally:
        if logger is not None:
            logger.close()


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
def detect(input_path: str) -> None:
    """Print the citation format of INPUT_PATH detected from its content.

    Examples
    --------
        citeparse detect references.ris
    """
    from citeparse.parse.ingestion import detect_format, read_text

    try:
        text, _, _ = read_text(Path(input_path))
    except OSError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    citation_format = detect_format(text)
    if citation_format is CitationFormat.UNKNOWN:
        click.secho(f"Error: Unable to detect citation format of {input_path}", fg="red", err=True)
        sys.exit(1)

    click.echo(citation_format.display_name)


if __name__ == "__main__":
    cli()
