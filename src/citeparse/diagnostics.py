"""Source-context rendering of parse errors.

:func:`render_diagnostic` turns a :class:`~citeparse.errors.ParseError` into a
compiler-style report::

    error: Error in RIS format at line 2: Missing value for TI
      --> refs.ris:2:1
       |
     2 | AU  - Smith, John
       | ^^^^^^^^^^^^^^^^^ Missing value for TI

The highlighted region is the error's byte span when it has one, else the
whole reported line, else an empty range at the start of the source.
"""

from citeparse.errors import ParseError
from citeparse.parse.base import SourceLine, byte_len, iter_source_lines

__all__ = ["primary_byte_range", "render_diagnostic"]


def primary_byte_range(error: ParseError, source: str) -> tuple[int, int]:
    """Byte range ``[start, end)`` a diagnostic should highlight.

    Parameters
    ----------
    error : ParseError
        Error to locate.
    source : str
        Text that was parsed.

    Returns
    -------
    tuple[int, int]
        The span if present; else the reported line without its
        terminator; else ``(0, 0)``.
    """
    if error.span is not None:
        return error.span.start, error.span.end
    if error.line is not None:
        for source_line in iter_source_lines(source):
            if source_line.number == error.line:
                return source_line.start, source_line.start + byte_len(source_line.text)
    return 0, 0


def _line_at(lines: list[SourceLine], offset: int) -> SourceLine | None:
    for source_line in lines:
        if source_line.start <= offset < source_line.end:
            return source_line
    return lines[-1] if lines else None


def _char_column(source_line: SourceLine, data: bytes, offset: int) -> int:
    prefix = data[source_line.start : max(offset, source_line.start)]
    return len(prefix.decode("utf-8", errors="ignore")) + 1


def render_diagnostic(error: ParseError, filename: str, source: str) -> str:
    """Render an error with the offending source line underlined.

    Parameters
    ----------
    error : ParseError
        Error raised while parsing ``source``.
    filename : str
        Name shown in the location line.
    source : str
        Text that was parsed.

    Returns
    -------
    str
        Multi-line report ending with a newline.
    """
    start, end = primary_byte_range(error, source)
    lines = list(iter_source_lines(source))
    source_line = _line_at(lines, start)

    report = [f"error: {error.message}"]
    if source_line is None:
        report.append(f"  --> {filename}")
        return "\n".join(report) + "\n"

    data = source.encode("utf-8")
    column = _char_column(source_line, data, start)
    if error.column is not None and error.span is None:
        column = error.column
    report.append(f"  --> {filename}:{source_line.number}:{column}")

    text = source_line.text.expandtabs(1)
    line_end = source_line.start + byte_len(source_line.text)
    width = _char_column(source_line, data, min(end, line_end)) - column
    caret_start = min(column - 1, len(text))

    gutter = " " * len(str(source_line.number))
    report.append(f" {gutter} |")
    report.append(f" {source_line.number} | {text}")
    report.append(f" {gutter} | {' ' * caret_start}{'^' * max(width, 1)} {error.reason}")
    return "\n".join(report) + "\n"
