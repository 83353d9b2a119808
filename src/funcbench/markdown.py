"""Conversion of the aligned benchmark table into a Markdown pipe table."""

from typing import List


SEPARATOR_ROW = "|-|-|-|-|"

# Header marker found in the aligned table, and the Markdown header replacing it.
HEADERS = [
    ("old ns/op", "| Benchmark | Old ns/op | New ns/op | Delta |"),
    ("old MB/s", "| Benchmark | Old MB/s | New MB/s | Speedup |"),
    ("old allocs", "| Benchmark | Old allocs | New allocs | Delta |"),
    ("old bytes", "| Benchmark | Old bytes | New bytes | Delta |"),
]


def _markdown_header(line: str):
    for marker, header in HEADERS:
        if marker in line:
            return header
    return None


def format_comment_to_md(raw_table: str) -> str:
    """
    Convert a rendered comparison table to Markdown.

    Header lines become a four-column Markdown header followed by a separator
    row; every other non-blank line has its whitespace runs replaced by ``|``.
    Blank lines are kept. A table with no recognised header is still converted
    line by line, which yields rows without a header.
    """
    converted: List[str] = []
    for line in raw_table.split("\n"):
        if line == "":
            converted.append(line)
            continue

        header = _markdown_header(line)
        if header is not None:
            converted.append(header)
            converted.append(SEPARATOR_ROW)
        else:
            converted.append("|".join(line.split()))
    return "\n".join(converted)
