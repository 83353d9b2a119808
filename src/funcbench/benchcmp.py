"""
Parsing, pairing and rendering of ``go test -bench`` results.

The rendered table is the aligned plain-text format of Go's ``benchcmp``
tool: one section per measured metric, each introduced by a header line
(``benchmark  old ns/op  new ns/op  delta`` and so on) and separated by a
blank line.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, TextIO, Tuple


# Metric bits recorded in Benchmark.measured
NS_PER_OP = 1 << 0
MB_PER_S = 1 << 1
ALLOCED_BYTES_PER_OP = 1 << 2
ALLOCS_PER_OP = 1 << 3

_UNITS = {
    "ns/op": NS_PER_OP,
    "MB/s": MB_PER_S,
    "B/op": ALLOCED_BYTES_PER_OP,
    "allocs/op": ALLOCS_PER_OP,
}

# Column layout of the aligned table.
_MIN_WIDTH = 0
_TAB_WIDTH = 5
_PADDING = 5


@dataclass
class Benchmark:
    """A single ``go test -bench`` result line."""
    name: str
    n: int
    ns_per_op: float = 0.0
    mb_per_s: float = 0.0
    alloced_bytes_per_op: int = 0
    allocs_per_op: int = 0
    measured: int = 0
    ordinal: int = 0


BenchmarkSet = Dict[str, List[Benchmark]]


def parse_line(line: str) -> Optional[Benchmark]:
    """Parse one output line; returns None for anything that is not a result."""
    fields = line.split()
    # Name, iterations and at least one value/unit pair.
    if len(fields) < 4 or not fields[0].startswith("Benchmark"):
        return None
    try:
        n = int(fields[1])
    except ValueError:
        return None

    b = Benchmark(name=fields[0], n=n)
    for value, unit in zip(fields[2::2], fields[3::2]):
        flag = _UNITS.get(unit)
        if flag is None:
            continue
        try:
            if flag == NS_PER_OP:
                b.ns_per_op = float(value)
            elif flag == MB_PER_S:
                b.mb_per_s = float(value)
            elif flag == ALLOCED_BYTES_PER_OP:
                b.alloced_bytes_per_op = int(value)
            else:
                b.allocs_per_op = int(value)
        except ValueError:
            continue
        b.measured |= flag
    return b


def parse_benchmarks(text: str) -> BenchmarkSet:
    """Parse full ``go test -bench`` output into benchmarks keyed by name."""
    bench_set: BenchmarkSet = {}
    for line in text.splitlines():
        b = parse_line(line)
        if b is None:
            continue
        runs = bench_set.setdefault(b.name, [])
        b.ordinal = len(runs)
        runs.append(b)
    return bench_set


@dataclass
class Delta:
    """Before and after values of one metric."""
    before: float
    after: float

    def ratio(self) -> float:
        """after/before; 1 when both are zero and +Inf when only before is."""
        if self.before != 0:
            return self.after / self.before
        if self.after == 0:
            return 1.0
        return math.inf

    def percent(self) -> str:
        """Percent change, ranging from -100% up."""
        return f"{100 * self.ratio() - 100:+.2f}%"

    def multiple(self) -> str:
        """Change as a multiple of the old value."""
        return f"{self.ratio():.2f}x"


@dataclass
class BenchCmp:
    """A pair of benchmark results with the same name and ordinal."""
    before: Benchmark
    after: Benchmark

    @property
    def name(self) -> str:
        return self.before.name

    def measured(self, flag: int) -> bool:
        return bool(self.before.measured & self.after.measured & flag)

    def delta_ns_per_op(self) -> Delta:
        return Delta(self.before.ns_per_op, self.after.ns_per_op)

    def delta_mb_per_s(self) -> Delta:
        return Delta(self.before.mb_per_s, self.after.mb_per_s)

    def delta_alloced_bytes_per_op(self) -> Delta:
        return Delta(self.before.alloced_bytes_per_op, self.after.alloced_bytes_per_op)

    def delta_allocs_per_op(self) -> Delta:
        return Delta(self.before.allocs_per_op, self.after.allocs_per_op)


def correlate(before: BenchmarkSet, after: BenchmarkSet) -> List[BenchCmp]:
    """Pair benchmarks by name and ordinal, in the order they were parsed."""
    cmps = []
    for name, before_runs in before.items():
        after_runs = after.get(name, [])
        for b, a in zip(before_runs, after_runs):
            cmps.append(BenchCmp(before=b, after=a))
    return cmps


def format_ns(ns: float) -> str:
    """Format ns/op with the precision Go's testing package prints."""
    if ns < 10:
        prec = 2
    elif ns < 100:
        prec = 1
    else:
        prec = 0
    return f"{ns:.{prec}f}"


def _align(rows: Iterable[Tuple[str, ...]]) -> List[str]:
    """Left-align cells into columns, padding each column to a tab stop."""
    rows = list(rows)
    ncols = max(len(r) for r in rows)
    widths = []
    for col in range(ncols - 1):
        width = max(len(r[col]) for r in rows if col < len(r)) + _PADDING
        width = max(width, _MIN_WIDTH)
        # Round up to the next tab stop.
        if width % _TAB_WIDTH:
            width += _TAB_WIDTH - width % _TAB_WIDTH
        widths.append(width)

    lines = []
    for r in rows:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(r[:-1])]
        cells.append(r[-1])
        lines.append("".join(cells))
    return lines


def render(out: TextIO, cmps: List[BenchCmp], magnitude: bool = False) -> None:
    """
    Write the aligned comparison table for ``cmps`` to ``out``.

    Sections are emitted in the order ns/op, MB/s, allocs, bytes, and only
    when at least one comparison measured that metric. With ``magnitude``
    the ns/op section reports multiples instead of percentages.
    """
    sections = []

    def section(header, flag, row):
        rows = [header] + [row(c) for c in cmps if c.measured(flag)]
        if len(rows) > 1:
            sections.append(_align(rows))

    def ns_row(c):
        d = c.delta_ns_per_op()
        change = d.multiple() if magnitude else d.percent()
        return (c.name, format_ns(d.before), format_ns(d.after), change)

    def mb_row(c):
        d = c.delta_mb_per_s()
        return (c.name, f"{d.before:.2f}", f"{d.after:.2f}", d.multiple())

    def allocs_row(c):
        d = c.delta_allocs_per_op()
        return (c.name, f"{d.before:.0f}", f"{d.after:.0f}", d.percent())

    def bytes_row(c):
        d = c.delta_alloced_bytes_per_op()
        return (c.name, f"{d.before:.0f}", f"{d.after:.0f}", d.percent())

    section(("benchmark", "old ns/op", "new ns/op", "delta"), NS_PER_OP, ns_row)
    section(("benchmark", "old MB/s", "new MB/s", "speedup"), MB_PER_S, mb_row)
    section(("benchmark", "old allocs", "new allocs", "delta"), ALLOCS_PER_OP, allocs_row)
    section(("benchmark", "old bytes", "new bytes", "delta"), ALLOCED_BYTES_PER_OP, bytes_row)

    out.write("\n\n".join("\n".join(lines) for lines in sections))
    if sections:
        out.write("\n")
