# img2mc/utils.py
from __future__ import annotations

"""
Shared utilities for img2mc.

Duration / ETA formatting, a single-line progress printer with a smoothed ETA,
worker-count defaults, and tidy console logging.
"""

import math
import os
import sys
import time
from typing import Any, Iterable, List, Optional, Tuple


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_eta(seconds: float | None) -> str:
    """Format an ETA in seconds as 'Hh Mm', 'Mm Ss', 'Ss', or '--:--' for unknown."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "--:--"
    total = int(round(seconds))
    if total >= 3600:
        hours = total // 3600
        minutes = (total % 3600) // 60
        return f"{hours}h {minutes}m"
    if total >= 60:
        minutes = total // 60
        rem = total % 60
        return f"{minutes}m {rem}s"
    return f"{total}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Workers


def default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def split_into_spans(length: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, length) into ~parts contiguous [start, end) spans."""
    parts = max(1, int(parts))
    step = max(1, (length + parts - 1) // parts)
    return [(start, min(start + step, length)) for start in range(0, length, step)]


#  CLI / progress logging


def print_progress_line(message: str, final: bool = False) -> None:
    """Print a single-line progress message that overwrites previous output."""
    sys.stdout.write("\r\033[K" + message)
    sys.stdout.flush()
    if final:
        sys.stdout.write("\n")
        sys.stdout.flush()


class RowProgress:
    """
    Percent + ETA printer driven by completed rows.
    Prints at most once per whole percent. The ETA blends a fast EWMA of row
    time with the overall pace so it neither oscillates nor hits zero early.
    """

    def __init__(self, label: str, total_rows: int, enabled: bool = True):
        self.label = label
        self.total = max(1, int(total_rows))
        self.enabled = enabled
        self.rows = 0
        self.ema: Optional[float] = None
        self.last_pct = -1
        self.t_start = time.perf_counter()
        self.t_last = self.t_start

    def row_done(self) -> None:
        self.rows += 1
        now = time.perf_counter()
        row_dt = max(1e-6, now - self.t_last)
        self.t_last = now
        self.ema = row_dt if self.ema is None else 0.75 * self.ema + 0.25 * row_dt
        remaining = self.total - self.rows
        overall = (now - self.t_start) / self.rows
        eta = remaining * max(self.ema, 0.5 * overall)
        self._show(100.0 * self.rows / self.total, eta, final=False)

    def finish(self) -> None:
        self._show(100.0, 0.0, final=True)

    def _show(self, pct_val: float, eta_seconds: float | None, final: bool) -> None:
        if not self.enabled:
            return
        pct_i = max(0, min(100, int(pct_val)))
        if final or pct_i > self.last_pct:
            print_progress_line(
                f"[{self.label}] {pct_i:3d}% (ETA {format_eta(eta_seconds)})",
                final=final,
            )
            self.last_pct = pct_i


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [dither] Kernel: FloydSteinberg  Chunk res: 4  Grid: 48x32  Workers: 6
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_eta",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    # workers
    "default_workers",
    "split_into_spans",
    # logging / progress
    "print_progress_line",
    "RowProgress",
    "enable_line_buffered_stdout",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
