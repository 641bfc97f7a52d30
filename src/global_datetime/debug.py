"""ASCII report for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from global_datetime.instant import GlobalDateTime


def show_instant(gdt: GlobalDateTime, label: str = "") -> str:
    """Print a two-column view of a GlobalDateTime's state.

    Rows: original (in its own zone), normalized, reference zone,
    precision, epoch milliseconds and database string.
    Returns the string and also prints to stdout.
    """
    rows = [
        ("original", str(gdt.get_original())),
        ("normalized", str(gdt.get_normalized())),
        ("reference zone", gdt.reference_zone_id),
        ("precision", str(gdt.reference_precision)),
        ("epoch millis", str(gdt.to_epoch_millis())),
        ("database", gdt.to_database_string()),
    ]

    key_width = max(len(key) for key, _ in rows)
    lines: list[str] = []
    if label:
        lines.append(label)
        lines.append("-" * len(label))
    for key, value in rows:
        lines.append(f"{key:>{key_width}s}  {value}")

    result = "\n".join(lines)
    print(result)
    return result
