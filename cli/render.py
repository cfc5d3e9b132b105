from __future__ import annotations

from typing import Iterable, Optional

import typer

from services.normalizer import NUMBER_WIDTH, DisplayRow

NAME_WIDTH = 16
STATUS_WIDTH = 8
UNIT_WIDTH = 4

THRESHOLD_HEADINGS = ("Low Crit", "Low Warn", "Hi Warn", "Hi Crit", "Hi Fatal")


def _fit(text: str, width: int) -> str:
    """Pad or truncate ``text`` to exactly ``width`` columns."""
    return text[:width].ljust(width)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


class SensorTableRenderer:
    """Prints sensor rows grouped under a banner per category.

    One renderer is used per listing; it remembers the category of the last
    row so a new banner and header are printed whenever it changes.
    """

    def __init__(self, show_fatal: bool = True) -> None:
        self.show_fatal = show_fatal
        self._last_category: Optional[str] = None

    @property
    def _threshold_count(self) -> int:
        return len(THRESHOLD_HEADINGS) if self.show_fatal else len(THRESHOLD_HEADINGS) - 1

    def header(self) -> str:
        columns = [
            _fit("Name", NAME_WIDTH),
            _fit("Status", STATUS_WIDTH),
            "Value".rjust(NUMBER_WIDTH),
            _fit("Unit", UNIT_WIDTH),
        ]
        columns.extend(
            heading.rjust(NUMBER_WIDTH)
            for heading in THRESHOLD_HEADINGS[: self._threshold_count]
        )
        return " ".join(columns).rstrip()

    def format_row(self, row: DisplayRow) -> str:
        columns = [
            _fit(row.name, NAME_WIDTH),
            _fit(row.status.value, STATUS_WIDTH),
            row.value.rjust(NUMBER_WIDTH),
            _fit(row.unit, UNIT_WIDTH),
        ]
        columns.extend(
            threshold.rjust(NUMBER_WIDTH)
            for threshold in row.thresholds[: self._threshold_count]
        )
        return " ".join(columns).rstrip()

    def render(self, row: DisplayRow) -> None:
        if row.category != self._last_category:
            if self._last_category is not None:
                typer.echo()
            echo_heading(row.category or "(uncategorized)")
            typer.echo(self.header())
            typer.echo()
            self._last_category = row.category
        typer.echo(self.format_row(row))

    def render_all(self, rows: Iterable[DisplayRow]) -> int:
        count = 0
        for row in rows:
            self.render(row)
            count += 1
        return count
