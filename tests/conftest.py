from datetime import date
from typing import Optional

from file_date_filter import FileDateFilter, Logger


def make_filter(days: list[str], today: date = date(2014, 1, 1), logger: Optional[Logger] = None, week_start: int = 0) -> FileDateFilter:
    """Build an engine from names like 'backup-2014-01-01.tar' for the given ISO dates."""
    return FileDateFilter.from_file_list([f"backup-{d}.tar" for d in days], today=today, week_start=week_start, logger=logger)


def names(records) -> list[str]:  # noqa: ANN001
    return [r.name for r in records]
