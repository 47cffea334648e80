#
# file-date-filter
#
# Decide which dated files to keep, using chained calendar-bucketed retention rules.
#
# Copyright (c) 2025-2026 Thomas Kuhlmann
#
# Licensed under the MIT License. See LICENSE file in the project root for license information.
#

import argparse
import calendar
import re
import sys
import traceback
from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum, IntEnum
from pathlib import Path
from types import SimpleNamespace
from typing import NoReturn, Optional, TextIO, no_type_check


VERSION: str = "dev-1.0.0"

DATE_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})")

WEEKDAYS: list[str] = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

DEFAULT_RULES: list[str] = [
    "every_month.keep_newest",
    "every_week.keep_newest",
    "within(2 calendar_months).every_day.keep_newest",
    "within(2 calendar_weeks).keep_all",
]


class DateParseError(ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f"Cannot parse file name as date: '{text}'")
        self.text = text


class ConfigurationError(Exception):
    pass


class NoFilesFoundError(Exception):
    pass


class ConfigNamespace(SimpleNamespace):
    pass


class LogLevel(IntEnum):
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3

    @classmethod
    def from_name_or_number(cls, prefix: str) -> "LogLevel":
        try:
            return next(m for m in cls if m.name.startswith(prefix.upper()))
        except StopIteration:
            try:
                return cls(int(prefix))
            except ValueError:
                raise ValueError("Invalid log level: " + prefix)


@dataclass(eq=False)
class FileRecord:
    date: date
    name: str
    keep: bool = False

    def __str__(self) -> str:
        return f"{self.name} {self.keep}"


class Logger:
    _level: LogLevel
    _stream: Optional[TextIO]
    _decisions: dict[FileRecord, list[str]]

    def __init__(self, level: LogLevel = LogLevel.INFO, stream: Optional[TextIO] = None) -> None:
        self._level = level
        self._stream = stream
        self._decisions = defaultdict(list)

    def has_log_level(self, level: LogLevel) -> bool:
        return level <= int(self._level)

    def _raw_verbose(self, level: LogLevel, message: str, prefix: str = "") -> None:
        print(f"[{prefix or LogLevel(level).name}] {message}", file=self._stream or sys.stderr)

    def verbose(self, level: LogLevel, message: str, prefix: str = "") -> None:
        if self.has_log_level(level):
            self._raw_verbose(level, message, prefix)

    def add_decision(self, level: LogLevel, record: FileRecord, message: str) -> None:
        if self.has_log_level(level):
            self._decisions[record].append(message)

    def decisions(self, record: FileRecord) -> list[str]:
        return list(self._decisions.get(record, []))

    def print_decisions(self, records: Iterable[FileRecord]) -> None:
        records = [r for r in records if self._decisions.get(r)]
        if not records:
            return
        longest_name_length = max(len(r.name) for r in records)
        for record in records:
            decisions = self._decisions[record]
            self._raw_verbose(LogLevel.INFO, f"{record.name:<{longest_name_length}}: {decisions[0]}")
            if not self.has_log_level(LogLevel.DEBUG):
                continue
            for idx, decision in enumerate(decisions[1:]):
                self._raw_verbose(LogLevel.DEBUG, f"{' ' * ((longest_name_length + 2) + idx * 4)}└── {decision}")


# Calendar arithmetic


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by whole calendar months, clamping the day of month down to the target month's length."""
    year, month = divmod(day.year * 12 + (day.month - 1) + months, 12)
    if year < date.min.year:
        return date.min
    return date(year, month + 1, min(day.day, calendar.monthrange(year, month + 1)[1]))


def days_before(day: date, days: int) -> date:
    # date.min for anything before 0001-01-01
    return day - timedelta(days=days) if days < day.toordinal() else date.min


def start_of_week(day: date, week_start: int = calendar.MONDAY) -> date:
    return days_before(day, (day.weekday() - week_start) % 7)


class RuleKind(Enum):
    DAYS = "days"
    WEEKS = "weeks"
    CALENDAR_WEEKS = "calendar_weeks"
    MONTHS = "months"
    CALENDAR_MONTHS = "calendar_months"
    YEARS = "years"
    CALENDAR_YEARS = "calendar_years"

    @classmethod
    def from_unit(cls, unit: str) -> "RuleKind":
        normalized = re.sub(r"[\s_-]+", "_", unit.strip().lower())
        for kind in cls:
            if normalized in (kind.value, kind.value[:-1]):  # plural or singular
                return kind
        raise ValueError(f"Unknown date range unit: '{unit}' (use {', '.join(k.value for k in cls)})")


@dataclass(frozen=True)
class DateRange:
    from_date: date
    to_date: date

    def __post_init__(self) -> None:
        if self.from_date > self.to_date:
            raise ValueError(f"Invalid date range: {self.from_date} > {self.to_date}")

    def contains(self, day: date, logger: Optional[Logger] = None) -> bool:
        result = self.from_date <= day <= self.to_date
        if logger is not None:
            logger.verbose(LogLevel.DEBUG, f"contains: {day} bounds=({self.from_date}, {self.to_date}) = {result}")
        return result

    def __str__(self) -> str:
        return f"[{self.from_date}, {self.to_date}]"


@dataclass(frozen=True)
class DateRangeRule:
    kind: RuleKind
    magnitude: int

    def __post_init__(self) -> None:
        if isinstance(self.magnitude, bool) or not isinstance(self.magnitude, int) or self.magnitude < 1:
            raise ValueError(f"Invalid magnitude '{self.magnitude}': must be an integer > 0")

    @classmethod
    def days(cls, count: int) -> "DateRangeRule":
        return cls(RuleKind.DAYS, count)

    @classmethod
    def weeks(cls, count: int) -> "DateRangeRule":
        return cls(RuleKind.WEEKS, count)

    @classmethod
    def calendar_weeks(cls, count: int) -> "DateRangeRule":
        return cls(RuleKind.CALENDAR_WEEKS, count)

    @classmethod
    def months(cls, count: int) -> "DateRangeRule":
        return cls(RuleKind.MONTHS, count)

    @classmethod
    def calendar_months(cls, count: int) -> "DateRangeRule":
        return cls(RuleKind.CALENDAR_MONTHS, count)

    @classmethod
    def years(cls, count: int) -> "DateRangeRule":
        return cls(RuleKind.YEARS, count)

    @classmethod
    def calendar_years(cls, count: int) -> "DateRangeRule":
        return cls(RuleKind.CALENDAR_YEARS, count)

    @classmethod
    def parse(cls, text: str) -> "DateRangeRule":
        """Parse ``"2 calendar_months"``, ``"1 calendar month"`` or ``"3days"``."""
        re_match = re.fullmatch(r"\s*([0-9]+)\s*([A-Za-z][A-Za-z_\- ]*?)\s*", text)
        if not re_match:
            raise ValueError(f"Invalid date range: '{text}' (expected e.g. '2 calendar_months')")
        return cls(RuleKind.from_unit(re_match.group(2)), int(re_match.group(1)))

    def apply(self, base_date: date, week_start: int = calendar.MONDAY, logger: Optional[Logger] = None) -> DateRange:
        count = self.magnitude
        if self.kind is RuleKind.DAYS:
            from_date = days_before(base_date, count - 1)
        elif self.kind is RuleKind.WEEKS:
            from_date = days_before(base_date, 7 * count)
        elif self.kind is RuleKind.CALENDAR_WEEKS:
            from_date = days_before(start_of_week(base_date, week_start), 7 * (count - 1))
        elif self.kind is RuleKind.MONTHS:
            from_date = shift_months(base_date, -count)
        elif self.kind is RuleKind.CALENDAR_MONTHS:
            from_date = shift_months(base_date.replace(day=1), -(count - 1))
        elif self.kind is RuleKind.YEARS:
            from_date = shift_months(base_date, -12 * count)
        elif self.kind is RuleKind.CALENDAR_YEARS:
            from_date = date(max(base_date.year - (count - 1), date.min.year), 1, 1)
        else:
            raise ConfigurationError(f"Unknown date range kind: {self.kind}")
        date_range = DateRange(from_date, base_date)
        if logger is not None:
            logger.verbose(LogLevel.DEBUG, f"Date range {self} from {base_date}: {date_range}")
        return date_range

    def __str__(self) -> str:
        return f"{self.magnitude} {self.kind.value}"


# Bucketing


class GroupKey(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def day_key(day: date) -> int:
    return day.toordinal()


def week_key(day: date, week_start: int = calendar.MONDAY) -> int:
    # ordinal 1 (0001-01-01) is a Monday
    return (day.toordinal() - 1 - week_start) // 7


def month_key(day: date) -> int:
    return day.year * 12 + day.month


def year_key(day: date) -> int:
    return day.year


def group_by(key: GroupKey, records: Iterable[FileRecord], week_start: int = calendar.MONDAY) -> list[list[FileRecord]]:
    if key is GroupKey.DAY:
        key_func = day_key
    elif key is GroupKey.WEEK:
        key_func = lambda day: week_key(day, week_start)  # noqa: E731
    elif key is GroupKey.MONTH:
        key_func = month_key
    elif key is GroupKey.YEAR:
        key_func = year_key
    else:
        raise ConfigurationError(f"Cannot group by key: {key}")
    groups: dict[int, list[FileRecord]] = {}  # insertion order = first-seen key order
    for record in records:
        groups.setdefault(key_func(record.date), []).append(record)
    return list(groups.values())


# Input


def parse_date(text: str) -> date:
    re_match = DATE_PATTERN.search(text)
    if not re_match:
        raise DateParseError(text)
    try:
        return date(int(re_match.group(1)), int(re_match.group(2)), int(re_match.group(3)))
    except ValueError:
        raise DateParseError(text)


def read_names(stream: TextIO) -> list[str]:
    return [line.strip() for line in stream]


@dataclass
class RetentionsResult:
    keep: list[FileRecord] = field(default_factory=list)
    discard: list[FileRecord] = field(default_factory=list)


class FileDateFilter:
    """Retention engine.

    Holds all records sorted by date (stable) and a transient active set of groups. ``rule()`` resets the
    active set to a single group with all records; ``within`` narrows it, ``every_*`` regroups it and
    ``keep_newest``/``keep_all`` commit keep flags. Keep flags are only ever set, never cleared, so the kept
    set after several rules is the union of what every rule kept.
    """

    _files: list[FileRecord]
    _active: list[list[FileRecord]]
    _today: date
    _week_start: int
    _logger: Optional[Logger]
    _rule_count: int

    def __init__(self, files: Iterable[FileRecord], today: Optional[date] = None, week_start: int = calendar.MONDAY, logger: Optional[Logger] = None) -> None:
        if not 0 <= week_start <= 6:
            raise ValueError(f"Invalid week start: {week_start} (must be 0 = monday .. 6 = sunday)")
        self._files = sorted(files, key=lambda f: f.date)
        self._today = today if today is not None else date.today()
        self._week_start = week_start
        self._logger = logger
        self._rule_count = 0
        self._active = [list(self._files)]

    @classmethod
    def from_file_list(cls, names: Iterable[str], today: Optional[date] = None, week_start: int = calendar.MONDAY, logger: Optional[Logger] = None) -> "FileDateFilter":
        records: list[FileRecord] = []
        for name in names:
            day = parse_date(name)
            if logger is not None:
                logger.verbose(LogLevel.DEBUG, f"Parsed date {day} from '{name}'")
            records.append(FileRecord(day, name))
        return cls(records, today, week_start, logger)

    @classmethod
    def from_stream(cls, stream: TextIO, today: Optional[date] = None, week_start: int = calendar.MONDAY, logger: Optional[Logger] = None) -> "FileDateFilter":
        return cls.from_file_list(read_names(stream), today, week_start, logger)

    @property
    def today(self) -> date:
        return self._today

    @property
    def files(self) -> list[FileRecord]:
        return list(self._files)

    @property
    def active_groups(self) -> list[list[FileRecord]]:
        return [list(group) for group in self._active]

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.verbose(level, message)

    def _flatten(self) -> list[FileRecord]:
        return [record for group in self._active for record in group]

    def reset(self) -> "FileDateFilter":
        self._active = [list(self._files)]
        self._rule_count += 1
        self._log(LogLevel.DEBUG, f"Rule {self._rule_count:02d}: active size {len(self._files)}")
        return self

    def rule(self) -> "FileDateFilter":
        return self.reset()

    def within(self, date_range_rule: DateRangeRule) -> "FileDateFilter":
        date_range = date_range_rule.apply(self._today, self._week_start, self._logger)
        self._active = [[record for record in self._flatten() if date_range.contains(record.date, self._logger)]]
        self._log(LogLevel.DEBUG, f"Rule {self._rule_count:02d}: within {date_range_rule} {date_range}, active size {len(self._active[0])}")
        return self

    def _regroup(self, key: GroupKey) -> "FileDateFilter":
        self._active = group_by(key, self._flatten(), self._week_start)
        self._log(LogLevel.DEBUG, f"Rule {self._rule_count:02d}: every {key.value}, {len(self._active)} groups")
        return self

    def every_day(self) -> "FileDateFilter":
        return self._regroup(GroupKey.DAY)

    def every_week(self) -> "FileDateFilter":
        return self._regroup(GroupKey.WEEK)

    def every_month(self) -> "FileDateFilter":
        return self._regroup(GroupKey.MONTH)

    def every_year(self) -> "FileDateFilter":
        return self._regroup(GroupKey.YEAR)

    def _mark(self, record: FileRecord, message: str) -> None:
        record.keep = True
        if self._logger is not None:
            self._logger.add_decision(LogLevel.INFO, record, f"Keeping by rule {self._rule_count:02d}: {message}")

    def keep_newest(self) -> "FileDateFilter":
        for group in self._active:
            if group:  # groups are date sorted, the last record is the newest
                self._mark(group[-1], f"newest of {len(group)}")
                self._log(LogLevel.DEBUG, f"Rule {self._rule_count:02d}: {group[-1].date} keep_newest")
        return self

    def keep_all(self) -> "FileDateFilter":
        active = self._flatten()
        self._log(LogLevel.DEBUG, f"Rule {self._rule_count:02d}: keep_all, active size {len(active)}")
        for record in active:
            self._mark(record, "all")
        return self

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(list(self._files))

    def __len__(self) -> int:
        return len(self._files)

    def partition(self) -> RetentionsResult:
        return RetentionsResult([f for f in self._files if f.keep], [f for f in self._files if not f.keep])

    def kept(self) -> list[FileRecord]:
        return self.partition().keep

    def discarded(self) -> list[FileRecord]:
        return self.partition().discard


# Rule chains

CHAIN_STEPS: list[str] = ["within", "every_day", "every_week", "every_month", "every_year", "keep_newest", "keep_all"]

COMMIT_STEPS: list[str] = ["keep_newest", "keep_all"]


@dataclass(frozen=True)
class RuleChain:
    text: str
    steps: tuple[tuple[str, Optional[DateRangeRule]], ...]

    @classmethod
    def parse(cls, text: str) -> "RuleChain":
        steps: list[tuple[str, Optional[DateRangeRule]]] = []
        for token in (t.strip() for t in text.strip().split(".")):
            re_match = re.fullmatch(r"within\s*\((.*)\)", token)
            if re_match:
                steps.append(("within", DateRangeRule.parse(re_match.group(1))))
            elif token in CHAIN_STEPS and token != "within":
                steps.append((token, None))
            else:
                raise ValueError(f"Invalid rule step '{token}' in rule '{text}' (use {', '.join(CHAIN_STEPS)})")
        if steps[-1][0] not in COMMIT_STEPS:
            raise ValueError(f"Rule '{text}' must end with keep_newest or keep_all")
        return cls(text.strip(), tuple(steps))

    def apply(self, engine: FileDateFilter) -> FileDateFilter:
        engine.rule()
        for name, date_range_rule in self.steps:
            if name == "within":
                if date_range_rule is None:
                    raise ConfigurationError(f"Rule '{self.text}': within step without date range")
                engine.within(date_range_rule)
            elif name in CHAIN_STEPS:
                getattr(engine, name)()
            else:
                raise ConfigurationError(f"Rule '{self.text}': unknown step '{name}'")
        return engine

    def __str__(self) -> str:
        return self.text


# Command line


class ModernHelpFormatter(argparse.HelpFormatter):
    @no_type_check
    def __init__(self, *a, **kw) -> None:  # noqa: ANN002, ANN003
        super().__init__(*a, max_help_position=30, width=160, **kw)

    @no_type_check
    def start_section(self, heading) -> None:  # noqa: ANN001
        super().start_section(heading.capitalize())


class ModernStrictArgumentParser(argparse.ArgumentParser):
    REPEATABLE_FLAGS: set[str] = {"--rule"}

    @no_type_check
    def __init__(self, *a, **kw) -> None:  # noqa: ANN002, ANN003
        super().__init__(*a, **kw)
        self._errors: list[str] = []

    def add_error(self, msg: str) -> None:
        if msg not in self._errors:
            self._errors.append(msg)

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print("\nError(s):", file=sys.stderr)
        for line in message.split("\n"):
            print(f"  • {line}", file=sys.stderr)
        print("\nHint: Try '--help' for more information.", file=sys.stderr)
        sys.exit(2)

    # Argument type helpers
    def verbose_argument(self, value: str) -> LogLevel:
        try:
            return LogLevel.from_name_or_number(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid verbose value '{value}' (use ERROR, WARN, INFO, DEBUG or 0, 1, 2, 3)")

    def date_argument(self, value: str) -> date:
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid date '{value}': expected YYYY-MM-DD")

    def week_start_argument(self, value: str) -> int:
        matches = [idx for idx, name in enumerate(WEEKDAYS) if name.startswith(value.strip().lower())] if value.strip() else []
        if len(matches) != 1:
            raise argparse.ArgumentTypeError(f"Invalid week start '{value}' (use {', '.join(WEEKDAYS)})")
        return matches[0]

    # Internal helper methods
    def _suggest(self, argument: str) -> list[str]:
        opts = [o for a in self._actions for o in a.option_strings if o.startswith("--")]
        cand = [o for o in opts if abs(len(o) - len(argument)) <= 2 and sum(a != b for a, b in zip(o, argument)) <= 2]
        return cand[:1]

    @no_type_check
    def _collect_raw_args(self, args):  # noqa: ANN202, ANN001
        if args is not None:
            return list(args)
        return sys.argv[1:]  # default argparse behavior

    @no_type_check
    def _detect_duplicate_flags(self, raw_args) -> None:  # noqa: ANN001
        # Normalize option strings
        alias = {opt: action.option_strings[0] for action in self._actions for opt in action.option_strings}
        seen = set()

        for tok in raw_args:
            if not tok.startswith("-") or tok == "-":
                continue

            # Extract option (handles -t2014-01-01, --today=2014-01-01)
            opt = tok.split("=", 1)[0]

            # Handle -Vdebug → -V
            if len(opt) > 2 and opt.startswith("-") and not opt.startswith("--"):
                opt = opt[:2]

            key = alias.get(opt, opt)
            if key in self.REPEATABLE_FLAGS:
                continue

            if key in seen:
                self.add_error(f"Duplicate flag: {key}")
            seen.add(key)

    @no_type_check
    def _validate_arguments(self, ns) -> None:  # noqa: ANN001
        # Default verbosity, if none given
        if ns.verbose is None:
            ns.verbose = LogLevel.ERROR

        # normalize 0-byte separator
        if ns.list_only == "\\0":
            ns.list_only = "\0"

        # incompatible options (list-only and verbose > ERROR)
        if ns.list_only and ns.verbose > LogLevel.ERROR:
            self.add_error("--list-only and --verbose (> ERROR) cannot be used together")

        # rule chain parsing
        ns.rule_chains = []
        for text in ns.rule or DEFAULT_RULES:
            try:
                ns.rule_chains.append(RuleChain.parse(text))
            except ValueError as e:
                self.add_error(str(e))

    # Main hook
    @no_type_check
    def parse_known_args(self, args=None, namespace=None) -> tuple[argparse.Namespace, list[str]]:  # noqa: ANN001
        self._errors = []
        raw_args = self._collect_raw_args(args)
        self._detect_duplicate_flags(raw_args)

        ns, unknown = super().parse_known_args(raw_args, namespace or argparse.Namespace())

        if unknown:
            sug = self._suggest(unknown[0])
            if sug:
                self.add_error(f"Unknown option: {unknown[0]} (did you mean {sug[0]}?)")
            else:
                self.add_error(f"Unknown option: {unknown[0]}")

        self._validate_arguments(ns)

        if self._errors:
            msg = "\n".join(f"{e}" for e in self._errors)
            self.error(msg)

        return ns, unknown


def create_parser() -> ModernStrictArgumentParser:
    parser: ModernStrictArgumentParser = ModernStrictArgumentParser(
        prog="file-date-filter",
        description=f"file-date-filter {VERSION}\n\nDecide which dated files to keep using chained calendar retention rules",
        usage=("file-date-filter [options] < file_list\n\nExample:\n  ls backups | file-date-filter -t 2014-01-01 -r every_month.keep_newest -r 'within(2 calendar_weeks).keep_all'"),
        epilog="Names must contain a date (YYYY-MM-DD). Nothing is deleted; kept and discarded names are printed.",
        formatter_class=ModernHelpFormatter,
        add_help=False,
    )

    g_main = parser.add_argument_group("Main arguments")
    g_rules = parser.add_argument_group("Rule arguments")
    g_behavior = parser.add_argument_group("Behavior arguments")
    g_common = parser.add_argument_group("Common arguments")

    g_main.add_argument("--input", "-i", type=str, default=None, metavar="file", help="Read file names from file, one per line (default: stdin)")

    # fmt: off
    g_rules.add_argument("--rule", "-r", action="append", default=None, metavar="expr",
        help="Retention rule chain, repeatable, e.g. 'within(2 calendar_months).every_day.keep_newest' (default: monthly, weekly, daily for 2 calendar months, all for 2 calendar weeks)")
    g_rules.add_argument("--today", "-t", type=parser.date_argument, default=None, metavar="date", help="Base date for date ranges, YYYY-MM-DD (default: current date)")
    g_rules.add_argument("--week-start", type=parser.week_start_argument, default=0, metavar="day", help="First day of a week for weekly buckets and calendar weeks (default: monday)")

    g_behavior.add_argument("--list-only", "-L", nargs="?", const="\n", default=None, metavar="sep",
        help="Output only discarded file names (incompatible with --verbose) (optional separator (sep): e.g. '\\0')")
    g_behavior.add_argument("--verbose", "-V", "-v", type=parser.verbose_argument, default=None, nargs="?", const=LogLevel.INFO, metavar="lev",
        help="Verbosity level: 0 = error, 1 = warn, 2 = info, 3 = debug (default: 'info', if specified without value; 'error' otherwise; use numbers or names)")
    # fmt: on

    g_common.add_argument("--version", "-R", action="version", version=f"%(prog)s {VERSION}")
    g_common.add_argument("--help", "-H", action="help", help="Show this help message and exit")
    g_common.add_argument("--stacktrace", action="store_true", help=argparse.SUPPRESS)

    return parser


def parse_arguments(argv: Optional[list[str]] = None) -> ConfigNamespace:
    parser = create_parser()
    args = parser.parse_args(argv)
    return ConfigNamespace(**vars(args))


def read_filelist(args: ConfigNamespace) -> list[str]:
    if args.input is None:
        names = read_names(sys.stdin)
    else:
        source = Path(args.input)
        if not source.is_file():
            raise FileNotFoundError(f"Input file not found: {source}")
        with source.open(encoding="utf-8") as stream:
            names = read_names(stream)
    if not names:
        raise NoFilesFoundError(f"No file names found in {'stdin' if args.input is None else repr(args.input)}")
    return names


def print_result(result: RetentionsResult, args: ConfigNamespace) -> None:
    if args.list_only:
        for record in result.discard:
            print(record.name, end=args.list_only)  # List mode
        return
    print("# kept:")
    for record in result.keep:
        print(record.name)
    print()
    print("# discarded:")
    for record in result.discard:
        print(record.name)


def handle_exception(exception: Exception, exit_code: int, stacktrace: bool, prefix: str = "") -> None:
    if stacktrace:
        traceback.print_exc()
    print(f"[{prefix or LogLevel.ERROR.name}] {exception}", file=sys.stderr)
    sys.exit(exit_code)


def main(argv: Optional[list[str]] = None) -> None:
    args: Optional[ConfigNamespace] = None

    try:
        args = parse_arguments(argv)

        logger = Logger(args.verbose)
        logger.verbose(LogLevel.DEBUG, f"Parsed arguments: {args}")

        names = read_filelist(args)
        engine = FileDateFilter.from_file_list(names, args.today, args.week_start, logger)
        logger.verbose(LogLevel.INFO, f"Found {len(engine)} files, base date {engine.today}")

        for rule_chain in args.rule_chains:
            logger.verbose(LogLevel.INFO, f"Applying rule: {rule_chain}")
            rule_chain.apply(engine)

        result = engine.partition()
        logger.print_decisions(engine)

        logger.verbose(LogLevel.INFO, f"Total files found:     {len(engine):03d}")
        logger.verbose(LogLevel.INFO, f"Total files kept:      {len(result.keep):03d}")
        logger.verbose(LogLevel.INFO, f"Total files discarded: {len(result.discard):03d}")

        print_result(result, args)

    except OSError as e:
        handle_exception(e, 1, args.stacktrace if args is not None else True)
    except ValueError as e:
        handle_exception(e, 2, args.stacktrace if args is not None else True)
    except NoFilesFoundError as e:
        handle_exception(e, 3, args.stacktrace if args is not None else True)
    except ConfigurationError as e:
        handle_exception(e, 6, args.stacktrace if args is not None else True)
    except Exception as e:
        handle_exception(e, 9, args.stacktrace if args is not None else True, prefix="UNEXPECTED ERROR")


if __name__ == "__main__":
    main()
