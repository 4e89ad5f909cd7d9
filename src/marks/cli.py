"""
Command line interface for Marks.

Usage:
  marks "fuzzy words"                          # Search below the current directory
  marks '"exact" `re.ex` -excluded' -p notes   # Literal, regex and excluded terms
  marks reading --tagged book --todo TODO      # Only inside TODO headings tagged :book:
  marks meeting --scheduled-at 2021-08-28      # Only headings scheduled that day
  marks review --prop RATING=10/10 --no-color  # Property drawer filter, plain output

Exit status is 0 when the search ran (with or without results) and 2 on an
invalid query, configuration or option.
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from pydantic import ValidationError

from . import __version__
from .config import ConfigurationError, load_config
from .errors import QueryParseError, TimestampParseError
from .models.config import DiscoveryConfig, LoggingConfig, MarksConfig
from .models.filters import FilterCriteria
from .models.org import OrgDatePlan
from .output import ResultFormatter
from .parsers.query import parse_query
from .parsers.timestamp import timestamp_from_argument
from .tools.runner import SearchRunner


logger = logging.getLogger(__name__)

USAGE_ERROR = 2


def parse_property_argument(value: str) -> Tuple[str, str]:
    """Split a KEY=VALUE option into its key and value."""
    key, separator, prop_value = value.partition('=')
    if not separator or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {value!r}")
    return key.strip(), prop_value.strip()


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="marks",
        description="Fuzzy search Markdown and org-mode documents, heading by heading"
    )
    parser.add_argument("query", help='Query: words are fuzzy, "quoted" must appear, `ticked` is a regex, -word must not appear')
    parser.add_argument("-p", "--path", default=".", help="File or directory to search (default: current directory)")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    discovery = parser.add_argument_group("discovery")
    discovery.add_argument("--no-org", action="store_true", default=None, help="Don't search org documents")
    discovery.add_argument("--no-markdown", action="store_true", default=None, help="Don't search Markdown documents")
    discovery.add_argument("-o", "--org-extension", action="append", dest="org_extensions", metavar="EXT",
                           help="Extension of org documents, repeatable (default: org)")
    discovery.add_argument("-m", "--md-extension", action="append", dest="md_extensions", metavar="EXT",
                           help="Extension of Markdown documents, repeatable (default: md, markdown)")
    discovery.add_argument("--blacklist-folder", action="append", dest="blacklist_folders", metavar="NAME",
                           help="Folder name that is never searched, repeatable")
    discovery.add_argument("--search-filename", action="store_true", default=None,
                           help="Match the query against file names too")

    output = parser.add_argument_group("output")
    output.add_argument("-c", "--count", type=_non_negative_int, help="Print at most COUNT results")
    output.add_argument("--no-color", action="store_true", help="Don't color the output")
    output.add_argument("--no-headers", action="store_true", help="Don't print the heading chain")
    output.add_argument("--no-line-numbers", action="store_true", help="Don't print line numbers")
    output.add_argument("--header-separator", metavar="SEP", help="Separator between headings (default: /)")
    output.add_argument("--null", action="store_true", help="Separate path and line number with a NUL byte")

    filters = parser.add_argument_group("filters")
    filters.add_argument("--tagged", action="append", default=[], metavar="TAG",
                         help="Only under headings carrying TAG, repeatable")
    filters.add_argument("--prop", action="append", default=[], type=parse_property_argument,
                         metavar="KEY=VALUE", help="Only under headings with this property, repeatable")
    filters.add_argument("--todo", action="append", default=[], metavar="STATE",
                         help="Only inside headings in this TODO state, repeatable")
    filters.add_argument("--priority", action="append", default=[], metavar="P",
                         help="Only inside headings with this priority, repeatable")
    filters.add_argument("--priority-lt", metavar="P", help="Only inside headings with a priority lower than P")
    filters.add_argument("--priority-gt", metavar="P", help="Only inside headings with a priority higher than P")
    schedule = filters.add_mutually_exclusive_group()
    schedule.add_argument("--scheduled-at", metavar="TS", help="Only inside headings SCHEDULED at TS")
    schedule.add_argument("--deadline-at", metavar="TS", help="Only inside headings with a DEADLINE at TS")

    parser.add_argument("-j", "--jobs", type=_positive_int, help="Number of files searched in parallel")
    parser.add_argument("--debug", action="store_true", help="Log debug messages to stderr")

    return parser


def build_criteria(args: argparse.Namespace) -> FilterCriteria:
    """
    Build the structural filters from parsed arguments.

    Raises:
        TimestampParseError: If a schedule option is not a valid timestamp
        ValidationError: If a filter value is invalid
    """
    schedule = None
    if args.scheduled_at:
        schedule = timestamp_from_argument(args.scheduled_at, OrgDatePlan.SCHEDULED)
    elif args.deadline_at:
        schedule = timestamp_from_argument(args.deadline_at, OrgDatePlan.DEADLINE)

    return FilterCriteria(
        tagged=args.tagged,
        properties=dict(args.prop),
        todo=[state.upper() for state in args.todo],
        priority=args.priority,
        priority_lt=args.priority_lt,
        priority_gt=args.priority_gt,
        schedule=schedule
    )


def apply_overrides(config: MarksConfig, args: argparse.Namespace) -> MarksConfig:
    """
    Override configuration values with the options given on the command line.

    Raises:
        ValidationError: If an overridden value is invalid
    """
    discovery = config.discovery.model_dump()
    for key in ('no_org', 'no_markdown', 'org_extensions', 'md_extensions'):
        value = getattr(args, key)
        if value is not None:
            discovery[key] = value
    if args.blacklist_folders:
        discovery['blacklist_folders'] = discovery['blacklist_folders'] + args.blacklist_folders

    search_updates = {}
    if args.search_filename:
        search_updates['search_filename'] = True

    output_updates = {}
    if args.no_color or not sys.stdout.isatty():
        output_updates['color'] = False
    if args.no_headers:
        output_updates['show_headers'] = False
    if args.no_line_numbers:
        output_updates['show_line_numbers'] = False
    if args.null:
        output_updates['null_separator'] = True
    if args.header_separator is not None:
        output_updates['header_separator'] = args.header_separator
    if args.count is not None:
        output_updates['count'] = args.count

    limits_updates = {}
    if args.jobs is not None:
        limits_updates['max_concurrent'] = args.jobs

    return config.model_copy(update={
        'discovery': DiscoveryConfig.model_validate(discovery),
        'search': config.search.model_copy(update=search_updates),
        'output': config.output.model_copy(update=output_updates),
        'limits': config.limits.model_copy(update=limits_updates),
    })


def configure_logging(logging_config: LoggingConfig, debug: bool = False) -> None:
    """Configure the root logger to write to stderr."""
    level = logging.DEBUG if debug else getattr(logging, logging_config.level)
    logging.basicConfig(stream=sys.stderr, level=level, format=logging_config.format)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a search from the command line.

    Args:
        argv: Arguments without the program name, defaults to sys.argv[1:]

    Returns:
        Exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config_result = load_config(args.config)
    except ConfigurationError as e:
        print(f"marks: {e.message}", file=sys.stderr)
        return USAGE_ERROR

    configure_logging(config_result.config.logging, args.debug)
    for warning in config_result.warnings:
        logger.warning(warning)

    try:
        query = parse_query(args.query)
    except QueryParseError as e:
        print(f"marks: invalid query: {e.message}", file=sys.stderr)
        return USAGE_ERROR

    try:
        config = apply_overrides(config_result.config, args)
        criteria = build_criteria(args)
    except TimestampParseError as e:
        print(f"marks: invalid timestamp: {e.message}", file=sys.stderr)
        return USAGE_ERROR
    except ValidationError as e:
        print(f"marks: invalid option: {e}", file=sys.stderr)
        return USAGE_ERROR

    logger.debug(f"Query: {query!r}, {criteria}, config: {config}")

    results = SearchRunner(query, criteria, config).run(args.path)

    formatter = ResultFormatter(config.output)
    for line in formatter.format_all(results.results):
        print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
