"""
moodlog.__main__ -- CLI entry point.

Usage:
    moodlog init [--data-dir DIR]
    moodlog add VALUE [--note TEXT] [--at ISO]
    moodlog list [--search TEXT] [--bucket B] [--range R] [--period P]
    moodlog note ID [TEXT]
    moodlog delete ID
    moodlog average [--period P]
    moodlog trend [--period P]
    moodlog heatmap [--days N]
    moodlog stats [--period P]
    moodlog export [--format csv|json] [--out PATH]
    moodlog seed [--days N] [--seed N]
    moodlog serve [--transport stdio|sse]

Every command accepts --data-dir and --config.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data-dir", default=None, help="Path to data directory")
    p.add_argument("--config", default=None, help="Path to moodlog.yaml config")


def _add_filters(p: argparse.ArgumentParser) -> None:
    p.add_argument("--search", default=None, help="Case-insensitive note search")
    p.add_argument(
        "--bucket",
        default="all",
        choices=["all", "bad", "neutral", "good"],
        help="Mood bucket (default: all)",
    )
    p.add_argument(
        "--range",
        dest="date_range",
        default="all",
        choices=["all", "last_month", "last_year"],
        help="Relative date range (default: all)",
    )
    p.add_argument(
        "--period",
        default=None,
        choices=["day", "week", "month", "year"],
        help="Analytics period ending today (overrides --range)",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="moodlog",
        description="moodlog -- local mood journal",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # -- init --------------------------------------------------------------
    init_p = sub.add_parser("init", help="Initialize a new moodlog data directory")
    init_p.add_argument(
        "--data-dir",
        default="./moodlog_data",
        help="Data directory to create (default: ./moodlog_data)",
    )

    # -- add ---------------------------------------------------------------
    add_p = sub.add_parser("add", help="Record a mood rating")
    add_p.add_argument("value", type=int, help="Mood from 1 (worst) to 10 (best)")
    add_p.add_argument("--note", default=None, help="Optional note")
    add_p.add_argument("--at", default=None, help="ISO-8601 timestamp (default: now)")
    _add_common(add_p)

    # -- list --------------------------------------------------------------
    list_p = sub.add_parser("list", help="List mood records, newest first")
    _add_filters(list_p)
    _add_common(list_p)

    # -- note --------------------------------------------------------------
    note_p = sub.add_parser("note", help="Replace or clear the note of a record")
    note_p.add_argument("id", help="Record id")
    note_p.add_argument("text", nargs="?", default=None, help="New note (omit to clear)")
    _add_common(note_p)

    # -- delete ------------------------------------------------------------
    del_p = sub.add_parser("delete", help="Delete a record")
    del_p.add_argument("id", help="Record id")
    _add_common(del_p)

    # -- analytics ---------------------------------------------------------
    for name, help_text in (
        ("average", "Average mood"),
        ("trend", "Mood trend points, oldest first"),
        ("stats", "Summary statistics"),
    ):
        p = sub.add_parser(name, help=help_text)
        _add_filters(p)
        _add_common(p)

    heat_p = sub.add_parser("heatmap", help="Latest mood per day")
    heat_p.add_argument("--days", type=int, default=None, help="Window in days")
    _add_common(heat_p)

    # -- export ------------------------------------------------------------
    exp_p = sub.add_parser("export", help="Export records to CSV or JSON")
    exp_p.add_argument("--format", default="csv", choices=["csv", "json"])
    exp_p.add_argument("--out", default=None, help="Output path")
    _add_filters(exp_p)
    _add_common(exp_p)

    # -- seed --------------------------------------------------------------
    seed_p = sub.add_parser("seed", help="Insert sample records")
    seed_p.add_argument("--days", type=int, default=10)
    seed_p.add_argument("--seed", type=int, default=None)
    _add_common(seed_p)

    # -- serve -------------------------------------------------------------
    serve_p = sub.add_parser("serve", help="Start the MCP server")
    serve_p.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: stdio)",
    )
    _add_common(serve_p)

    args = parser.parse_args(argv)

    # -- Logging -----------------------------------------------------------
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return

    from moodlog.core.errors import MoodLogError

    try:
        handler(args)
    except MoodLogError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _open_journal(args: argparse.Namespace):
    from moodlog.core.config import Config
    from moodlog.journal import MoodJournal

    if getattr(args, "config", None):
        return MoodJournal(config=Config.from_yaml(args.config))
    if getattr(args, "data_dir", None):
        return MoodJournal(data_dir=args.data_dir)
    return MoodJournal()


def _spec_from_args(args: argparse.Namespace, journal):
    from moodlog.query import FilterSpec, Period

    if args.period:
        return FilterSpec.for_period(
            Period(args.period),
            search_text=args.search,
            bucket=args.bucket,
            bucket_scheme=journal.config.bucket_scheme,
            ascending=False,  # history order; trend_series re-sorts oldest first
        )
    return FilterSpec(
        search_text=args.search,
        bucket=args.bucket,
        date_range=args.date_range,
        bucket_scheme=journal.config.bucket_scheme,
    )


def _print(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def _cmd_init(args: argparse.Namespace) -> None:
    """Create a fresh data directory with a template config."""
    from moodlog.core.config import Config

    data_dir = Path(args.data_dir).resolve()
    config = Config.from_data_dir(data_dir)
    config.ensure_directories()

    config_path = config.config_path
    if not config_path.exists():
        config_path.write_text(
            "# moodlog configuration\n"
            "moodlog:\n"
            f"  data_dir: {data_dir}\n"
            "  bucket_scheme: history   # history (1-4/5/6-10) | legacy (1-3/4-7/8-10)\n"
            "  heatmap_window_days: 30\n"
            "  default_period: week     # day | week | month | year\n"
            "  structured_logging: false\n"
            "  log_level: INFO\n",
            encoding="utf-8",
        )

    print(f"Initialized moodlog at: {data_dir}")
    print(f"  database:     {config.db_path}")
    print(f"  moodlog.yaml: {config_path}")


def _cmd_add(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        record = journal.create_record(args.value, note=args.note, timestamp=args.at)
        _print(record.to_dict())


def _cmd_list(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        records = journal.list_records(_spec_from_args(args, journal))
        if records:
            _print([r.to_dict() for r in records])
        else:
            print("No entries found.")


def _cmd_note(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        _print(journal.update_note(args.id, args.text).to_dict())


def _cmd_delete(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        journal.delete_record(args.id)
        _print({"deleted": args.id})


def _cmd_average(args: argparse.Namespace) -> None:
    from moodlog.core.types import average_color

    with _open_journal(args) as journal:
        avg = journal.daily_average(_spec_from_args(args, journal))
        _print({"average": round(avg, 2), "color": average_color(avg)})


def _cmd_trend(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        spec = _spec_from_args(args, journal)
        _print([p.to_dict() for p in journal.trend(spec)])


def _cmd_stats(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        _print(journal.summary(_spec_from_args(args, journal)).to_dict())


def _cmd_heatmap(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        _print([c.to_dict() for c in journal.heatmap_cells(args.days)])


def _cmd_export(args: argparse.Namespace) -> None:
    with _open_journal(args) as journal:
        path = journal.export(args.format, args.out, _spec_from_args(args, journal))
        print(f"Exported to {path}")


def _cmd_seed(args: argparse.Namespace) -> None:
    from moodlog.preview import populate_preview

    with _open_journal(args) as journal:
        created = populate_preview(journal.store, days=args.days, seed=args.seed)
        _print({"created": len(created)})


def _cmd_serve(args: argparse.Namespace) -> None:
    """Start the MCP server."""
    from moodlog.server import run_server

    run_server(
        data_dir=args.data_dir,
        config_path=args.config,
        transport=args.transport,
    )


_COMMANDS = {
    "init": _cmd_init,
    "add": _cmd_add,
    "list": _cmd_list,
    "note": _cmd_note,
    "delete": _cmd_delete,
    "average": _cmd_average,
    "trend": _cmd_trend,
    "stats": _cmd_stats,
    "heatmap": _cmd_heatmap,
    "export": _cmd_export,
    "seed": _cmd_seed,
    "serve": _cmd_serve,
}


if __name__ == "__main__":
    main()
