"""
moodlog -- MCP server exposing the mood journal as tools.

Run with:
    moodlog serve --data-dir ./data

Or configure in your MCP client as:
    {
        "mcpServers": {
            "moodlog": {
                "command": "moodlog",
                "args": ["serve", "--data-dir", "/path/to/data"]
            }
        }
    }

Tools exposed:
    Write:
        mood_create       -- Record a mood rating
        mood_update_note  -- Replace or clear a record's note
        mood_delete       -- Delete a record
    Query:
        mood_list         -- Filtered records, newest first
        mood_average      -- Average mood over a filter or period
        mood_trend        -- Trend series for charting
        mood_heatmap      -- Latest mood per day
        mood_stats        -- Summary statistics
    Maintenance:
        mood_export       -- Export records to CSV/JSON
"""

import atexit
import json
import logging
import traceback
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from moodlog.core.config import Config, default_data_dir
from moodlog.core.errors import MoodLogError
from moodlog.core.types import average_color
from moodlog.journal import MoodJournal
from moodlog.query import FilterSpec, Period

log = logging.getLogger("moodlog.server")

# ---------------------------------------------------------------------------
# Constants / validation
# ---------------------------------------------------------------------------

#: Maximum byte length for text inputs (100 KB).
MAX_INPUT_BYTES = 100_000


def _validate_length(text: Optional[str], name: str) -> Optional[str]:
    """Raise ValueError if *text* exceeds MAX_INPUT_BYTES."""
    if text is not None and len(text.encode("utf-8", errors="replace")) > MAX_INPUT_BYTES:
        raise ValueError(
            f"'{name}' exceeds maximum length ({MAX_INPUT_BYTES} bytes)."
        )
    return text


# ---------------------------------------------------------------------------
# Error-safe tool decorator
# ---------------------------------------------------------------------------


def _safe_json(fn):
    """Wrap an MCP tool so exceptions return JSON errors instead of crashing."""

    def wrapper(*args: Any, **kwargs: Any) -> str:
        try:
            return fn(*args, **kwargs)
        except MoodLogError as exc:
            # expected failures: bad input, missing id, storage error
            log.warning("Tool %s failed: %s", fn.__name__, exc)
            return _error(fn.__name__, exc)
        except Exception as exc:
            log.error("Tool %s failed: %s\n%s", fn.__name__, exc, traceback.format_exc())
            return _error(fn.__name__, exc)

    # Preserve the original function metadata so FastMCP sees the right
    # name, docstring, and parameter annotations.
    wrapper.__name__ = fn.__name__
    wrapper.__qualname__ = fn.__qualname__
    wrapper.__doc__ = fn.__doc__
    wrapper.__annotations__ = fn.__annotations__
    wrapper.__module__ = fn.__module__
    wrapper.__wrapped__ = fn  # type: ignore[attr-defined]
    return wrapper


def _error(tool_name: str, exc: Exception) -> str:
    return json.dumps(
        {
            "error": True,
            "tool": tool_name,
            "type": type(exc).__name__,
            "message": str(exc),
        }
    )


# ---------------------------------------------------------------------------
# Server singleton
# ---------------------------------------------------------------------------

mcp = FastMCP("moodlog")

# The MoodJournal is opened once when the server starts.
# Tools reference it via _get_journal().
_journal: Optional[MoodJournal] = None


def init_journal(
    data_dir: Optional[str] = None,
    config_path: Optional[str] = None,
    **kwargs: Any,
) -> MoodJournal:
    """Open the journal the tools operate on."""
    global _journal

    if config_path:
        config = Config.from_yaml(config_path)
    elif data_dir:
        config = Config.from_data_dir(data_dir, **kwargs)
    else:
        config = Config.from_data_dir(default_data_dir(), **kwargs)

    _journal = MoodJournal(config=config)
    return _journal


def _get_journal() -> MoodJournal:
    """Get the journal, opening it with defaults if needed."""
    global _journal
    if _journal is None:
        _journal = init_journal()
    return _journal


def _build_spec(
    journal: MoodJournal,
    search: str = "",
    bucket: str = "all",
    date_range: str = "all",
    period: str = "",
) -> FilterSpec:
    _validate_length(search, "search")
    if period:
        return FilterSpec.for_period(
            Period(period),
            search_text=search or None,
            bucket=bucket,
            bucket_scheme=journal.config.bucket_scheme,
        )
    return FilterSpec(
        search_text=search or None,
        bucket=bucket,
        date_range=date_range,
        bucket_scheme=journal.config.bucket_scheme,
    )


# ===========================================================================
# Write Tools
# ===========================================================================


@mcp.tool()
@_safe_json
def mood_create(mood_value: int, note: str = "", timestamp: str = "") -> str:
    """Record a mood rating.

    Args:
        mood_value: Mood from 1 (worst) to 10 (best).
        note: Optional free-text note.
        timestamp: Optional ISO-8601 time; defaults to now. Must not be in the future.
    """
    _validate_length(note, "note")
    record = _get_journal().create_record(
        mood_value, note=note or None, timestamp=timestamp or None
    )
    return json.dumps({"created": True, "record": record.to_dict()}, ensure_ascii=False)


@mcp.tool()
@_safe_json
def mood_update_note(record_id: str, note: str = "") -> str:
    """Replace the note of a record. An empty note clears it.

    Args:
        record_id: Id returned by mood_create.
        note: New note text.
    """
    _validate_length(note, "note")
    record = _get_journal().update_note(record_id, note or None)
    return json.dumps({"updated": True, "record": record.to_dict()}, ensure_ascii=False)


@mcp.tool()
@_safe_json
def mood_delete(record_id: str) -> str:
    """Delete a record permanently.

    Args:
        record_id: Id returned by mood_create.
    """
    _get_journal().delete_record(record_id)
    return json.dumps({"deleted": True, "record_id": record_id})


# ===========================================================================
# Query Tools
# ===========================================================================


@mcp.tool()
@_safe_json
def mood_list(
    search: str = "",
    bucket: str = "all",
    date_range: str = "all",
    period: str = "",
    limit: int = 100,
) -> str:
    """List mood records, newest first.

    Args:
        search: Case-insensitive text to find in notes.
        bucket: all | bad | neutral | good.
        date_range: all | last_month | last_year.
        period: day | week | month | year (overrides date_range).
        limit: Maximum records to return (default 100).
    """
    journal = _get_journal()
    spec = _build_spec(journal, search, bucket, date_range, period)
    spec.ascending = False
    records = journal.list_records(spec)
    limit = max(1, min(limit, 1000))
    payload = {
        "count": len(records),
        "records": [r.to_dict() for r in records[:limit]],
    }
    if journal.last_read_error is not None:
        payload["read_error"] = str(journal.last_read_error)
    return json.dumps(payload, ensure_ascii=False)


@mcp.tool()
@_safe_json
def mood_average(period: str = "", bucket: str = "all", date_range: str = "all") -> str:
    """Average mood. 0 means there is no data.

    Args:
        period: day | week | month | year. Empty means all time.
        bucket: all | bad | neutral | good.
        date_range: all | last_month | last_year (ignored when period is set).
    """
    journal = _get_journal()
    avg = journal.daily_average(
        _build_spec(journal, bucket=bucket, date_range=date_range, period=period)
    )
    return json.dumps({"average": round(avg, 2), "color": average_color(avg)})


@mcp.tool()
@_safe_json
def mood_trend(period: str = "week") -> str:
    """Mood trend points (timestamp, value), oldest first.

    Args:
        period: day | week | month | year.
    """
    journal = _get_journal()
    points = journal.trend(journal.period_spec(period or None))
    return json.dumps([p.to_dict() for p in points])


@mcp.tool()
@_safe_json
def mood_heatmap(window_days: int = 0) -> str:
    """Latest mood per calendar day.

    Args:
        window_days: Days to cover, today included (0 = configured default).
    """
    cells = _get_journal().heatmap_cells(window_days or None)
    return json.dumps([c.to_dict() for c in cells])


@mcp.tool()
@_safe_json
def mood_stats(period: str = "") -> str:
    """Summary statistics: count, average, extremes, bucket distribution.

    Args:
        period: day | week | month | year. Empty means all time.
    """
    journal = _get_journal()
    summary = journal.summary(_build_spec(journal, period=period))
    return json.dumps(summary.to_dict())


# ===========================================================================
# Maintenance Tools
# ===========================================================================


@mcp.tool()
@_safe_json
def mood_export(fmt: str = "csv") -> str:
    """Export all records to the data directory.

    Args:
        fmt: csv | json.
    """
    path = _get_journal().export(fmt)
    return json.dumps({"exported": True, "path": str(path)})


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def _shutdown() -> None:
    global _journal
    if _journal is not None:
        try:
            _journal.close()
        except Exception as exc:
            log.warning("Error during shutdown: %s", exc)
        _journal = None


def run_server(
    data_dir: Optional[str] = None,
    config_path: Optional[str] = None,
    transport: str = "stdio",
    host: str = "127.0.0.1",
    port: int = 8765,
) -> None:
    """Open the journal and run the MCP server.

    Args:
        data_dir: Path to the moodlog data directory.
        config_path: Path to YAML config file.
        transport: MCP transport: "stdio", "streamable-http", or "sse".
        host: Bind address for HTTP transports.
        port: Port for HTTP transports.
    """
    init_journal(data_dir=data_dir, config_path=config_path)
    atexit.register(_shutdown)
    log.info("Starting moodlog MCP server (transport=%s)", transport)
    if transport in ("streamable-http", "sse"):
        mcp.settings.host = host
        mcp.settings.port = port
        log.info("HTTP endpoint: http://%s:%d", host, port)
    try:
        mcp.run(transport=transport)  # type: ignore[arg-type]
    finally:
        _shutdown()
