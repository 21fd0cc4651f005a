"""
Statement tracing: optional per-statement debug logging and slow-statement warnings
"""
import time
import logging

from sqlalchemy import event

logger = logging.getLogger(__name__)

def install_query_tracing(engine, log_statements: bool = False, slow_threshold: float = 1.0) -> None:
    """Attach cursor listeners to an (async) engine.

    The start time lives on the per-statement execution context, so a
    statement that raises leaves nothing behind on the pooled connection.
    """
    sync_engine = getattr(engine, "sync_engine", engine)

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        if context is not None:
            context._query_start_time = time.perf_counter()
        if log_statements:
            logger.debug(f"SQL: {statement} | params={parameters!r}")

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        started = getattr(context, "_query_start_time", None)
        if started is None:
            return
        elapsed = time.perf_counter() - started
        if slow_threshold and elapsed >= slow_threshold:
            logger.warning(f"Slow query ({elapsed:.3f}s >= {slow_threshold}s): {statement}")
