"""Structured logging for fileio operations.

Every public operation runs inside a LogSpan. On exit the span emits one
loguru record carrying the span name, elapsed time and any attributes added
along the way:

    with LogSpan(span="files.copy", source=src, dest=dst) as s:
        ...
        s.add(bytes=size)

Spans are emitted at TRACE level, below the DEBUG threshold of loguru's
default stderr sink, so only warnings from fileio reach stderr until the
application lowers the level with `configure_logging()`.
"""

from __future__ import annotations

import sys
import time
from types import TracebackType
from typing import Any

from loguru import logger


class LogSpan:
    """A structured logging span with timing and attributes."""

    def __init__(self, span: str, **attrs: Any) -> None:
        """Initialize a log span.

        Args:
            span: Span name (e.g., "files.copy")
            **attrs: Initial attributes to log
        """
        self.span = span
        self.attrs: dict[str, Any] = dict(attrs)
        self.start_time = time.perf_counter()
        self.error: str | None = None

    def add(self, key: str | None = None, value: Any = None, **attrs: Any) -> LogSpan:
        """Add attributes to the span.

        Supports both positional and keyword argument styles.

        Args:
            key: Attribute name (optional if using kwargs)
            value: Attribute value (required if key is provided)
            **attrs: Bulk attribute additions (e.g., count=10, changed=True)

        Returns:
            Self for method chaining
        """
        if key is not None:
            self.attrs[key] = value
        self.attrs.update(attrs)
        return self

    @property
    def elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.start_time) * 1000, 2)

    def __enter__(self) -> LogSpan:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None:
            self.error = f"{type(exc).__name__}: {exc}"
        self._emit()

    def _emit(self) -> None:
        """Emit the span as a single TRACE record."""
        entry: dict[str, Any] = {"elapsed_ms": self.elapsed_ms, **self.attrs}
        if self.error:
            entry["error"] = self.error

        logger.bind(span=self.span, **entry).trace(
            "{span} {entry}", span=self.span, entry=entry
        )


def configure_logging(level: str | None = None) -> None:
    """Send fileio log records to stderr.

    Replaces loguru's default sink, so call this from application code only.

    Args:
        level: Minimum level; defaults to `log_level` from the fileio config
    """
    from fileio.config import get_config

    if level is None:
        level = get_config().log_level

    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
