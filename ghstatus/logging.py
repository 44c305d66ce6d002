"""Log plumbing shared by the ghstatus modules.

Two places log: :mod:`ghstatus.transport` writes one DEBUG line per HTTP
request, and :mod:`ghstatus.statuses.observability` writes the
``[statuses.request.*]`` events for every client operation. Both go through
these helpers, so messages reach femtologging already interpolated. The
``ghstatus`` command calls :func:`configure_logging` once with its
``--log-level`` value.

Example:
>>> from ghstatus.logging import get_logger, log_info
>>> logger = get_logger("ghstatus.example")
>>> log_info(logger, "listed %d statuses for %s", 2, "octo/reef@main")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Values accepted by ``--log-level`` and ``GHSTATUS_LOG_LEVEL``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_FALLBACK_LEVEL = LogLevel.INFO.value


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Upper-case a level name, substituting INFO when it is unknown.

    Returns
    -------
    tuple[str, bool]
        The level to configure, and whether ``level`` had to be replaced so
        the CLI can warn about it.

    """
    candidate = (level or "").strip().upper()
    if candidate in LogLevel.__members__:
        return (candidate, False)
    return (_FALLBACK_LEVEL, True)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Install the root handler for a ``ghstatus`` run.

    Parameters
    ----------
    level : str | None
        Level requested on the command line or in the environment.
    force : bool, optional
        Replace handlers installed by an earlier call.

    Returns
    -------
    tuple[str, bool]
        The configured level and whether the requested one was rejected.

    """
    configured, rejected = normalize_log_level(level)
    basicConfig(level=configured, force=force)
    return (configured, rejected)


class _SupportsLog(typ.Protocol):
    """Anything with femtologging's ``log`` signature; tests pass fakes."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _SupportsLog,
    level: str,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    logger.log(level, template % args, exc_info=exc_info, stack_info=False)


def log_debug(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit ``template % args`` at DEBUG; used for per-request transport lines."""
    _emit(logger, "DEBUG", template, args, exc_info)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit ``template % args`` at INFO.

    Started and completed request events are logged at this level.

    Parameters
    ----------
    logger : _SupportsLog
        Destination logger, normally a module-level ``get_logger(__name__)``.
    template : str
        ``%``-style template such as ``"[%s] operation=%s %s"``.
    *args : object
        Values substituted into ``template``.
    exc_info : object | None, optional
        Exception attached to the record.

    """
    _emit(logger, "INFO", template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit at WARNING; client-side failures (4xx, bad input) use this."""
    _emit(logger, "WARNING", template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit at ERROR; server errors and transport failures use this."""
    _emit(logger, "ERROR", template, args, exc_info)


__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
