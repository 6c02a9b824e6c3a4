"""Classification of database errors raised inside a transaction.

Deadlocks, serialization failures and lock-wait timeouts are transient: the
same unit of work may succeed if it is started again from scratch.  Anything
else (constraint violations, lost connections, syntax errors) is not.
"""

from __future__ import annotations

from django.db import DatabaseError

# PostgreSQL SQLSTATE codes: serialization_failure, deadlock_detected,
# lock_not_available.
PG_RETRY_ERRCODES = frozenset({"40001", "40P01", "55P03"})

# MySQL / MariaDB error numbers: ER_LOCK_WAIT_TIMEOUT, ER_LOCK_DEADLOCK.
MYSQL_RETRY_ERRNOS = frozenset({1205, 1213})

_RETRY_MESSAGES = (
    "deadlock",
    "could not serialize access",
    "lock wait timeout",
    "database is locked",
)


def _driver_error(exc: BaseException) -> BaseException | None:
    """Return the DB-API exception Django wrapped, if any."""
    return exc.__cause__ or getattr(exc, "__context__", None)


def _pgcode(exc: BaseException) -> str | None:
    code = getattr(exc, "pgcode", None) or getattr(exc, "sqlstate", None)
    if code:
        return code
    cause = _driver_error(exc)
    if cause is None:
        return None
    return getattr(cause, "pgcode", None) or getattr(cause, "sqlstate", None)


def _mysql_errno(exc: BaseException) -> int | None:
    for candidate in (exc, _driver_error(exc)):
        args = getattr(candidate, "args", ())
        if args and isinstance(args[0], int):
            return args[0]
    return None


def is_retryable(exc: BaseException) -> bool:
    """Return ``True`` when *exc* signals a transient lock conflict."""
    if not isinstance(exc, DatabaseError):
        return False
    if _pgcode(exc) in PG_RETRY_ERRCODES:
        return True
    if _mysql_errno(exc) in MYSQL_RETRY_ERRNOS:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _RETRY_MESSAGES)
