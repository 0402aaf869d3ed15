"""Translation of backing-store failures into ``UnavailableError``.

Providers report outages in their own vocabulary: Protean raises
``DatabaseError``, the PostgreSQL provider lets SQLAlchemy's
``OperationalError``/``DBAPIError`` through, and sockets raise
``ConnectionError``/``TimeoutError``. Callers only ever see
``UnavailableError`` for all of them.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from protean.exceptions import DatabaseError
from sqlalchemy.exc import DBAPIError, OperationalError

from delivery.exceptions import UnavailableError

STORE_ERRORS = (
    DatabaseError,
    OperationalError,
    DBAPIError,
    ConnectionError,
    TimeoutError,
)


@contextmanager
def store_errors(store: str) -> Iterator[None]:
    """Re-raise store outages inside the block as ``UnavailableError``."""
    try:
        yield
    except STORE_ERRORS as exc:
        raise UnavailableError({"store": [f"{store} store unavailable: {exc}"]}) from exc
