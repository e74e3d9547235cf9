"""Transaction utilities for explicit transaction boundaries."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Context manager for explicit transaction boundaries.

    Commits on successful completion, rolls back on any exception.

    Example:
        with transaction(session):
            request_repo.update("req_1", status=RideRequestStatus.ACCEPTED)
            ride_repo.create(ride)
        # Automatic commit if no exception, rollback otherwise
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
