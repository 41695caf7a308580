"""Scoped transaction helper shared by every mutating flow.

Usage:
    ```python
    with atomic(db):
        debt = lock_debt(...)
        ...
    ```

The block commits on normal exit. Any exception rolls the whole session
back before propagating; SQLAlchemy failures surface as ``StorageError``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.services.errors import FinanceError, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, operation: str = "transaction") -> Iterator[Session]:
    """Run a unit of work inside one database transaction.

    Args:
        db: Database session
        operation: Name used in log lines

    Yields:
        The same session
    """
    try:
        yield db
        db.commit()
    except FinanceError as e:
        db.rollback()
        logger.warning(f"{operation} rolled back: {e.code} - {e.message}")
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{operation} failed in storage: {e}", exc_info=True)
        raise StorageError() from e
    except Exception:
        db.rollback()
        logger.error(f"{operation} failed, transaction rolled back", exc_info=True)
        raise


__all__ = ["atomic"]
