import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, OperationalError, transaction

from .errors import Conflict, Internal, Transient

logger = logging.getLogger(__name__)


@contextmanager
def store_errors():
    """
    Translate database failures into workflow errors.
    Used on its own for pure reads; ``atomic_unit`` builds on it for writes.
    """
    try:
        yield
    except IntegrityError as e:
        logger.warning("Store rejected write: %s", e)
        raise Conflict(f"Conflicting write: {e}") from e
    except OperationalError as e:
        logger.warning("Store unavailable: %s", e)
        raise Transient("Store unavailable, try again later") from e
    except DatabaseError as e:
        logger.error("Store failure: %s", e)
        raise Internal("Store failure, nothing was written") from e


@contextmanager
def atomic_unit(using=None):
    """
    One request-scoped transaction: reads and writes inside the block commit
    together or not at all. The rollback happens before the error is
    translated, so callers never observe partial writes.
    """
    with store_errors():
        with transaction.atomic(using=using):
            yield
