"""
Unit of work for service operations.

Repository helpers only flush. A service method decorated with
``transactional`` commits once when the outermost decorated call on the
session returns, and rolls back when it raises, so a multi-step operation
that fails part way leaves nothing behind. Nested decorated calls (a service
calling another service on the same session) join the outer unit of work.
"""
import functools
import logging
from typing import Callable

logger = logging.getLogger(__name__)

_DEPTH_KEY = "product_ethics.unit_of_work_depth"


def transactional(func: Callable) -> Callable:
    """Run a method of an object holding ``self.db`` as one unit of work."""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        db = self.db
        depth = db.info.get(_DEPTH_KEY, 0)
        db.info[_DEPTH_KEY] = depth + 1
        try:
            result = func(self, *args, **kwargs)
            if depth == 0:
                db.commit()
            return result
        except Exception:
            if depth == 0:
                logger.debug("Rolling back %s", func.__qualname__)
                db.rollback()
            raise
        finally:
            db.info[_DEPTH_KEY] = depth
    return wrapper
