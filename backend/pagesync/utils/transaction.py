from contextlib import contextmanager
from pagesync.extensions import db


@contextmanager
def transactional():
    """
    Commit everything written inside the block, or nothing.

    Store writes only flush; this is the single commit point for an operation.
    """
    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
