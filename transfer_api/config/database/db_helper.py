from contextlib import contextmanager

from sqlalchemy.orm import sessionmaker


@contextmanager
def get_session(session_factory: sessionmaker):
    session = session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
