"""Database dependencies for FastAPI endpoints."""

from sqlalchemy.orm import sessionmaker

from costledger.db.session import SessionLocal


def get_session_factory() -> sessionmaker:
    """Session factory for report work that opens one session per concurrent read."""

    return SessionLocal
