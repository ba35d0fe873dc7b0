from pathlib import Path
from typing import Generator
import logging

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Engine and session factory owned by one application instance."""

    def __init__(self, url: str, echo: bool = False):
        self.url = make_url(url)

        if self.is_sqlite:
            # One connection may be handed across threadpool workers
            self.engine = create_engine(
                self.url,
                echo=echo,
                connect_args={"check_same_thread": False, "timeout": 30},
            )
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(
                self.url,
                echo=echo,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,  # Recycle connections after 30 minutes
            )

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == "sqlite"

    def ensure_data_dir(self) -> None:
        """Create the parent directory of a file-backed SQLite database."""
        if not self.is_sqlite or self.url.database in (None, "", ":memory:"):
            return
        data_dir = Path(self.url.database).expanduser().resolve().parent
        if not data_dir.exists():
            data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory {data_dir}")

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Database dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """Get database session bound to the application's database."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


# Database initialization
def init_db(database: Database) -> None:
    """Create tables if missing and seed sample patients into an empty store."""
    # Register models on the metadata before create_all
    from ..models import appointment, patient  # noqa: F401
    from .seed import seed_patients

    database.ensure_data_dir()
    Base.metadata.create_all(bind=database.engine)
    logger.info("Patients and appointments tables ready")

    db = database.session()
    try:
        seed_patients(db)
    finally:
        db.close()
