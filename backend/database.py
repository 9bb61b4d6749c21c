from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker


load_dotenv()

from backend.core import config  # noqa: E402

DATABASE_URL = config.DATABASE_URL

engine = create_engine(
    DATABASE_URL,
    connect_args={'check_same_thread': False} if DATABASE_URL.startswith('sqlite') else {},
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_storage_schema_checked = False


def ensure_storage_schema(bind=None) -> None:
    """Create the key-value table and bring older databases up to date."""
    global _storage_schema_checked

    if _storage_schema_checked and bind is None:
        return

    with _schema_lock:
        if _storage_schema_checked and bind is None:
            return

        target = bind or engine

        # Imported here so the model registers against Base before create_all.
        from backend.models.storage_entry import StorageEntry

        StorageEntry.__table__.create(bind=target, checkfirst=True)

        inspector = inspect(target)
        existing_columns = {column['name'] for column in inspector.get_columns('storage_entries')}
        migration_steps = [
            ('size_bytes', 'ALTER TABLE storage_entries ADD COLUMN size_bytes INTEGER NOT NULL DEFAULT 0'),
            ('updated_at', 'ALTER TABLE storage_entries ADD COLUMN updated_at TIMESTAMP'),
        ]

        with target.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))

        if bind is None:
            _storage_schema_checked = True
