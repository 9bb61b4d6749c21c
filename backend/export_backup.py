"""Print a JSON backup of every stored entity to stdout.

Usage:
    python -m backend.export_backup
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from backend.database import SessionLocal, ensure_storage_schema
from backend.services.backup import export_data
from backend.storage.file_system import FileSystemStore


def main() -> None:
    try:
        ensure_storage_schema()
        with SessionLocal() as db:
            payload = export_data(FileSystemStore(db))
    except SQLAlchemyError as exc:
        print("Export failed:", exc, file=sys.stderr)
        sys.exit(1)
    print(payload)


if __name__ == "__main__":
    main()
