from __future__ import annotations

import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from rumbleparty.db.engine import make_engine
from rumbleparty.models import Base

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to the requested revision."""
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def missing_tables() -> list[str]:
    """Return model tables that the configured database does not have yet."""
    engine = make_engine()
    try:
        present = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    return sorted(set(Base.metadata.tables) - present)


def main(argv: list[str] | None = None) -> int:
    """Apply migrations (default to head) and report any table still missing."""
    args = sys.argv[1:] if argv is None else argv
    upgrade_db(args[0] if args else "head")
    missing = missing_tables()
    if missing:
        print("Missing tables after upgrade:", ", ".join(missing))
        return 1
    print("Database is up to date:", ", ".join(sorted(Base.metadata.tables)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
