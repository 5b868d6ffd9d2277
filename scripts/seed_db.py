from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from campus_attendance.config import get_settings_module
from campus_attendance.database.bootstrap import SEED_PATH, apply_schema, apply_seed_sql, ensure_demo_users

logger = logging.getLogger("seed_db")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed reference data and demo accounts.")
    parser.add_argument("--with-schema", action="store_true", help="apply schema.sql first")
    parser.add_argument("--reference-only", action="store_true", help="skip demo accounts and attendance")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    if args.with_schema:
        apply_schema(db_config)
    apply_seed_sql(db_config, seed_path=SEED_PATH)
    if not args.reference_only:
        ensure_demo_users(db_config)

    logger.info(
        "OK: Seeded database -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
