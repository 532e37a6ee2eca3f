from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.verification_system.verification_system.database.bootstrap import apply_seed_sql, ensure_demo_users

logger = logging.getLogger("seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    # Accounts first: seed.sql attaches sample sections to the demo employee.
    ensure_demo_users(db_config)
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    logger.info(
        "Seeded database -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
