"""Create the database (if needed) and apply database/schema.sql.

Usage: python scripts/init_db.py [--seed]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.employee_portal.employee_portal.database.bootstrap import apply_schema, ensure_demo_users, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="also upsert the demo users")
    args = parser.parse_args()

    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    print(f"OK: schema applied to {target}")
    for table in sorted(list_tables(db_config)):
        print(f"  {table}")

    if args.seed:
        ensure_demo_users(db_config)
        print("OK: demo users seeded")


if __name__ == "__main__":
    main()
