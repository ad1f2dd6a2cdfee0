"""Check that the identity service and the notes database are reachable.

Usage:
    uv run python scripts/check_connections.py [--db-url URL] [--skip-supabase]

Reads SUPABASE_URL / SUPABASE_ANON_KEY / DATABASE_URL from the repo's .env.
Exits non-zero on the first failed check.
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

_BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_BACKEND_DIR))

load_dotenv(_BACKEND_DIR.parent / ".env")

from sqlalchemy import text  # noqa: E402

from newsdesk.db import make_engine  # noqa: E402
from newsdesk.services.identity import IdentityClient, IdentityError  # noqa: E402


def _check_supabase() -> bool:
    print("Checking Supabase Auth ...")
    try:
        IdentityClient().health()
    except (IdentityError, RuntimeError) as exc:
        print(f"  FAILED: {exc}")
        return False
    print("  ok")
    return True


def _check_postgres(db_url: str | None) -> bool:
    print("Checking Postgres ...")
    try:
        engine = make_engine(db_url)
        with engine.connect() as conn:
            now = conn.execute(text("SELECT now()")).scalar_one()
    except Exception as exc:
        print(f"  FAILED: {exc}")
        return False
    print(f"  ok (server time {now})")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--db-url", default=os.environ.get("DATABASE_URL"))
    parser.add_argument("--skip-supabase", action="store_true")
    args = parser.parse_args()

    if not args.skip_supabase and not _check_supabase():
        return 1
    if not _check_postgres(args.db_url):
        return 1
    print("All connections OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
