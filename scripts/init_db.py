#!/usr/bin/env python3
"""
Initialize the FoodOps database.
Creates the schema and, optionally, promotes a user to head admin so the
platform administration routes can be used on a fresh install.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --head-admin user_2abc --email ops@example.com
"""

import argparse
import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("foodops.init_db")


def init_schema() -> bool:
    """Create all tables and report what exists afterwards"""
    try:
        from sqlalchemy import inspect
        from domain.models.database import engine, init_database

        init_database()
        tables = inspect(engine).get_table_names()
        logger.info(f"Schema ready with {len(tables)} tables: {', '.join(sorted(tables))}")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize the database: {e}", exc_info=True)
        return False


def promote_head_admin(user_id: str, email: str = None) -> bool:
    """Create or update the user mirror with the headAdmin platform role"""
    from domain.enums import PlatformRole
    from domain.models import AppUser, SessionLocal

    db = SessionLocal()
    try:
        user = db.get(AppUser, user_id)
        if user is None:
            user = AppUser(user_id=user_id, email=email, role=PlatformRole.HEAD_ADMIN)
            db.add(user)
        else:
            user.role = PlatformRole.HEAD_ADMIN
            if email:
                user.email = email
        db.commit()
        logger.info(f"User {user_id} is now a head admin")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to promote {user_id}: {e}")
        return False
    finally:
        db.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the FoodOps database")
    parser.add_argument("--head-admin", help="identity-provider user id to promote")
    parser.add_argument("--email", help="email stored when the user mirror is created")
    args = parser.parse_args(argv)

    if not init_schema():
        return 1
    if args.head_admin and not promote_head_admin(args.head_admin, args.email):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
