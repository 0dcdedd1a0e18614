#!/usr/bin/env python3
"""
TaskNest Database Setup Script
==============================

Creates the database tables and the admin account before the server starts.

Usage:
    python scripts/setup_database.py [--check-only]
"""

import sys
import logging
import argparse

from tasknest import crud
from tasknest.core.config import settings
from tasknest.core.database_utils import (
    check_database_connection,
    create_tables,
    get_db_session,
    get_missing_tables,
)

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def test_connection():
    """Test database connection"""
    logger.info("Testing database connection...")
    if check_database_connection():
        logger.info("Database connection successful")
        return True
    logger.error("Database connection failed")
    return False


def check_tables_exist():
    """Check if all required tables exist"""
    try:
        missing_tables = get_missing_tables()
    except Exception as e:
        logger.error(f"Failed to check tables: {e}")
        return False

    if missing_tables:
        logger.warning(f"Missing tables: {missing_tables}")
        return False
    logger.info("All required tables exist")
    return True


def seed_admin():
    """Create the admin account when it does not exist yet"""
    try:
        with get_db_session() as db:
            admin, created = crud.user.ensure_admin(
                db,
                email=settings.ADMIN_EMAIL,
                password=settings.ADMIN_PASSWORD,
                name=settings.ADMIN_NAME,
            )
            if created:
                logger.info(f"Created admin account: {admin.email}")
            else:
                logger.info("Admin account already exists")
        return True
    except Exception as e:
        logger.error(f"Error creating admin account: {e}")
        return False


def main():
    """Main setup function"""
    parser = argparse.ArgumentParser(description='TaskNest Database Setup')
    parser.add_argument('--check-only', action='store_true',
                        help='Only check if tables exist, do not create')

    args = parser.parse_args()

    logger.info("TaskNest Database Setup")
    logger.info("=" * 40)

    if not test_connection():
        logger.error("Cannot proceed without database connection")
        sys.exit(1)

    tables_exist = check_tables_exist()

    if args.check_only:
        if tables_exist:
            logger.info("Database check passed - all tables exist")
            sys.exit(0)
        logger.error("Database check failed - missing tables")
        sys.exit(1)

    if not tables_exist:
        try:
            create_tables()
        except Exception as e:
            logger.error(f"Failed to create tables: {e}")
            sys.exit(1)

    if not seed_admin():
        logger.warning("Failed to create admin account (tables created successfully)")

    if check_tables_exist():
        logger.info("Database setup completed successfully!")
        logger.info(f"Admin login: {settings.ADMIN_EMAIL}")
        logger.info("Start the server with:")
        logger.info("  python -m uvicorn tasknest.main:app --host 0.0.0.0 --port 8000")
    else:
        logger.error("Setup verification failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
