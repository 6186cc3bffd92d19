"""
Run script untuk Arsip & Surat BIAK
Usage: python run.py

Features:
- Auto-create .env from .env.example
- Auto-create database if not exists (MySQL)
- Auto-run migrations on startup
- Auto-create default admin user
"""
import logging
import shutil
import subprocess
import sys
from pathlib import Path

import uvicorn

logger = logging.getLogger("app.run")


def setup_env_file():
    """Copy .env.example to .env if .env doesn't exist"""
    env_file = Path(".env")
    env_example = Path(".env.example")

    if not env_file.exists() and env_example.exists():
        shutil.copy(env_example, env_file)
        print("[Setup] Created .env from .env.example")
        print("[Setup] Edit .env if your MySQL config is different from default")
    return True


def create_database_if_not_exists():
    """Create database if it doesn't exist"""
    from app.config import get_settings

    settings = get_settings()
    if not settings.database_url.startswith("mysql"):
        logger.info("[Database] Using %s, skipping CREATE DATABASE", settings.database_url.split(":")[0])
        return True

    try:
        import pymysql

        # Connect without database to create it
        conn = pymysql.connect(
            host=settings.db_host,
            port=settings.db_port,
            user=settings.db_user,
            password=settings.db_password or ''
        )
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    f"CREATE DATABASE IF NOT EXISTS `{settings.db_name}` "
                    "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
                )
            conn.commit()
        finally:
            conn.close()
        logger.info("[Database] Database '%s' ready", settings.db_name)
        return True
    except Exception as e:
        logger.warning("[Database] Could not create database - %s", e)
        return False


def run_migrations():
    """Run alembic migrations"""
    logger.info("[Migration] Checking for pending migrations...")
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        capture_output=True,
        text=True,
        cwd="."
    )

    if result.returncode != 0:
        logger.warning("[Migration] %s", result.stderr)
        return False

    if "Running upgrade" in result.stderr:
        logger.info("[Migration] Migrations applied successfully!")
    else:
        logger.info("[Migration] Database is up to date")
    return True


def create_default_admin():
    """Create default admin user if not exists"""
    from app.services.auth_service import auth_service

    try:
        if auth_service.create_default_admin():
            logger.info("[Auth] Default admin user created")
        return True
    except Exception as e:
        logger.warning("[Auth] Could not create default admin - %s", e)
        return False


if __name__ == "__main__":
    # Step 0: Setup .env file before settings are loaded
    setup_env_file()

    from app.utils.logger import setup_logger
    setup_logger()

    logger.info("=" * 50)
    logger.info("  Arsip & Surat BIAK - Starting...")
    logger.info("=" * 50)

    # Step 1: Create database if not exists
    create_database_if_not_exists()

    # Step 2: Run migrations
    run_migrations()

    # Step 3: Create default admin
    create_default_admin()

    logger.info("=" * 50)
    logger.info("  Server starting on http://127.0.0.1:8000")
    logger.info("=" * 50)

    # Start server
    uvicorn.run("app.main:app", host="127.0.0.1", port=8000, reload=True)
