"""
Migration script to create all database tables

Run this script to create all database tables:
    python -m app.migrations.create_all_tables
"""

import logging

from app.database import engine, init_db

logger = logging.getLogger(__name__)


def create_tables():
    """Create all database tables"""
    logger.info("Creating all database tables on %s", engine.url.render_as_string(hide_password=True))

    try:
        init_db(engine)
    except Exception:
        logger.exception("Error creating tables")
        raise

    logger.info("Tables ready: users, movies, watchlist, ratings")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    create_tables()
