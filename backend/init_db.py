"""
Database initialization script.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from database import create_tables, engine
from models import Base

logger = logging.getLogger(__name__)


def init_database() -> bool:
    """Initialize database with all tables."""
    logger.info(f"Creating database tables on {engine.url.render_as_string(hide_password=True)}...")

    try:
        create_tables()
    except SQLAlchemyError as e:
        logger.error(f"Error creating tables: {e}")
        return False

    logger.info(f"Created tables: {', '.join(Base.metadata.tables.keys())}")
    return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
