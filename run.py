# run.py
import logging
import os
import time

import uvicorn
from sqlalchemy.exc import OperationalError

from zbank.db import engine, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init_db_with_retry(max_retries: int = 3, retry_delay: int = 5) -> bool:
    """Create database tables, retrying while the database comes up."""
    for attempt in range(max_retries):
        try:
            logger.info("Connecting to database (attempt %s/%s)...", attempt + 1, max_retries)
            with engine.connect():
                pass
            init_db()
            logger.info("Database tables created/verified")
            return True
        except OperationalError as e:
            logger.error("Database connection failed (attempt %s/%s): %s", attempt + 1, max_retries, e)
            if attempt < max_retries - 1:
                time.sleep(retry_delay)

    logger.error("All database connection attempts failed")
    return False


port = int(os.environ.get("PORT", 8000))

if __name__ == "__main__":
    if not init_db_with_retry():
        logger.warning("Starting server without database initialization...")

    uvicorn.run("zbank.main:app", host="0.0.0.0", port=port, reload=False, log_level="info")
