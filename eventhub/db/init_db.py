# eventhub/db/init_db.py
import logging

from eventhub.db.base import Base, engine as default_engine

# models must be imported so their tables are registered on Base.metadata
from eventhub.db.models import availability, booking, broadcast, manager, review, service  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine=None):
    engine = engine or default_engine
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables ready")
