"""
MongoDB storage adapter: collections, readiness and deadline-bounded operations.
"""

import logging
from contextlib import contextmanager
from typing import Optional

import pymongo
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.monitoring import TopologyListener

from config.database_config import (
    CAROUSEL_IMAGES_COLLECTION,
    CHAT_DATA_COLLECTION,
    MONGO_CLIENT_OPTIONS,
    MONGO_DB_NAME,
    QUESTION_REQUEST_COUNTER_COLLECTION,
    VISITOR_COUNTER_COLLECTION,
)
from utils.errors import StorageTimeout

logger = logging.getLogger(__name__)


class ConnectionMonitor(TopologyListener):
    """Tracks whether a writable server is reachable and logs transitions."""

    def __init__(self):
        self.connected = False
        self._ever_connected = False

    def opened(self, event):
        logger.info("Connecting to MongoDB...")

    def description_changed(self, event):
        now_connected = event.new_description.has_writable_server()
        if now_connected == self.connected:
            return
        self.connected = now_connected
        if now_connected and not self._ever_connected:
            self._ever_connected = True
            logger.info("✅ MongoDB Connected")
        elif now_connected:
            logger.info("✅ MongoDB Reconnected")
        else:
            logger.warning("⚠️ MongoDB Disconnected")

    def closed(self, event):
        self.connected = False
        logger.info("MongoDB connection closed")


class MongoStorage:
    """Owns the collections every service works against."""

    def __init__(self, database: Database, monitor: Optional[ConnectionMonitor] = None):
        self.database = database
        self.monitor = monitor
        self.chat_data = database[CHAT_DATA_COLLECTION]
        self.carousel_images = database[CAROUSEL_IMAGES_COLLECTION]
        self.visitor_counters = database[VISITOR_COUNTER_COLLECTION]
        self.question_request_counters = database[QUESTION_REQUEST_COUNTER_COLLECTION]

    @classmethod
    def connect(cls, mongo_url: str) -> "MongoStorage":
        """Create a client against ``mongo_url``. Connection happens in the background."""
        monitor = ConnectionMonitor()
        client = MongoClient(mongo_url, event_listeners=[monitor], **MONGO_CLIENT_OPTIONS)
        database = client.get_default_database(default=MONGO_DB_NAME)
        return cls(database, monitor=monitor)

    def is_ready(self) -> bool:
        # Without a monitor (an in-memory database) there is nothing to wait for.
        if self.monitor is None:
            return True
        return self.monitor.connected

    @contextmanager
    def bounded(self, seconds: float):
        """Run the enclosed storage calls under a deadline.

        Raises StorageTimeout when the deadline is exceeded; every other
        pymongo error propagates unchanged.
        """
        try:
            with pymongo.timeout(seconds):
                yield
        except PyMongoError as exc:
            if exc.timeout:
                raise StorageTimeout("Operation timed out", details=str(exc)) from exc
            raise

    def close(self):
        self.database.client.close()
