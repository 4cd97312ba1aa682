"""
Singleton counters (visitor count, question-request count).

Each kind lives in its own collection as exactly one document whose ``_id``
is the kind name. Every operation is a single atomic upsert, so the document
is created on first access and concurrent increments never lose updates.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from config.database_config import (
    COUNTER_MAX_ATTEMPTS,
    COUNTER_READ_TIMEOUT_SECONDS,
    COUNTER_RETRY_DELAY_SECONDS,
)
from services.storage import MongoStorage
from utils.errors import ApiError, StorageTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterKind:
    key: str
    label: str  # for logs
    get_error: str
    increment_error: str
    reset_error: str
    reset_message: str


VISITOR = CounterKind(
    key="visitor",
    label="Visitor counter",
    get_error="Không thể lấy số lượt truy cập",
    increment_error="Không thể cập nhật số lượt truy cập",
    reset_error="Không thể reset số lượt truy cập",
    reset_message="Đã reset số lượt truy cập về 0",
)

QUESTION_REQUEST = CounterKind(
    key="question_request",
    label="Question request counter",
    get_error="Không thể lấy số lượng câu hỏi",
    increment_error="Không thể cập nhật số lượng câu hỏi",
    reset_error="Không thể reset số lượng câu hỏi",
    reset_message="Đã reset số lượng câu hỏi về 0",
)


def counter_collection(storage: MongoStorage, kind: CounterKind) -> Collection:
    if kind is VISITOR:
        return storage.visitor_counters
    return storage.question_request_counters


class CounterService:
    """get / increment / reset with bounded retry."""

    def __init__(
        self,
        storage: MongoStorage,
        kind: CounterKind,
        max_attempts: int = COUNTER_MAX_ATTEMPTS,
        retry_delay: float = COUNTER_RETRY_DELAY_SECONDS,
        timeout: float = COUNTER_READ_TIMEOUT_SECONDS,
    ):
        self.storage = storage
        self.kind = kind
        self.collection = counter_collection(storage, kind)
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.timeout = timeout

    def get(self) -> dict:
        """Current value; creates the counter at 0 if it does not exist yet."""
        return self._with_retry(
            "get",
            self.kind.get_error,
            lambda: {"$setOnInsert": {"count": 0, "lastUpdated": _now()}},
        )

    def increment(self) -> dict:
        return self._with_retry(
            "increment",
            self.kind.increment_error,
            lambda: {"$inc": {"count": 1}, "$set": {"lastUpdated": _now()}},
        )

    def reset(self) -> dict:
        return self._with_retry(
            "reset",
            self.kind.reset_error,
            lambda: {"$set": {"count": 0, "lastUpdated": _now()}},
        )

    def _apply(self, update: dict) -> dict:
        with self.storage.bounded(self.timeout):
            doc = self.collection.find_one_and_update(
                {"_id": self.kind.key},
                update,
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return {"count": doc["count"], "lastUpdated": doc["lastUpdated"]}

    def _with_retry(self, operation: str, error_message: str, build_update) -> dict:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._apply(build_update())
            except (PyMongoError, StorageTimeout) as e:
                if attempt == self.max_attempts:
                    logger.error(f"❌ {self.kind.label} {operation} error: {e}")
                    details = (e.details if isinstance(e, StorageTimeout) else None) or str(e)
                    raise ApiError(error_message, details=details, with_success_flag=True)
                logger.warning(
                    f"⚠️ {self.kind.label} {operation} attempt {attempt}/{self.max_attempts} failed: {e}"
                )
                time.sleep(self.retry_delay)


def _now() -> datetime:
    return datetime.now(timezone.utc)
