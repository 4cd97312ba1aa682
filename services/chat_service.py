"""
Saved chat transcripts and their per-question counters.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from config.database_config import SCAN_TIMEOUT_SECONDS
from services.storage import MongoStorage
from utils.errors import ApiError, BadRequest, InternalError, NotFound, ValidationError
from utils.serialization import parse_object_id

logger = logging.getLogger(__name__)

LIST_FIELDS = {"title": 1, "content": 1, "date": 1}


def display_date(moment: Optional[datetime] = None) -> str:
    """Vietnamese display format (vi-VN): ``HH:MM:SS DD/MM/YYYY`` in server local time."""
    moment = moment or datetime.now()
    return moment.strftime("%H:%M:%S %d/%m/%Y")


def _public_view(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "title": doc.get("title"),
        "content": doc.get("content"),
        "date": doc.get("date"),
    }


class ChatDataService:
    def __init__(self, storage: MongoStorage, scan_timeout: float = SCAN_TIMEOUT_SECONDS):
        self.storage = storage
        self.collection = storage.chat_data
        self.scan_timeout = scan_timeout

    def list_all(self) -> List[dict]:
        """Every saved chat, newest first."""
        try:
            with self.storage.bounded(self.scan_timeout):
                cursor = self.collection.find({}, LIST_FIELDS).sort(
                    [("createdAt", DESCENDING), ("_id", DESCENDING)]
                )
                docs = list(cursor)
        except (PyMongoError, ApiError) as e:
            logger.error(f"❌ Get all data error: {e}")
            raise InternalError("Không thể lấy dữ liệu", details=str(e))
        return [_public_view(doc) for doc in docs]

    def add(self, title: Optional[str], content: Optional[str]) -> dict:
        missing = [name for name, value in (("title", title), ("content", content)) if not value]
        if missing:
            raise ValidationError(
                "ChatData validation failed: "
                + ", ".join(f"{name}: Path `{name}` is required." for name in missing)
            )

        doc = {
            "title": title,
            "content": content,
            "date": display_date(),
            "questionCount": 0,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            raise BadRequest(str(e))
        doc["_id"] = result.inserted_id
        logger.info(f"Chat data saved with ID: {result.inserted_id}")
        return _public_view(doc)

    def increment_question(self, chat_id: str) -> dict:
        """Atomically bump questionCount by one."""
        object_id = parse_object_id(chat_id)
        if object_id is None:
            raise NotFound("Question not found")
        try:
            doc = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$inc": {"questionCount": 1}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise InternalError(str(e))
        if doc is None:
            raise NotFound("Question not found")
        return {
            "success": True,
            "id": str(doc["_id"]),
            "title": doc.get("title"),
            "questionCount": doc.get("questionCount", 0),
        }

    def total_question_count(self) -> dict:
        """Sum of questionCount over every record (full scan)."""
        try:
            with self.storage.bounded(self.scan_timeout):
                docs = list(self.collection.find({}, {"questionCount": 1}))
        except (PyMongoError, ApiError) as e:
            logger.error(f"❌ Get total question count error: {e}")
            raise InternalError("Không thể lấy số lượng câu hỏi", details=str(e))
        total = sum(doc.get("questionCount") or 0 for doc in docs)
        return {"success": True, "totalCount": total, "totalQuestions": len(docs)}

    def delete(self, chat_id: str) -> None:
        """Delete by id. Unknown or malformed ids are ignored."""
        object_id = parse_object_id(chat_id)
        if object_id is None:
            return
        try:
            self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            raise InternalError(str(e))
