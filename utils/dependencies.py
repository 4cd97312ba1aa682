from fastapi import Depends

from config.database_config import MONGO_URL, UPLOAD_DIR
from services.chat_service import ChatDataService
from services.counter_service import QUESTION_REQUEST, VISITOR, CounterService
from services.gallery_service import GalleryService
from services.storage import MongoStorage
from services.upload_store import LocalUploadStore
from utils.errors import ServiceUnavailable

_storage: MongoStorage | None = None
_upload_store: LocalUploadStore | None = None


def get_storage() -> MongoStorage:
    """Single storage adapter (and connection pool) for the whole process."""
    global _storage
    if _storage is None:
        _storage = MongoStorage.connect(MONGO_URL)
    return _storage


def get_upload_store() -> LocalUploadStore:
    global _upload_store
    if _upload_store is None:
        _upload_store = LocalUploadStore(UPLOAD_DIR)
    return _upload_store


def close_storage():
    global _storage
    if _storage is not None:
        _storage.close()
        _storage = None


def require_storage_ready(storage: MongoStorage = Depends(get_storage)):
    """Precondition for every API route."""
    if not storage.is_ready():
        raise ServiceUnavailable()


def get_visitor_counter(storage: MongoStorage = Depends(get_storage)) -> CounterService:
    return CounterService(storage, VISITOR)


def get_question_request_counter(storage: MongoStorage = Depends(get_storage)) -> CounterService:
    return CounterService(storage, QUESTION_REQUEST)


def get_chat_service(storage: MongoStorage = Depends(get_storage)) -> ChatDataService:
    return ChatDataService(storage)


def get_gallery_service(
    storage: MongoStorage = Depends(get_storage),
    uploads: LocalUploadStore = Depends(get_upload_store),
) -> GalleryService:
    return GalleryService(storage, uploads)
