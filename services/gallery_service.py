"""
Carousel gallery: ordered image metadata plus the files behind /uploads/.

Multipart and base64 uploads both end up in ``ingest``: write the bytes,
create the record, and remove the file again if the record cannot be saved.
"""

import base64
import logging
import math
import os
import re
from datetime import datetime, timezone
from typing import List, Optional, Union

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from config.database_config import ALLOWED_IMAGE_TYPES
from services.storage import MongoStorage
from services.upload_store import LocalUploadStore, generate_filename
from utils.errors import BadRequest, InternalError, UnsupportedMediaType, ValidationError
from utils.serialization import parse_object_id, serialize_doc

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"
DATA_URI_PREFIX = re.compile(r"^data:(image/[\w.+-]+);base64,")
NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


def coerce_order(value: Optional[Union[int, float, str]]) -> Union[int, float]:
    """Display position as a number; whole values are stored as int."""
    if value is None or value == "":
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if isinstance(value, bool) or not math.isfinite(number):
        raise ValidationError(f'Cast to Number failed for value "{value}" at path "order"')
    return int(number) if number.is_integer() else number


def check_image_type(mime_type: Optional[str]) -> None:
    if mime_type not in ALLOWED_IMAGE_TYPES:
        raise UnsupportedMediaType("Only image files are allowed")


def decode_image_data(image_data: str):
    """Split an optional ``data:image/<type>;base64,`` prefix off and decode.

    Accepts the URL-safe alphabet and missing padding; characters outside the
    alphabet are skipped. Returns ``(bytes, declared mime type or None)``.
    """
    declared = None
    match = DATA_URI_PREFIX.match(image_data)
    if match:
        declared = match.group(1)
        image_data = image_data[match.end():]
    cleaned = NON_BASE64.sub("", image_data.replace("-", "+").replace("_", "/"))
    if len(cleaned) % 4 == 1:
        # a single trailing character holds less than one byte
        cleaned = cleaned[:-1]
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned), declared


class GalleryService:
    def __init__(self, storage: MongoStorage, uploads: LocalUploadStore):
        self.storage = storage
        self.collection = storage.carousel_images
        self.uploads = uploads

    def list(self) -> List[dict]:
        try:
            cursor = self.collection.find().sort([("order", ASCENDING), ("_id", ASCENDING)])
            return [serialize_doc(doc) for doc in cursor]
        except PyMongoError as e:
            raise InternalError(str(e))

    def add(self, title: Optional[str], image_url: Optional[str], alt: Optional[str], order) -> dict:
        """Metadata-only image; the caller supplies the URL."""
        if not image_url:
            raise ValidationError("CarouselImage validation failed: imageUrl: Path `imageUrl` is required.")
        doc = self._new_record(title, image_url, alt, order)
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            raise BadRequest(str(e))
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def upload_file(self, data: bytes, mime_type: Optional[str], original_filename: Optional[str],
                    title=None, alt=None, order=None) -> dict:
        check_image_type(mime_type)
        extension = os.path.splitext(original_filename or "")[1]
        return self.ingest(data, generate_filename(extension), title, alt, order)

    def upload_base64(self, title, image_data: Optional[str], alt=None, order=None) -> dict:
        if not image_data:
            raise BadRequest("No image data provided")
        data, declared_type = decode_image_data(image_data)
        check_image_type(declared_type or "image/png")
        # Stored as .png whatever the declared type
        return self.ingest(data, generate_filename(".png", prefix="base64-"), title, alt, order)

    def ingest(self, data: bytes, filename: str, title, alt, order) -> dict:
        """Write the file, then the record; roll the file back if the record fails."""
        doc = self._new_record(title, None, alt, order)
        image_url = self.uploads.save(filename, data)
        doc["imageUrl"] = image_url
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"❌ Saving image record failed, removing {image_url}: {e}")
            self.uploads.remove(image_url)
            raise BadRequest(str(e))
        doc["_id"] = result.inserted_id
        logger.info(f"Image uploaded: {image_url}")
        return serialize_doc(doc)

    def delete(self, image_id: str) -> None:
        """Delete the record and, for managed uploads, its file (best effort)."""
        object_id = parse_object_id(image_id)
        if object_id is None:
            return
        try:
            doc = self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            raise InternalError(str(e))
        if doc and self.uploads.owns(doc.get("imageUrl")):
            self.uploads.remove(doc["imageUrl"])

    def _new_record(self, title, image_url, alt, order) -> dict:
        return {
            "title": title or DEFAULT_TITLE,
            "imageUrl": image_url,
            "alt": alt or "",
            "order": coerce_order(order),
            "createdAt": datetime.now(timezone.utc),
        }
