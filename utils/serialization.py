from typing import Optional

from bson import ObjectId


def serialize_doc(doc: dict) -> dict:
    """Convert a MongoDB document to a JSON-serializable dict with a string ``id``."""
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    doc.pop("__v", None)
    return doc


def parse_object_id(value: str) -> Optional[ObjectId]:
    """ObjectId for ``value``, or None when it is not a valid id."""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)
