"""
MongoDB helpers shared by the entity services.

- ObjectId <-> string conversion for JSON serialization
- id parsing that turns malformed ids into 404s
- pagination block used by every list endpoint
"""

import math
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId

from hirehub.core.errors import NotFoundError

# Fields that must never leave the API
PRIVATE_FIELDS = {
    "password_hash",
    "verification_token",
    "verification_token_expiry",
    "reset_password_token",
    "reset_password_expires",
}


def utcnow() -> datetime:
    return datetime.utcnow()


def _convert(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_convert(v) for v in value]
    return value


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict (`_id` becomes `id`)."""
    if doc is None:
        return None
    out = {k: _convert(v) for k, v in doc.items() if k not in PRIVATE_FIELDS}
    if "_id" in out:
        out["id"] = out.pop("_id")
    return out


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def parse_object_id(value: Any, entity: str = "Resource") -> ObjectId:
    """Parse a path/body id; anything that is not an ObjectId is simply not found."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(f"{entity} not found")


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
