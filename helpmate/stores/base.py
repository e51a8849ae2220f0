# helpmate/stores/base.py
import logging
from contextlib import contextmanager
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError
from helpmate.errors import Unavailable

logger = logging.getLogger(__name__)


def to_object_id(value) -> Optional[ObjectId]:
    """Parse a client supplied id; anything that is not an ObjectId resolves to None."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


@contextmanager
def storage_errors(operation: str):
    try:
        yield
    except PyMongoError as exc:
        logger.exception("Storage failure during %s", operation)
        raise Unavailable() from exc
