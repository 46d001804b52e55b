"""
Firestore helpers shared by every service.

NOTE: For firebase_admin SDK, we use positional arguments in where() which
still work. The deprecation warning is just a warning.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, TypeVar
from firebase_admin import firestore
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIMESTAMP_FIELDS = ("created_at", "updated_at")


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore equality queries.
    
    Usage:
        query = where_filter(collection, "district", "==", "Ranchi")
        query = where_filter(query, "status", "==", "submitted")
    """
    return query.where(field_path, op_string, value)


def doc_to_dict(doc) -> Optional[Dict]:
    """
    Convert a Firestore snapshot to a plain dict with its id.
    
    Returns None for a missing document. Firestore timestamps come back as
    datetime subclasses; anything else with to_datetime() is converted.
    """
    if doc is None or not doc.exists:
        return None

    data = doc.to_dict() or {}
    data["id"] = doc.id

    for field in TIMESTAMP_FIELDS:
        value = data.get(field)
        if value is None or isinstance(value, datetime):
            continue
        if hasattr(value, "to_datetime"):
            data[field] = value.to_datetime()
        else:
            logger.warning(f"Unknown {field} type on {doc.id}: {type(value)}")
            data[field] = None

    return data


def run_transaction(db, callback: Callable[..., T]) -> T:
    """
    Run callback(transaction) inside a Firestore transaction.
    
    All reads in the callback must go through the transaction and happen
    before any write. Either every write commits or none does.
    """
    transaction = db.transaction()

    @firestore.transactional
    def _run(txn):
        return callback(txn)

    return _run(transaction)


def sort_newest_first(rows: List[Dict]) -> List[Dict]:
    """Sort by created_at descending. Rows without a timestamp go last."""
    oldest = datetime.min.replace(tzinfo=timezone.utc)
    rows.sort(key=lambda x: x.get("created_at") or oldest, reverse=True)
    return rows
