"""Filter and sort criteria for task listings.

Request args are parsed into a :class:`TaskQuery` value object by pure
functions, and only then translated into a MongoDB filter and sort spec.
"""

import re
from dataclasses import dataclass
from typing import Optional

from pymongo import ASCENDING, DESCENDING

from backend.errors import ValidationError
from backend.models.task_model import FieldError

# API sort names -> stored field names
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "dueDate": "due_date",
    "title": "title",
    "status": "status",
    "priority": "priority",
}

DEFAULT_SORT = "createdAt"
DEFAULT_ORDER = "desc"


@dataclass(frozen=True)
class TaskQuery:
    status: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = DEFAULT_SORT
    order: str = DEFAULT_ORDER

    @property
    def ascending(self):
        return self.order == "asc"


def _filter_value(raw):
    if raw is None:
        return None
    raw = raw.strip()
    if not raw or raw == "all":
        return None
    return raw


def parse_task_query(args):
    """Build a TaskQuery from a mapping of query-string args."""
    sort_by = (args.get("sortBy") or DEFAULT_SORT).strip()
    if sort_by not in SORT_FIELDS:
        raise ValidationError(
            [FieldError("sortBy", f"sortBy must be one of: {', '.join(SORT_FIELDS)}", sort_by)]
        )
    order = "asc" if (args.get("order") or "").strip().lower() == "asc" else "desc"
    search = (args.get("search") or "").strip() or None

    return TaskQuery(
        status=_filter_value(args.get("status")),
        priority=_filter_value(args.get("priority")),
        search=search,
        sort_by=sort_by,
        order=order,
    )


def build_mongo_filter(owner_id, query):
    criteria = {"user_id": owner_id}
    if query.status:
        criteria["status"] = query.status
    if query.priority:
        criteria["priority"] = query.priority
    if query.search:
        # Escaped so the search text is matched literally.
        pattern = re.escape(query.search)
        criteria["$or"] = [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]
    return criteria


def build_mongo_sort(query):
    direction = ASCENDING if query.ascending else DESCENDING
    return [(SORT_FIELDS[query.sort_by], direction)]
