from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from backend.utils.db import isoformat

STATUSES = ("todo", "in-progress", "completed")
PRIORITIES = ("low", "medium", "high")

DEFAULT_STATUS = "todo"
DEFAULT_PRIORITY = "medium"

_MISSING = object()


@dataclass
class FieldError:
    field: str
    message: str
    value: object = None

    def to_dict(self):
        return {"field": self.field, "message": self.message, "value": self.value}


@dataclass
class Task:
    title: str
    user_id: str
    description: str = ""
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc):
        return cls(
            id=str(doc["_id"]),
            user_id=doc["user_id"],
            title=doc["title"],
            description=doc.get("description") or "",
            status=doc.get("status", DEFAULT_STATUS),
            priority=doc.get("priority", DEFAULT_PRIORITY),
            due_date=doc.get("due_date"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_doc(self):
        return {
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "due_date": self.due_date,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_json(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "dueDate": isoformat(self.due_date),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def is_overdue(self, now):
        return (
            self.due_date is not None
            and self.due_date < now
            and self.status != "completed"
        )


@dataclass
class TaskChanges:
    """Validated task fields. Only names listed in ``supplied`` were sent."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    supplied: set = field(default_factory=set)

    def as_updates(self):
        return {name: getattr(self, name) for name in sorted(self.supplied)}


def parse_due_date(value):
    """Parse an ISO-8601 date or datetime into a naive UTC datetime."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError("not an ISO-8601 string")
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=parsed.microsecond // 1000 * 1000)


def validate_task_payload(payload, partial=False):
    """Check a JSON task body field by field.

    Returns ``(changes, errors)``; ``errors`` lists every offending field so
    the caller can report them together. With ``partial`` every field is
    optional, but a supplied title must still be non-empty.
    """
    changes = TaskChanges()
    errors = []

    title = payload.get("title", _MISSING)
    if title is _MISSING:
        if not partial:
            errors.append(FieldError("title", "Title is required"))
    elif not isinstance(title, str) or not title.strip():
        message = "Title cannot be empty" if partial else "Title is required"
        errors.append(FieldError("title", message, title))
    else:
        changes.title = title.strip()
        changes.supplied.add("title")

    description = payload.get("description", _MISSING)
    if description is not _MISSING:
        if description is None:
            changes.description = ""
            changes.supplied.add("description")
        elif not isinstance(description, str):
            errors.append(FieldError("description", "Description must be a string", description))
        else:
            changes.description = description.strip()
            changes.supplied.add("description")

    status = payload.get("status", _MISSING)
    if status is not _MISSING:
        if status not in STATUSES:
            errors.append(
                FieldError("status", f"Status must be one of: {', '.join(STATUSES)}", status)
            )
        else:
            changes.status = status
            changes.supplied.add("status")

    priority = payload.get("priority", _MISSING)
    if priority is not _MISSING:
        if priority not in PRIORITIES:
            errors.append(
                FieldError("priority", f"Priority must be one of: {', '.join(PRIORITIES)}", priority)
            )
        else:
            changes.priority = priority
            changes.supplied.add("priority")

    due_date = payload.get("dueDate", _MISSING)
    if due_date is not _MISSING:
        if due_date is None:
            changes.due_date = None
            changes.supplied.add("due_date")
        else:
            try:
                changes.due_date = parse_due_date(due_date)
            except (TypeError, ValueError):
                errors.append(FieldError("dueDate", "Due date must be an ISO-8601 date", due_date))
            else:
                changes.supplied.add("due_date")

    return changes, errors
