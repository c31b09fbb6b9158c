"""Owner-scoped task operations.

Every read and write carries the owner's id in its MongoDB filter, so a task
is only reachable by the user who created it.
"""

from datetime import timedelta

from flask import current_app
from pymongo import ReturnDocument

from backend.errors import NotFound, ValidationError
from backend.models.task_model import PRIORITIES, STATUSES, Task, validate_task_payload
from backend.services.task_query import TaskQuery, build_mongo_filter, build_mongo_sort
from backend.utils.db import to_object_id, utcnow


def _scope(owner_id, task_id):
    oid = to_object_id(task_id)
    if oid is None:
        raise NotFound("Task not found")
    return {"_id": oid, "user_id": owner_id}


def list_tasks(db, owner_id, query=None):
    query = query or TaskQuery()
    cursor = db.tasks.find(build_mongo_filter(owner_id, query)).sort(build_mongo_sort(query))
    return [Task.from_doc(doc) for doc in cursor]


def get_task(db, owner_id, task_id):
    doc = db.tasks.find_one(_scope(owner_id, task_id))
    if doc is None:
        raise NotFound("Task not found")
    return Task.from_doc(doc)


def create_task(db, owner_id, payload):
    changes, errors = validate_task_payload(payload, partial=False)
    if errors:
        raise ValidationError(errors)

    now = utcnow()
    task = Task(title=changes.title, user_id=owner_id, created_at=now, updated_at=now)
    for name, value in changes.as_updates().items():
        setattr(task, name, value)

    result = db.tasks.insert_one(task.to_doc())
    task.id = str(result.inserted_id)
    current_app.logger.info("Task %s created by user %s", task.id, owner_id)
    return task


def update_task(db, owner_id, task_id, payload):
    changes, errors = validate_task_payload(payload, partial=True)
    if errors:
        raise ValidationError(errors)

    scope = _scope(owner_id, task_id)
    current = db.tasks.find_one(scope, {"updated_at": 1})
    if current is None:
        raise NotFound("Task not found")

    updates = changes.as_updates()
    updates["updated_at"] = _next_timestamp(current.get("updated_at"))

    doc = db.tasks.find_one_and_update(
        scope,
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise NotFound("Task not found")
    current_app.logger.info(
        "Task %s updated by user %s (%s)", task_id, owner_id, ", ".join(sorted(changes.supplied)) or "touch"
    )
    return Task.from_doc(doc)


def _next_timestamp(previous):
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(milliseconds=1)
    return now


def delete_task(db, owner_id, task_id):
    doc = db.tasks.find_one_and_delete(_scope(owner_id, task_id))
    if doc is None:
        raise NotFound("Task not found")
    current_app.logger.info("Task %s deleted by user %s", task_id, owner_id)
    return Task.from_doc(doc)


def compute_stats(tasks, now):
    """Summarize an already-loaded task list."""
    by_status = {status: 0 for status in STATUSES}
    by_priority = {priority: 0 for priority in PRIORITIES}
    overdue = 0
    for task in tasks:
        if task.status in by_status:
            by_status[task.status] += 1
        if task.priority in by_priority:
            by_priority[task.priority] += 1
        if task.is_overdue(now):
            overdue += 1

    return {
        "total": len(tasks),
        "byStatus": {
            "todo": by_status["todo"],
            "inProgress": by_status["in-progress"],
            "completed": by_status["completed"],
        },
        "byPriority": by_priority,
        "overdue": overdue,
    }


def task_stats(db, owner_id, now=None):
    tasks = [Task.from_doc(doc) for doc in db.tasks.find({"user_id": owner_id})]
    return compute_stats(tasks, now or utcnow())
