from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from backend.routes import json_body
from backend.services import task_service
from backend.services.task_query import parse_task_query
from backend.utils.db import get_db


tasks_bp = Blueprint("tasks", __name__)


@tasks_bp.get("")
@jwt_required()
def list_tasks():
    user_id = get_jwt_identity()
    query = parse_task_query(request.args)
    tasks = task_service.list_tasks(get_db(), user_id, query)
    return jsonify([t.to_json() for t in tasks]), 200


@tasks_bp.get("/stats/summary")
@jwt_required()
def stats_summary():
    return jsonify(task_service.task_stats(get_db(), get_jwt_identity())), 200


@tasks_bp.get("/<task_id>")
@jwt_required()
def get_task(task_id):
    task = task_service.get_task(get_db(), get_jwt_identity(), task_id)
    return jsonify(task.to_json()), 200


@tasks_bp.post("")
@jwt_required()
def create_task():
    task = task_service.create_task(get_db(), get_jwt_identity(), json_body())
    return jsonify(task.to_json()), 201


@tasks_bp.put("/<task_id>")
@jwt_required()
def update_task(task_id):
    task = task_service.update_task(get_db(), get_jwt_identity(), task_id, json_body())
    return jsonify(task.to_json()), 200


@tasks_bp.delete("/<task_id>")
@jwt_required()
def delete_task(task_id):
    task_service.delete_task(get_db(), get_jwt_identity(), task_id)
    return jsonify(message="Task deleted successfully"), 200
