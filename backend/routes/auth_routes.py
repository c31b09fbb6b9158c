from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from backend.routes import json_body
from backend.services import auth_service
from backend.utils.db import get_db

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    payload = json_body()
    token, user = auth_service.register(
        get_db(), payload.get("name"), payload.get("email"), payload.get("password")
    )
    return jsonify(token=token, user=user), 201


@auth_bp.post("/login")
def login():
    payload = json_body()
    token, user = auth_service.login(get_db(), payload.get("email"), payload.get("password"))
    return jsonify(token=token, user=user), 200


@auth_bp.get("/me")
@jwt_required()
def me():
    user = auth_service.get_user(get_db(), get_jwt_identity())
    return jsonify(user), 200
