from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from library_api.errors import Conflict, InvalidArgument
from library_api.extensions import get_service
from library_api.schemas import LoginRequest, RegisterRequest, UserOut, dump, parse
from library_api.utils.responses import json_error

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register", endpoint="auth_register")
def register():
    try:
        data = parse(RegisterRequest, request.get_json(silent=True))
        user = get_service("auth").register(data.email, data.password, data.name)
        return jsonify({"success": True, "data": dump(UserOut, user)}), 201
    except (InvalidArgument, Conflict) as e:
        return json_error(e.message, 400)


@auth_bp.post("/login", endpoint="auth_login")
def login():
    try:
        data = parse(LoginRequest, request.get_json(silent=True))
        token, user = get_service("auth").login(data.email, data.password)
        return jsonify({
            "success": True,
            "access_token": token,
            "user": dump(UserOut, user),
        })
    except InvalidArgument as e:
        return json_error(e.message, 400)
    except ValueError as e:
        return json_error(str(e), 401)


@auth_bp.get("/me", endpoint="auth_me")
@jwt_required()
def me():
    user = get_service("auth").users.get_by_id(get_jwt_identity())
    if not user:
        return json_error("User not found", 404)

    profile = dump(UserOut, user)
    profile["role"] = get_jwt().get("role", user.role)
    return jsonify({"success": True, "user": profile})
