# auth.py
import logging
from functools import wraps

import bcrypt
from flask import Blueprint, jsonify, request, session

from .schemas import Credentials, Registration, parse
from .sessions import regenerate
from .storage import storage

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def hash_password(password):
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password, password_hash):
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def require_login(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not session.get("user_id"):
            return jsonify({"error": "Not authenticated"}), 401
        return view(*args, **kwargs)
    return wrapped


def require_admin(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not session.get("user_id") or not session.get("is_admin"):
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)
    return wrapped


def start_session(user):
    regenerate(session)
    session.clear()
    session["user_id"] = user.id
    session["username"] = user.username
    session["is_admin"] = bool(user.is_admin)


def user_payload(user):
    return {"id": user.id, "username": user.username, "isAdmin": bool(user.is_admin)}


@auth_bp.route("/register", methods=["POST"])
def register():
    data = parse(Registration, request.get_json(silent=True), "Registration")
    if storage.get_user_by_username(data["username"]):
        return jsonify({"error": "Username already taken"}), 409
    user = storage.create_user({
        "username": data["username"],
        "password": hash_password(data["password"]),
        "is_admin": False,
    })
    start_session(user)
    logger.info("Registered user %s", user.username)
    return jsonify(user_payload(user)), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not body.get("username") or not body.get("password"):
        return jsonify({"error": "Username and password are required"}), 400
    creds = parse(Credentials, body, "Login")

    user = storage.get_user_by_username(creds["username"])
    if not user or not check_password(creds["password"], user.password):
        logger.info("Failed login for %s", creds["username"])
        return jsonify({"error": "Invalid credentials"}), 401

    start_session(user)
    logger.info("User %s logged in", user.username)
    return jsonify(user_payload(user))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    session.clear()
    return jsonify({"success": True})


@auth_bp.route("/me")
def me():
    if not session.get("user_id"):
        return jsonify({"error": "Not authenticated"}), 401
    return jsonify({
        "userId": session["user_id"],
        "username": session.get("username"),
        "isAdmin": bool(session.get("is_admin")),
    })
