from flask import Blueprint, jsonify, request, session

from ..services import common
from ..services.user_service import UserService
from ..utils.decorators import current_user_id, login_required
from ..exceptions import UserNotFoundError

bp = Blueprint("auth", __name__, url_prefix="/auth")


def _credentials():
    body = request.get_json(silent=True) or {}
    return str(body.get("username") or ""), str(body.get("password") or "")


@bp.post("/register")
def register():
    username, password = _credentials()
    uid = UserService.register(username, password)
    return jsonify({"data": {"id": uid, "username": username.strip()}}), 201


@bp.post("/login")
def login():
    username, password = _credentials()
    user = UserService.authenticate(username, password)

    session.clear()
    session["uid"] = user["user_id"]
    session["username"] = user["username"]
    return jsonify({"data": {"id": user["user_id"], "username": user["username"]}})


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"data": {"logged_out": True}})


@bp.get("/me")
@login_required
def me():
    user = common._store().get_user(current_user_id())
    if not user:
        # Session outlived the account (e.g. data reset)
        session.clear()
        raise UserNotFoundError()
    return jsonify({"data": {"id": user["user_id"], "username": user["username"]}})
