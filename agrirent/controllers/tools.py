from flask import Blueprint, jsonify, request

from ..exceptions import ValidationError
from ..models.payloads import ToolPayload
from ..services.tool_service import ToolService
from ..utils.decorators import current_user_id, login_required

bp = Blueprint("tools", __name__, url_prefix="/tools")


def _parse_bool_arg(name: str):
    """Read an optional 'true'/'false' query argument."""
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return None
    raw = raw.strip().lower()
    if raw in ("true", "1"):
        return True
    if raw in ("false", "0"):
        return False
    raise ValidationError(f"'{name}' must be true or false")


@bp.get("")
def list_tools():
    """Public catalogue with optional filters: available, category, location."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    tools = ToolService.filter_tools(
        available=_parse_bool_arg("available"),
        category=q.get("category") or None,
        location=q.get("location") or None,
    )
    return jsonify({"data": [t.to_dict() for t in tools]})


@bp.get("/<tool_id>")
def tool_detail(tool_id):
    """One tool plus the date ranges already held by active bookings."""
    tool = ToolService.get_tool(tool_id)
    data = tool.to_dict()
    data["booked_ranges"] = [
        {"start": s, "end": e} for (s, e) in ToolService.availability_calendar(tool.tool_id)
    ]
    return jsonify({"data": data})


@bp.post("")
@login_required
def create_tool():
    payload = ToolPayload.from_json(request.get_json(silent=True))
    tool = ToolService.create_tool(current_user_id(), payload)
    return jsonify({"data": tool.to_dict()}), 201


@bp.put("/<tool_id>")
@login_required
def update_tool(tool_id):
    """Partial update (e.g. toggling availability). Owner only."""
    payload = ToolPayload.from_json(request.get_json(silent=True), partial=True)
    tool = ToolService.update_tool(tool_id, current_user_id(), payload)
    return jsonify({"data": tool.to_dict()})
