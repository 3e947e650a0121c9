from flask import Blueprint, jsonify

from ..services.analytics_service import AnalyticsService
from ..utils.decorators import current_user_id, login_required

bp = Blueprint("owner", __name__, url_prefix="/owner")


@bp.get("/summary")
@login_required
def summary():
    """Tool count, bookings by status and earnings for the current owner."""
    return jsonify({"data": AnalyticsService.summary_for_owner(current_user_id())})
