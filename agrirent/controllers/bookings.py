from flask import Blueprint, jsonify, request

from ..models.payloads import BookingRequest, StatusUpdate
from ..services.booking_service import BookingService
from ..utils.decorators import current_user_id, login_required

bp = Blueprint("bookings", __name__, url_prefix="/bookings")


@bp.get("")
@login_required
def list_bookings():
    """Bookings the current user made or received, optionally filtered by ?status=."""
    status = (request.args.get("status") or "").strip() or None
    if status == "all":
        status = None
    items = BookingService.bookings_for_user(current_user_id(), status=status)
    return jsonify({"data": items})


@bp.get("/<booking_id>")
@login_required
def booking_detail(booking_id):
    booking = BookingService.get_booking(booking_id, current_user_id())
    return jsonify({"data": booking.to_dict()})


@bp.post("")
@login_required
def create_booking():
    """Book a tool for an inclusive date range; the booking starts as pending."""
    req = BookingRequest.from_json(request.get_json(silent=True))
    booking = BookingService.create_booking(
        tool_id=req.tool_id,
        renter_id=current_user_id(),
        start=req.start_date,
        end=req.end_date,
    )
    return jsonify({"data": booking.to_dict()}), 201


@bp.put("/<booking_id>")
@login_required
def update_booking(booking_id):
    """Change status (confirm, complete, cancel). Renter or tool owner only."""
    req = StatusUpdate.from_json(request.get_json(silent=True))
    booking = BookingService.update_status(booking_id, current_user_id(), req.status)
    return jsonify({"data": booking.to_dict()})
