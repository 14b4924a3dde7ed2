# studio.py
"""Art classes, workshops and the registrations/bookings that fill them."""
import logging

from flask import Blueprint, abort, jsonify, request

from .auth import require_admin
from .schemas import (
    ArtClassCreate, ArtClassUpdate, ClassRegistrationCreate, WorkshopBookingCreate,
    WorkshopCreate, WorkshopUpdate, parse, parse_update,
)
from .storage import storage

logger = logging.getLogger(__name__)

studio_bp = Blueprint("studio", __name__)


# --- Art classes ---
@studio_bp.route("/classes")
def list_classes():
    return jsonify([c.to_dict() for c in storage.get_classes()])


@studio_bp.route("/classes/<id>")
def get_class(id):
    art_class = storage.get_class(id)
    if not art_class:
        abort(404, "Class not found")
    return jsonify(art_class.to_dict())


@studio_bp.route("/classes", methods=["POST"])
@require_admin
def create_class():
    data = parse(ArtClassCreate, request.get_json(silent=True), "Class")
    art_class = storage.create_class(data)
    return jsonify(art_class.to_dict()), 201


@studio_bp.route("/classes/<id>", methods=["PATCH"])
@require_admin
def update_class(id):
    changes = parse_update(ArtClassUpdate, request.get_json(silent=True), "Class")
    art_class = storage.update_class(id, changes)
    if not art_class:
        abort(404, "Class not found")
    return jsonify(art_class.to_dict())


@studio_bp.route("/classes/<id>", methods=["DELETE"])
@require_admin
def delete_class(id):
    if not storage.delete_class(id):
        abort(404, "Class not found")
    return "", 204


# --- Class registrations ---
@studio_bp.route("/class-registrations")
@require_admin
def list_class_registrations():
    class_id = request.args.get("classId")
    return jsonify([r.to_dict() for r in storage.get_class_registrations(class_id)])


@studio_bp.route("/class-registrations", methods=["POST"])
def create_class_registration():
    data = parse(ClassRegistrationCreate, request.get_json(silent=True), "Registration")
    registration = storage.create_class_registration(data)
    logger.info("Registration %s for class %s", registration.id, registration.class_id)
    return jsonify(registration.to_dict()), 201


# --- Workshops ---
@studio_bp.route("/workshops")
def list_workshops():
    return jsonify([w.to_dict() for w in storage.get_workshops()])


@studio_bp.route("/workshops/<id>")
def get_workshop(id):
    workshop = storage.get_workshop(id)
    if not workshop:
        abort(404, "Workshop not found")
    return jsonify(workshop.to_dict())


@studio_bp.route("/workshops", methods=["POST"])
@require_admin
def create_workshop():
    data = parse(WorkshopCreate, request.get_json(silent=True), "Workshop")
    workshop = storage.create_workshop(data)
    return jsonify(workshop.to_dict()), 201


@studio_bp.route("/workshops/<id>", methods=["PATCH"])
@require_admin
def update_workshop(id):
    changes = parse_update(WorkshopUpdate, request.get_json(silent=True), "Workshop")
    workshop = storage.update_workshop(id, changes)
    if not workshop:
        abort(404, "Workshop not found")
    return jsonify(workshop.to_dict())


@studio_bp.route("/workshops/<id>", methods=["DELETE"])
@require_admin
def delete_workshop(id):
    if not storage.delete_workshop(id):
        abort(404, "Workshop not found")
    return "", 204


@studio_bp.route("/workshops", methods=["DELETE"])
@require_admin
def clear_workshops():
    count = storage.delete_all_workshops()
    logger.info("Cleared %d workshop(s)", count)
    return jsonify({"success": True, "deleted": count})


# --- Workshop bookings ---
@studio_bp.route("/workshop-bookings")
@require_admin
def list_workshop_bookings():
    workshop_id = request.args.get("workshopId")
    return jsonify([b.to_dict() for b in storage.get_workshop_bookings(workshop_id)])


@studio_bp.route("/workshop-bookings", methods=["POST"])
def create_workshop_booking():
    data = parse(WorkshopBookingCreate, request.get_json(silent=True), "Booking")
    booking = storage.create_workshop_booking(data)
    logger.info("Booking %s for workshop %s (%d seat(s))",
                booking.id, booking.workshop_id, booking.number_of_seats)
    return jsonify(booking.to_dict()), 201
