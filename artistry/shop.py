# shop.py
import logging

from flask import Blueprint, abort, jsonify, request, session

from .auth import require_admin, require_login
from .schemas import (
    ContactCreate, ContactUpdate, GalleryItemCreate, OrderCreate, OrderUpdate,
    ProductCreate, ProductUpdate, TestimonialCreate, parse, parse_update,
)
from .storage import storage

logger = logging.getLogger(__name__)

shop_bp = Blueprint("shop", __name__)


def order_with_items(order, items):
    data = order.to_dict()
    data["items"] = [item.to_dict() for item in items]
    return data


# --- Products ---
@shop_bp.route("/products")
def list_products():
    return jsonify([p.to_dict() for p in storage.get_products()])


@shop_bp.route("/products/<id>")
def get_product(id):
    product = storage.get_product(id)
    if not product:
        abort(404, "Product not found")
    return jsonify(product.to_dict())


@shop_bp.route("/products", methods=["POST"])
@require_admin
def create_product():
    data = parse(ProductCreate, request.get_json(silent=True), "Product")
    product = storage.create_product(data)
    logger.info("Created product %s (%s)", product.id, product.name)
    return jsonify(product.to_dict()), 201


@shop_bp.route("/products/<id>", methods=["PATCH"])
@require_admin
def update_product(id):
    changes = parse_update(ProductUpdate, request.get_json(silent=True), "Product")
    product = storage.update_product(id, changes)
    if not product:
        abort(404, "Product not found")
    return jsonify(product.to_dict())


@shop_bp.route("/products/<id>", methods=["DELETE"])
@require_admin
def delete_product(id):
    if not storage.delete_product(id):
        abort(404, "Product not found")
    logger.info("Deleted product %s", id)
    return "", 204


# --- Likes ---
@shop_bp.route("/products/<id>/likes")
def product_likes(id):
    if not storage.get_product(id):
        abort(404, "Product not found")
    user_id = session.get("user_id")
    return jsonify({
        "productId": id,
        "count": storage.get_product_likes(id),
        "liked": bool(user_id) and storage.has_liked(user_id, id),
    })


@shop_bp.route("/products/<id>/like", methods=["POST"])
@require_login
def like_product(id):
    if not storage.get_product(id):
        abort(404, "Product not found")
    storage.like_product(session["user_id"], id)
    return jsonify({"productId": id, "count": storage.get_product_likes(id), "liked": True})


@shop_bp.route("/products/<id>/like", methods=["DELETE"])
@require_login
def unlike_product(id):
    if not storage.get_product(id):
        abort(404, "Product not found")
    storage.unlike_product(session["user_id"], id)
    return jsonify({"productId": id, "count": storage.get_product_likes(id), "liked": False})


# --- Orders ---
@shop_bp.route("/orders")
@require_admin
def list_orders():
    return jsonify([o.to_dict() for o in storage.get_orders()])


@shop_bp.route("/orders/<id>")
def get_order(id):
    order = storage.get_order(id)
    if not order:
        abort(404, "Order not found")
    return jsonify(order_with_items(order, storage.get_order_items(id)))


@shop_bp.route("/orders", methods=["POST"])
def create_order():
    data = parse(OrderCreate, request.get_json(silent=True), "Order")
    items = data.pop("items")
    order, rows = storage.create_order_with_items(data, items)
    logger.info("Order %s placed by %s with %d item(s), total %s",
                order.id, order.customer_email, len(rows), order.total_amount)
    return jsonify(order_with_items(order, rows)), 201


@shop_bp.route("/orders/<id>", methods=["PATCH"])
@require_admin
def update_order(id):
    changes = parse_update(OrderUpdate, request.get_json(silent=True), "Order")
    order = storage.update_order(id, changes)
    if not order:
        abort(404, "Order not found")
    if "status" in changes:
        logger.info("Order %s status set to %s", id, order.status)
    return jsonify(order.to_dict())


# --- Testimonials ---
@shop_bp.route("/testimonials")
def list_testimonials():
    return jsonify([t.to_dict() for t in storage.get_testimonials()])


@shop_bp.route("/testimonials", methods=["POST"])
def create_testimonial():
    data = parse(TestimonialCreate, request.get_json(silent=True), "Testimonial")
    testimonial = storage.create_testimonial(data)
    return jsonify(testimonial.to_dict()), 201


# --- Contacts ---
@shop_bp.route("/contacts")
@require_admin
def list_contacts():
    return jsonify([c.to_dict() for c in storage.get_contacts()])


@shop_bp.route("/contacts", methods=["POST"])
def create_contact():
    data = parse(ContactCreate, request.get_json(silent=True), "Contact")
    contact = storage.create_contact(data)
    logger.info("Contact message %s from %s", contact.id, contact.email)
    return jsonify(contact.to_dict()), 201


@shop_bp.route("/contacts/<id>", methods=["PATCH"])
@require_admin
def update_contact(id):
    changes = parse_update(ContactUpdate, request.get_json(silent=True), "Contact")
    contact = storage.update_contact(id, changes)
    if not contact:
        abort(404, "Contact not found")
    return jsonify(contact.to_dict())


# --- Gallery ---
@shop_bp.route("/gallery")
def list_gallery():
    return jsonify([g.to_dict() for g in storage.get_gallery_items()])


@shop_bp.route("/gallery", methods=["POST"])
@require_admin
def create_gallery_item():
    data = parse(GalleryItemCreate, request.get_json(silent=True), "Gallery item")
    item = storage.create_gallery_item(data)
    return jsonify(item.to_dict()), 201


@shop_bp.route("/gallery/<id>", methods=["DELETE"])
@require_admin
def delete_gallery_item(id):
    if not storage.delete_gallery_item(id):
        abort(404, "Gallery item not found")
    return "", 204
