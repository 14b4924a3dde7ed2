# models.py
import uuid
from datetime import datetime, timezone

from pydantic.alias_generators import to_camel

from .core import db


def new_id():
    return uuid.uuid4().hex


def utcnow():
    return datetime.now(timezone.utc)


class SerializerMixin:
    """Row -> camelCase JSON dict."""

    hidden_fields = ()

    def to_dict(self):
        data = {}
        for column in self.__table__.columns:
            if column.key in self.hidden_fields:
                continue
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                # Stored as UTC; SQLite drops the offset
                if value.tzinfo is None:
                    value = value.replace(tzinfo=timezone.utc)
                value = value.astimezone(timezone.utc).isoformat()
            data[to_camel(column.key)] = value
        return data


class User(SerializerMixin, db.Model):
    __tablename__ = "users"
    hidden_fields = ("password",)

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    username = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)  # bcrypt hash
    is_admin = db.Column(db.Boolean, nullable=False, default=False)


class Product(SerializerMixin, db.Model):
    __tablename__ = "products"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.String(20), nullable=False)  # decimal text, e.g. "89.00"
    discount_percent = db.Column(db.Integer, default=0)
    category = db.Column(db.String(40), nullable=False)  # decor, gifts, paintings, crafts
    image_url = db.Column(db.Text, nullable=True)
    additional_images = db.Column(db.JSON, nullable=True)
    video_url = db.Column(db.Text, nullable=True)
    stock_quantity = db.Column(db.Integer, default=0)
    stock_status = db.Column(db.String(20), default="available")
    is_enabled = db.Column(db.Boolean, default=True)
    is_customizable = db.Column(db.Boolean, default=False)
    featured = db.Column(db.Boolean, default=False)


class Order(SerializerMixin, db.Model):
    __tablename__ = "orders"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_email = db.Column(db.String(200), nullable=False)
    customer_phone = db.Column(db.String(40), nullable=True)
    shipping_address = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), default="new")
    total_amount = db.Column(db.String(20), nullable=False)
    is_custom_order = db.Column(db.Boolean, default=False)
    custom_order_details = db.Column(db.Text, nullable=True)
    payment_status = db.Column(db.String(20), default="pending")
    payment_intent_id = db.Column(db.String(120), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)


class OrderItem(SerializerMixin, db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    order_id = db.Column(db.String(32), db.ForeignKey("orders.id"), nullable=False, index=True)
    # Snapshot of the product at order time; no FK so deleting the product keeps the row
    product_id = db.Column(db.String(32), nullable=True)
    product_name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    price = db.Column(db.String(20), nullable=False)


class ArtClass(SerializerMixin, db.Model):
    __tablename__ = "art_classes"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    age_group = db.Column(db.String(20), nullable=False)  # kids, adults, all
    skill_level = db.Column(db.String(20), nullable=False)  # beginner, intermediate, advanced
    format = db.Column(db.String(20), nullable=False)  # online, offline, both
    duration = db.Column(db.String(60), nullable=False)
    schedule = db.Column(db.String(120), nullable=False)
    price = db.Column(db.String(20), nullable=False)
    max_students = db.Column(db.Integer, default=10)
    enrolled_count = db.Column(db.Integer, default=0)
    image_url = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True)


class ClassRegistration(SerializerMixin, db.Model):
    __tablename__ = "class_registrations"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    class_id = db.Column(db.String(32), nullable=False, index=True)
    student_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(40), nullable=True)
    parent_name = db.Column(db.String(120), nullable=True)
    payment_status = db.Column(db.String(20), default="pending")
    registered_at = db.Column(db.DateTime, default=utcnow)


class Workshop(SerializerMixin, db.Model):
    __tablename__ = "workshops"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.DateTime(timezone=True), nullable=False)
    time = db.Column(db.String(40), nullable=False)
    duration = db.Column(db.String(60), nullable=False)
    venue = db.Column(db.String(200), nullable=False)
    price = db.Column(db.String(20), nullable=False)
    max_seats = db.Column(db.Integer, nullable=False)
    booked_seats = db.Column(db.Integer, default=0)
    image_url = db.Column(db.Text, nullable=True)
    is_past = db.Column(db.Boolean, default=False)


class WorkshopBooking(SerializerMixin, db.Model):
    __tablename__ = "workshop_bookings"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    workshop_id = db.Column(db.String(32), nullable=False, index=True)
    attendee_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(40), nullable=True)
    number_of_seats = db.Column(db.Integer, default=1)
    payment_status = db.Column(db.String(20), default="pending")
    booked_at = db.Column(db.DateTime, default=utcnow)


class Testimonial(SerializerMixin, db.Model):
    __tablename__ = "testimonials"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    author_name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(60), nullable=True)
    content = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer, default=5)
    avatar_url = db.Column(db.Text, nullable=True)
    is_visible = db.Column(db.Boolean, default=True)


class Contact(SerializerMixin, db.Model):
    __tablename__ = "contacts"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(40), nullable=True)
    subject = db.Column(db.String(200), nullable=True)
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)


class GalleryItem(SerializerMixin, db.Model):
    __tablename__ = "gallery_items"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(60), nullable=False)
    image_url = db.Column(db.Text, nullable=False)
    is_featured = db.Column(db.Boolean, default=False)


class ProductLike(SerializerMixin, db.Model):
    __tablename__ = "product_likes"
    __table_args__ = (db.UniqueConstraint("user_id", "product_id", name="uq_product_likes_user_product"),)

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=False)
    product_id = db.Column(db.String(32), db.ForeignKey("products.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)


class SessionRecord(db.Model):
    __tablename__ = "sessions"

    sid = db.Column(db.String(64), primary_key=True)
    data = db.Column(db.JSON, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
