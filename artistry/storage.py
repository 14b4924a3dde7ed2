# storage.py
import logging

from flask import current_app
from sqlalchemy import func, text
from sqlalchemy.exc import IntegrityError

from .core import db
from .models import (
    ArtClass, ClassRegistration, Contact, GalleryItem, Order, OrderItem,
    Product, ProductLike, Testimonial, User, Workshop, WorkshopBooking,
)

logger = logging.getLogger(__name__)


class CapacityError(Exception):
    """Raised when a guarded seat increment would overfill a class or workshop."""


class DatabaseStorage:
    """Data access for every entity. Each write commits its own transaction."""

    # --- helpers ---
    def _create(self, model, data):
        row = model(**data)
        db.session.add(row)
        db.session.commit()
        return row

    def _update(self, model, id, changes):
        row = db.session.get(model, id)
        if row is None:
            return None
        for key, value in changes.items():
            setattr(row, key, value)
        db.session.commit()
        return row

    def _delete(self, model, id):
        row = db.session.get(model, id)
        if row is None:
            return False
        db.session.delete(row)
        db.session.commit()
        return True

    def _increment(self, model, id, column, amount, limit_column):
        """Raise a derived counter in one UPDATE; False if nothing matched."""
        counter = getattr(model, column)
        stmt = (
            db.update(model)
            .where(model.id == id)
            .values({column: func.coalesce(counter, 0) + amount})
            .execution_options(synchronize_session=False)
        )
        if current_app.config.get("ENFORCE_SEAT_CAPACITY"):
            stmt = stmt.where(func.coalesce(counter, 0) + amount <= getattr(model, limit_column))
        return db.session.execute(stmt).rowcount > 0

    def ping(self):
        db.session.execute(text("SELECT 1"))
        return True

    # --- Users ---
    def get_user(self, id):
        return db.session.get(User, id)

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def create_user(self, data):
        return self._create(User, data)

    # --- Products ---
    def get_products(self):
        return Product.query.order_by(Product.name).all()

    def get_product(self, id):
        return db.session.get(Product, id)

    def create_product(self, data):
        return self._create(Product, data)

    def update_product(self, id, changes):
        return self._update(Product, id, changes)

    def delete_product(self, id):
        product = db.session.get(Product, id)
        if product is None:
            return False
        # Likes go with the product; order items are snapshots and stay
        ProductLike.query.filter_by(product_id=id).delete()
        db.session.delete(product)
        db.session.commit()
        return True

    # --- Orders ---
    def get_orders(self):
        return Order.query.order_by(Order.created_at.desc()).all()

    def get_order(self, id):
        return db.session.get(Order, id)

    def create_order(self, data):
        return self._create(Order, data)

    def update_order(self, id, changes):
        return self._update(Order, id, changes)

    def create_order_item(self, data):
        return self._create(OrderItem, data)

    def get_order_items(self, order_id):
        return OrderItem.query.filter_by(order_id=order_id).all()

    def create_order_with_items(self, data, items):
        """Order header plus one snapshot row per item, committed together."""
        order = Order(**data)
        db.session.add(order)
        db.session.flush()
        rows = []
        for item in items:
            row = OrderItem(order_id=order.id, **item)
            db.session.add(row)
            rows.append(row)
        db.session.commit()
        return order, rows

    # --- Art classes ---
    def get_classes(self):
        return ArtClass.query.order_by(ArtClass.title).all()

    def get_class(self, id):
        return db.session.get(ArtClass, id)

    def create_class(self, data):
        return self._create(ArtClass, data)

    def update_class(self, id, changes):
        return self._update(ArtClass, id, changes)

    def delete_class(self, id):
        return self._delete(ArtClass, id)

    # --- Class registrations ---
    def get_class_registrations(self, class_id=None):
        query = ClassRegistration.query
        if class_id:
            query = query.filter_by(class_id=class_id)
        return query.order_by(ClassRegistration.registered_at.desc()).all()

    def create_class_registration(self, data):
        registration = ClassRegistration(**data)
        db.session.add(registration)
        db.session.flush()
        if not self._increment(ArtClass, registration.class_id, "enrolled_count", 1, "max_students"):
            if db.session.get(ArtClass, registration.class_id) is None:
                logger.warning("Registration %s references missing class %s", registration.id, registration.class_id)
            else:
                db.session.rollback()
                raise CapacityError("Class is full")
        db.session.commit()
        return registration

    # --- Workshops ---
    def get_workshops(self):
        return Workshop.query.order_by(Workshop.date.desc()).all()

    def get_workshop(self, id):
        return db.session.get(Workshop, id)

    def create_workshop(self, data):
        return self._create(Workshop, data)

    def update_workshop(self, id, changes):
        return self._update(Workshop, id, changes)

    def delete_workshop(self, id):
        return self._delete(Workshop, id)

    def delete_all_workshops(self):
        count = Workshop.query.delete()
        db.session.commit()
        return count

    # --- Workshop bookings ---
    def get_workshop_bookings(self, workshop_id=None):
        query = WorkshopBooking.query
        if workshop_id:
            query = query.filter_by(workshop_id=workshop_id)
        return query.order_by(WorkshopBooking.booked_at.desc()).all()

    def create_workshop_booking(self, data):
        booking = WorkshopBooking(**data)
        db.session.add(booking)
        db.session.flush()
        seats = booking.number_of_seats or 1
        if not self._increment(Workshop, booking.workshop_id, "booked_seats", seats, "max_seats"):
            if db.session.get(Workshop, booking.workshop_id) is None:
                logger.warning("Booking %s references missing workshop %s", booking.id, booking.workshop_id)
            else:
                db.session.rollback()
                raise CapacityError("Not enough seats left")
        db.session.commit()
        return booking

    # --- Testimonials ---
    def get_testimonials(self):
        return Testimonial.query.all()

    def create_testimonial(self, data):
        return self._create(Testimonial, data)

    # --- Contacts ---
    def get_contacts(self):
        return Contact.query.order_by(Contact.created_at.desc()).all()

    def create_contact(self, data):
        return self._create(Contact, data)

    def update_contact(self, id, changes):
        return self._update(Contact, id, changes)

    # --- Gallery ---
    def get_gallery_items(self):
        return GalleryItem.query.all()

    def create_gallery_item(self, data):
        return self._create(GalleryItem, data)

    def delete_gallery_item(self, id):
        return self._delete(GalleryItem, id)

    # --- Likes ---
    def get_product_likes(self, product_id):
        return ProductLike.query.filter_by(product_id=product_id).count()

    def has_liked(self, user_id, product_id):
        return ProductLike.query.filter_by(user_id=user_id, product_id=product_id).first() is not None

    def like_product(self, user_id, product_id):
        like = ProductLike.query.filter_by(user_id=user_id, product_id=product_id).first()
        if like is not None:
            return like
        like = ProductLike(user_id=user_id, product_id=product_id)
        db.session.add(like)
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent like from the same user
            db.session.rollback()
            like = ProductLike.query.filter_by(user_id=user_id, product_id=product_id).first()
        return like

    def unlike_product(self, user_id, product_id):
        removed = ProductLike.query.filter_by(user_id=user_id, product_id=product_id).delete()
        db.session.commit()
        return removed > 0


storage = DatabaseStorage()
