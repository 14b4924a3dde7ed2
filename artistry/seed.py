# seed.py
import logging
from datetime import datetime, timezone

from .auth import hash_password
from .core import db
from .models import ArtClass, GalleryItem, Product, Testimonial, User, Workshop

logger = logging.getLogger(__name__)

PRODUCTS = [
    {"name": "Handcrafted Ceramic Vase", "description": "Handmade ceramic vase with a dried flower arrangement.",
     "price": "89.00", "category": "decor", "stock_quantity": 6, "is_customizable": True, "featured": True},
    {"name": "Macrame Wall Hanging", "description": "Cream and beige macrame wall hanging in natural cotton.",
     "price": "65.00", "category": "decor", "stock_quantity": 4, "is_customizable": True, "featured": True},
    {"name": "Hand-Painted Decorative Plates Set", "description": "Folk art plates painted in earthy colours.",
     "price": "125.00", "category": "crafts", "stock_quantity": 2, "stock_status": "limited", "featured": True},
    {"name": "Custom Gift Box", "description": "Personalised gift box with dried flowers and ribbons.",
     "price": "45.00", "category": "gifts", "stock_quantity": 10, "is_customizable": True},
    {"name": "Abstract Canvas Painting", "description": "Original abstract canvas in warm earth tones, signed.",
     "price": "250.00", "category": "paintings", "stock_quantity": 1},
]

CLASSES = [
    {"title": "Watercolor Basics for Kids", "description": "Colour mixing and brush techniques for ages 6-12.",
     "age_group": "kids", "skill_level": "beginner", "format": "offline", "duration": "1.5 hours",
     "schedule": "Saturdays 10:00 AM", "price": "35.00", "max_students": 12},
    {"title": "Acrylic Painting Masterclass", "description": "Layering, blending and composition for adults.",
     "age_group": "adults", "skill_level": "intermediate", "format": "both", "duration": "2 hours",
     "schedule": "Wednesdays 6:00 PM", "price": "55.00", "max_students": 10},
    {"title": "Sketching & Drawing Fundamentals", "description": "Foundations of sketching for absolute beginners.",
     "age_group": "all", "skill_level": "beginner", "format": "online", "duration": "1 hour",
     "schedule": "Mondays 7:00 PM", "price": "25.00", "max_students": 20},
]

WORKSHOPS = [
    {"title": "Resin Art Workshop", "description": "Coasters, jewellery and decorative pieces in resin.",
     "date": datetime(2026, 11, 22, tzinfo=timezone.utc), "time": "10:00 AM", "duration": "4 hours",
     "venue": "Artistry Studio, 123 Creative Lane", "price": "85.00", "max_seats": 12},
    {"title": "Macrame Plant Hangers", "description": "Make your own macrame plant hanger. Beginner friendly.",
     "date": datetime(2026, 12, 5, tzinfo=timezone.utc), "time": "3:00 PM", "duration": "2.5 hours",
     "venue": "Artistry Studio, 123 Creative Lane", "price": "55.00", "max_seats": 10},
]

TESTIMONIALS = [
    {"author_name": "Sarah Mitchell", "role": "student",
     "content": "My daughter looks forward to the watercolor class every Saturday."},
    {"author_name": "David Chen", "role": "customer",
     "content": "The custom gift box for my wife's birthday exceeded all expectations."},
]

GALLERY = [
    {"title": "Ceramic Vase Collection", "description": "Handcrafted vases with natural glazes",
     "category": "decor", "image_url": "/assets/gallery/ceramic-vases.png", "is_featured": True},
    {"title": "Folk Art Plates", "description": "Hand-painted plates with traditional patterns",
     "category": "crafts", "image_url": "/assets/gallery/folk-plates.png", "is_featured": True},
    {"title": "Workshop Creations", "description": "Art made during community workshops",
     "category": "crafts", "image_url": "/assets/gallery/workshop.png"},
]

SEED_TABLES = [
    (Product, PRODUCTS),
    (ArtClass, CLASSES),
    (Workshop, WORKSHOPS),
    (Testimonial, TESTIMONIALS),
    (GalleryItem, GALLERY),
]


def seed_if_empty():
    """Seed each demo table that has no rows yet; returns {table: rows added}."""
    counts = {}
    for model, rows in SEED_TABLES:
        if model.query.count() > 0:
            continue
        for row in rows:
            db.session.add(model(**row))
        counts[model.__tablename__] = len(rows)
    db.session.commit()
    if counts:
        logger.info("Seeded demo data: %s", counts)
    return counts


def ensure_admin(username, password):
    """Create the admin user or promote an existing one. Returns (user, created)."""
    user = User.query.filter_by(username=username).first()
    if user is None:
        user = User(username=username, password=hash_password(password), is_admin=True)
        db.session.add(user)
        db.session.commit()
        logger.info("Created admin user %s", username)
        return user, True
    user.is_admin = True
    user.password = hash_password(password)
    db.session.commit()
    logger.info("Promoted %s to admin", username)
    return user, False
