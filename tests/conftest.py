import pytest

from artistry import create_app, db
from artistry.config import TestingConfig
from artistry.seed import ensure_admin

ADMIN = {"username": "maya", "password": "studio-secret"}


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    with app.app_context():
        ensure_admin(ADMIN["username"], ADMIN["password"])
    c = app.test_client()
    resp = c.post("/api/auth/login", json=ADMIN)
    assert resp.status_code == 200
    return c


@pytest.fixture
def user_client(app):
    c = app.test_client()
    resp = c.post("/api/auth/register", json={"username": "priya", "password": "painting123"})
    assert resp.status_code == 201
    return c


@pytest.fixture
def product_payload():
    return {
        "name": "Handcrafted Ceramic Vase",
        "description": "Handmade vase with dried flowers.",
        "price": "89.00",
        "discountPercent": 10,
        "category": "decor",
        "imageUrl": "/assets/vase.png",
        "additionalImages": ["/assets/vase-2.png", "/assets/vase-3.png"],
        "videoUrl": None,
        "stockQuantity": 5,
        "stockStatus": "limited",
        "isEnabled": True,
        "isCustomizable": True,
        "featured": False,
    }


@pytest.fixture
def class_payload():
    return {
        "title": "Watercolor Basics",
        "description": "Colour mixing for beginners.",
        "ageGroup": "kids",
        "skillLevel": "beginner",
        "format": "offline",
        "duration": "1.5 hours",
        "schedule": "Saturdays 10:00 AM",
        "price": "35.00",
        "maxStudents": 10,
    }


@pytest.fixture
def workshop_payload():
    return {
        "title": "Resin Art Workshop",
        "description": "Coasters and jewellery in resin.",
        "date": "2026-11-22T10:00:00Z",
        "time": "10:00 AM",
        "duration": "4 hours",
        "venue": "Artistry Studio",
        "price": "85.00",
        "maxSeats": 12,
    }


@pytest.fixture
def order_payload():
    return {
        "customerName": "Ananya Rao",
        "customerEmail": "ananya@example.com",
        "customerPhone": "+91 98765 43210",
        "shippingAddress": "12 MG Road, Bengaluru",
        "totalAmount": "243.00",
        "items": [],
    }
