import pytest

from artistry.client import ApiError, StorefrontClient, resource_key

from .conftest import ADMIN


class FlaskTransport:
    """Sends client requests through the Flask test client and counts them."""

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def request(self, method, path, body):
        self.calls.append((method, path))
        resp = self.test_client.open(path, method=method, data=body, content_type="application/json")
        return resp.status_code, resp.get_data()


@pytest.fixture
def transport(app):
    return FlaskTransport(app.test_client())


@pytest.fixture
def api(transport):
    return StorefrontClient(transport=transport)


@pytest.fixture
def admin_api(app, admin_client):
    # admin_client has created the admin account; log in through a fresh client
    api = StorefrontClient(transport=FlaskTransport(app.test_client()))
    api.login(ADMIN["username"], ADMIN["password"])
    return api


@pytest.mark.parametrize("path,key", [
    ("/api/orders", "/api/orders"),
    ("/api/orders/abc", "/api/orders"),
    ("/api/products/abc/like", "/api/products"),
    ("/api/class-registrations?classId=1", "/api/class-registrations"),
])
def test_resource_key(path, key):
    assert resource_key(path) == key


def test_repeated_reads_come_from_cache(api, transport):
    assert api.products() == []
    assert api.products() == []
    assert transport.calls == [("GET", "/api/products")]


def test_refresh_bypasses_cache(api, transport):
    api.products()
    api.get("/api/products", refresh=True)
    assert len(transport.calls) == 2


def test_mutation_invalidates_the_resource(admin_api, product_payload):
    assert admin_api.products() == []
    created = admin_api.post("/api/products", product_payload)
    assert [p["id"] for p in admin_api.products()] == [created["id"]]


def test_booking_invalidates_cached_workshops(admin_api, workshop_payload):
    workshop = admin_api.post("/api/workshops", workshop_payload)
    assert admin_api.workshops()[0]["bookedSeats"] == 0

    admin_api.book_workshop({"workshopId": workshop["id"], "attendeeName": "Ritu", "email": "ritu@example.com",
                             "numberOfSeats": 2})
    assert admin_api.workshops()[0]["bookedSeats"] == 2


def test_other_resources_stay_cached(admin_api):
    admin_api.classes()
    admin_api.post("/api/testimonials", {"authorName": "Sarah", "content": "Wonderful class"})
    calls_before = len(admin_api.transport.calls)
    admin_api.classes()
    assert len(admin_api.transport.calls) == calls_before


def test_order_round_trip(api, order_payload):
    order_payload["items"] = [{"productName": "Vase", "quantity": 1, "price": "89.00"}]
    order = api.place_order(order_payload)
    assert api.order(order["id"])["items"][0]["productName"] == "Vase"


def test_errors_raise_api_error(api, order_payload):
    order_payload["customerEmail"] = "nope"
    with pytest.raises(ApiError) as info:
        api.place_order(order_payload)
    assert info.value.status == 400
    assert info.value.details[0]["path"] == "customerEmail"

    with pytest.raises(ApiError) as info:
        api.get("/api/orders")
    assert info.value.status == 401
    assert info.value.message == "Unauthorized"


def test_failed_read_is_not_cached(api, transport):
    with pytest.raises(ApiError):
        api.get("/api/orders")
    with pytest.raises(ApiError):
        api.get("/api/orders")
    assert len(transport.calls) == 2


def test_logout_clears_the_cache(admin_api):
    admin_api.get("/api/orders")
    admin_api.logout()
    assert admin_api.cache == {}
    with pytest.raises(ApiError):
        admin_api.me()


class StubTransport:
    def __init__(self, status, raw):
        self.status = status
        self.raw = raw

    def request(self, method, path, body):
        return self.status, self.raw


def test_non_json_error_page_raises_api_error():
    api = StorefrontClient(transport=StubTransport(502, b"<html><body>Bad Gateway</body></html>"))
    with pytest.raises(ApiError) as info:
        api.products()
    assert info.value.status == 502
    assert info.value.message == "Request failed with status 502"
