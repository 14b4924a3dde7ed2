# client.py
"""
Client-side data layer for the Artistry API.

GET responses are cached by path. A successful POST/PATCH/DELETE drops the
cached entries of the resource it touched (plus resources whose derived
counters it changes), so the next read refetches. Nothing is retried: a
non-2xx response raises ApiError and the caller decides what to show.
"""
import json
import logging
import urllib.error
import urllib.request
from http.cookiejar import CookieJar
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# Writes to the key also change the cached reads listed here
RELATED_RESOURCES = {
    "/api/class-registrations": ("/api/classes",),
    "/api/workshop-bookings": ("/api/workshops",),
}


class ApiError(Exception):
    def __init__(self, status: int, message: str, details=None):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message
        self.details = details or []


class UrllibTransport:
    """HTTP transport over urllib with a cookie jar for the session cookie."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.opener = urllib.request.build_opener(urllib.request.HTTPCookieProcessor(CookieJar()))

    def request(self, method: str, path: str, body: Optional[bytes]) -> Tuple[int, bytes]:
        req = urllib.request.Request(
            self.base_url + path,
            data=body,
            method=method,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        try:
            with self.opener.open(req, timeout=self.timeout) as response:
                return response.status, response.read()
        except urllib.error.HTTPError as e:
            return e.code, e.read()


def resource_key(path: str) -> str:
    """'/api/orders/abc?x=1' -> '/api/orders'"""
    parts = path.split("?", 1)[0].strip("/").split("/")
    return "/" + "/".join(parts[:2])


class StorefrontClient:
    def __init__(self, base_url: str = "http://127.0.0.1:5000", transport=None):
        self.transport = transport or UrllibTransport(base_url)
        self.cache: Dict[str, Any] = {}

    # --- core ---
    def _send(self, method: str, path: str, data: Any = None) -> Any:
        body = json.dumps(data).encode("utf-8") if data is not None else None
        status, raw = self.transport.request(method, path, body)
        try:
            parsed = json.loads(raw) if raw else None
        except ValueError:
            # Proxies answer 502/504 with HTML
            if 200 <= status < 300:
                raise ApiError(status, "Response was not valid JSON")
            parsed = None
        if not 200 <= status < 300:
            error = parsed if isinstance(parsed, dict) else {}
            message = error.get("error") or f"Request failed with status {status}"
            logger.warning("%s %s failed: %s %s", method, path, status, message)
            raise ApiError(status, message, error.get("details"))
        return parsed

    def get(self, path: str, refresh: bool = False) -> Any:
        if not refresh and path in self.cache:
            return self.cache[path]
        data = self._send("GET", path)
        self.cache[path] = data
        return data

    def mutate(self, method: str, path: str, data: Any = None) -> Any:
        result = self._send(method, path, data)
        self.invalidate(path)
        return result

    def post(self, path: str, data: Any = None) -> Any:
        return self.mutate("POST", path, data)

    def patch(self, path: str, data: Any) -> Any:
        return self.mutate("PATCH", path, data)

    def delete(self, path: str) -> Any:
        return self.mutate("DELETE", path)

    def invalidate(self, path: str) -> None:
        key = resource_key(path)
        if key == "/api/auth":
            # Gated reads depend on who is logged in
            self.cache.clear()
            return
        prefixes = (key,) + RELATED_RESOURCES.get(key, ())
        for cached in list(self.cache):
            if any(cached == p or cached.startswith(p + "/") or cached.startswith(p + "?") for p in prefixes):
                del self.cache[cached]

    # --- auth ---
    def login(self, username: str, password: str) -> Dict[str, Any]:
        return self.post("/api/auth/login", {"username": username, "password": password})

    def register(self, username: str, password: str) -> Dict[str, Any]:
        return self.post("/api/auth/register", {"username": username, "password": password})

    def logout(self) -> None:
        self.post("/api/auth/logout")

    def me(self) -> Dict[str, Any]:
        return self._send("GET", "/api/auth/me")

    # --- storefront ---
    def products(self):
        return self.get("/api/products")

    def product(self, id: str):
        return self.get(f"/api/products/{id}")

    def place_order(self, order: Dict[str, Any]):
        return self.post("/api/orders", order)

    def order(self, id: str):
        return self.get(f"/api/orders/{id}")

    def classes(self):
        return self.get("/api/classes")

    def register_for_class(self, registration: Dict[str, Any]):
        return self.post("/api/class-registrations", registration)

    def workshops(self):
        return self.get("/api/workshops")

    def book_workshop(self, booking: Dict[str, Any]):
        return self.post("/api/workshop-bookings", booking)
