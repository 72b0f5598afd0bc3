# storefront/client/api_client.py

from typing import Any, Callable, Dict, List, Optional
import logging

import httpx

from .storage import TOKEN_KEY, MemoryStorage, clear_auth

logger = logging.getLogger(__name__)

UNAUTHORIZED_STATUSES = (401, 403)


class ApiError(Exception):
    """Non-2xx response from the API, carrying the server's error message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class ApiClient:
    """
    Thin wrapper over the storefront HTTP API.

    Attaches the stored bearer token to every request and unwraps the
    ``{"success": true, "data": ...}`` envelope. A 401 or 403 response clears
    the stored auth state and notifies every ``on_unauthorized`` listener
    before the ApiError is raised.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.Client] = None,
        storage=None,
        api_prefix: str = "/api",
        timeout: float = 10.0,
    ):
        self.http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self.storage = storage if storage is not None else MemoryStorage()
        self.api_prefix = api_prefix
        self._unauthorized_listeners: List[Callable[[], None]] = []

    def on_unauthorized(self, listener: Callable[[], None]) -> None:
        self._unauthorized_listeners.append(listener)

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = token or self.storage.get(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict):
            return body.get("error") or body.get("message") or response.reason_phrase
        return response.reason_phrase

    def _handle_unauthorized(self) -> None:
        clear_auth(self.storage)
        for listener in list(self._unauthorized_listeners):
            listener()

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        url = f"{self.api_prefix}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = self.http.request(method, url, json=json, params=params, headers=self._headers(token))

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.debug(f"{method} {url} failed: {response.status_code} {message}")
            if response.status_code in UNAUTHORIZED_STATUSES:
                self._handle_unauthorized()
            raise ApiError(response.status_code, message)

        body = response.json()
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    # Auth
    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.request("POST", "/auth/login", json={"email": email, "password": password})

    def signup(self, email: str, password: str, first_name: str, last_name: str) -> Dict[str, Any]:
        return self.request(
            "POST",
            "/auth/signup",
            json={"email": email, "password": password, "firstName": first_name, "lastName": last_name},
        )

    def logout(self, token: Optional[str] = None) -> Any:
        """Revoke the stored token, or token if given."""
        return self.request("POST", "/auth/logout", token=token)

    def get_current_user(self) -> Dict[str, Any]:
        return self.request("GET", "/auth/profile")

    # Products
    def get_products(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
    ) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, "search": search, "category": category}
        if featured:
            params["featured"] = "true"
        return self.request("GET", "/products", params=params)

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/products/{product_id}")

    def get_featured_products(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return self.request("GET", "/products/featured", params={"limit": limit})

    def get_categories(self) -> List[str]:
        return self.request("GET", "/products/categories")

    # Cart
    def get_cart(self) -> Dict[str, Any]:
        return self.request("GET", "/cart")

    def add_to_cart(self, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        return self.request("POST", "/cart", json={"productId": product_id, "quantity": quantity})

    def update_cart_item(self, item_id: str, quantity: int) -> Dict[str, Any]:
        return self.request("PUT", f"/cart/{item_id}", json={"quantity": quantity})

    def remove_from_cart(self, item_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/cart/{item_id}")

    def clear_cart(self) -> Dict[str, Any]:
        return self.request("DELETE", "/cart")

    # Orders
    def get_orders(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.request("GET", "/orders", params={"status": status})

    def get_order(self, order_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/orders/{order_id}")

    def create_order(self, shipping_address: Dict[str, str], payment_method: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"shippingAddress": shipping_address}
        if payment_method:
            body["paymentMethod"] = payment_method
        return self.request("POST", "/orders", json=body)

    def cancel_order(self, order_id: str) -> Dict[str, Any]:
        return self.request("PUT", f"/orders/{order_id}/cancel")

    def close(self) -> None:
        self.http.close()
