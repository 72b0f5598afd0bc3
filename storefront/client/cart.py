# storefront/client/cart.py

from typing import Any, Dict, Optional
import logging

import httpx

from .api_client import ApiClient, ApiError
from .session import AuthSession

logger = logging.getLogger(__name__)


def _error_message(error: Exception) -> str:
    return error.message if isinstance(error, ApiError) else str(error) or type(error).__name__


class AuthRequiredError(Exception):
    def __init__(self, message: str = "Please login to add items to cart"):
        self.message = message
        super().__init__(message)


class CartSession:
    """
    Client-side view of the signed-in user's cart.

    Follows the auth session: the cart is fetched when a user signs in and
    dropped when they sign out. Mutations replace the local cart with the
    server's response.
    """

    def __init__(self, api: ApiClient, auth: AuthSession):
        self.api = api
        self.auth = auth
        self.cart: Optional[Dict[str, Any]] = None
        self.is_loading = False
        self.error: Optional[str] = None
        auth.subscribe(self._on_user_changed)

    def _on_user_changed(self, user) -> None:
        if user is None:
            self.cart = None
            self.error = None
        else:
            self.refresh_cart()

    @property
    def total_items(self) -> int:
        return self.cart["totalItems"] if self.cart else 0

    def _mutate(self, call, *args) -> Dict[str, Any]:
        self.is_loading = True
        self.error = None
        try:
            self.cart = call(*args)
            return self.cart
        except (ApiError, httpx.HTTPError) as e:
            self.error = _error_message(e)
            raise
        finally:
            self.is_loading = False

    def refresh_cart(self) -> None:
        """Reload the cart; failures are recorded in ``error`` only."""
        if not self.auth.is_authenticated:
            return
        self.is_loading = True
        self.error = None
        try:
            self.cart = self.api.get_cart()
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"Failed to load cart: {e}")
            self.error = _error_message(e)
        finally:
            self.is_loading = False

    def add_to_cart(self, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        if not self.auth.is_authenticated:
            raise AuthRequiredError()
        return self._mutate(self.api.add_to_cart, product_id, quantity)

    def update_quantity(self, item_id: str, quantity: int) -> Optional[Dict[str, Any]]:
        if not self.auth.is_authenticated:
            return None
        if quantity <= 0:
            return self.remove_from_cart(item_id)
        return self._mutate(self.api.update_cart_item, item_id, quantity)

    def remove_from_cart(self, item_id: str) -> Optional[Dict[str, Any]]:
        if not self.auth.is_authenticated:
            return None
        return self._mutate(self.api.remove_from_cart, item_id)

    def clear_cart(self) -> None:
        if not self.auth.is_authenticated:
            return
        self._mutate(self.api.clear_cart)
        self.cart = None
