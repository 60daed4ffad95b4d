"""
Tests for checkout: delivery fee, address validation and order placement.
"""

import pytest

from storefront.auth import CurrentUser
from storefront.domain.entities import CartOwner
from storefront.exceptions import (
    AuthenticationException,
    BackendUnavailableException,
    ValidationException,
)
from storefront.local_store import MOCK_ORDERS_KEY, cart_key
from storefront.models import Address, BillingAddress, CheckoutRequest

USER = CurrentUser(id="user-1", email="nimal@example.com")
OWNER = CartOwner.user("user-1")


def shipping(**overrides):
    data = dict(
        full_name="Nimal Perera",
        phone="0771234567",
        address_line_1="12 Temple Road",
        city="Kandy",
        postal_code="20000",
    )
    data.update(overrides)
    return Address(**data)


class TestDeliveryFee:
    def test_free_from_threshold(self, checkout_service):
        assert checkout_service.delivery_fee(15000) == 0
        assert checkout_service.delivery_fee(45000) == 0

    def test_charged_below_threshold(self, checkout_service):
        assert checkout_service.delivery_fee(14999) == 1500
        assert checkout_service.delivery_fee(0) == 1500


class TestValidateShipping:
    def test_complete_address(self, checkout_service):
        assert checkout_service.validate_shipping(shipping()) == {}

    def test_missing_fields(self, checkout_service):
        errors = checkout_service.validate_shipping(shipping(full_name="  ", postal_code=""))
        assert set(errors) == {"full_name", "postal_code"}

    def test_address_line_2_is_optional(self, checkout_service):
        assert checkout_service.validate_shipping(shipping(address_line_2="")) == {}


@pytest.mark.asyncio
class TestPlaceOrder:
    async def test_quote(self, checkout_service, cart_service):
        await cart_service.add_item(CartOwner.guest("s1"), "3", 1)
        quote = await checkout_service.quote(CartOwner.guest("s1"))
        assert quote.subtotal == 35000
        assert quote.delivery_fee == 0
        assert quote.total == 35000
        assert quote.item_count == 1

    async def test_places_remote_order_and_clears_cart(self, checkout_service, cart_service, cart_repo, order_repo):
        await cart_service.add_item(OWNER, "1", 1)

        response = await checkout_service.place_order(USER, CheckoutRequest(shipping_address=shipping()))

        assert response.is_mock is False
        assert response.subtotal == 45000
        assert response.delivery_fee == 0
        assert response.total_amount == 45000
        assert response.order_number in response.message
        assert response.message.endswith("total LKR 45,000")

        record = order_repo.records[0]
        assert record["id"] == response.order_id
        assert record["customer_email"] == "nimal@example.com"
        assert record["billing_address"] == record["shipping_address"]
        assert cart_repo.rows.get("user-1") is None

    async def test_separate_billing_address(self, checkout_service, cart_service, order_repo):
        await cart_service.add_item(OWNER, "1", 1)
        billing = BillingAddress(same_as_shipping=False, full_name="Accounts Dept", city="Colombo")

        await checkout_service.place_order(
            USER, CheckoutRequest(shipping_address=shipping(), billing_address=billing)
        )

        stored = order_repo.records[0]["billing_address"]
        assert stored["full_name"] == "Accounts Dept"
        assert "same_as_shipping" not in stored

    async def test_delivery_fee_below_threshold(self, checkout_service, cart_service):
        cart_service.default_item_price = 2500
        await cart_service.add_item(OWNER, "unknown-accessory", 1)

        response = await checkout_service.place_order(USER, CheckoutRequest(shipping_address=shipping()))

        assert response.subtotal == 2500
        assert response.delivery_fee == 1500
        assert response.total_amount == 4000

    async def test_falls_back_to_mock_order(self, checkout_service, cart_service, order_repo, store):
        await cart_service.add_item(OWNER, "2", 1)
        order_repo.failing = True

        response = await checkout_service.place_order(USER, CheckoutRequest(shipping_address=shipping()))

        assert response.is_mock is True
        assert response.order_id.startswith("mock-")
        mock_orders = store.get(MOCK_ORDERS_KEY)
        assert mock_orders[0]["total_amount"] == 125000

    async def test_cart_clear_failure_is_not_raised(self, checkout_service, cart_service, cart_repo):
        await cart_service.add_item(OWNER, "1", 1)

        async def failing_clear(user_id):
            raise BackendUnavailableException("clear_cart", "timeout")

        cart_repo.clear = failing_clear

        response = await checkout_service.place_order(USER, CheckoutRequest(shipping_address=shipping()))
        assert response.order_id

    async def test_mock_order_during_outage_empties_local_cart(
        self, checkout_service, cart_service, cart_repo, order_repo, store
    ):
        cart_repo.failing = True
        order_repo.failing = True
        await cart_service.add_item(OWNER, "2", 1)

        response = await checkout_service.place_order(USER, CheckoutRequest(shipping_address=shipping()))

        assert response.is_mock is True
        cart = await cart_service.get_cart(OWNER)
        assert cart.source == "local"
        assert cart.count == 0
        assert store.get(cart_key("user-1")) is None

    async def test_requires_user(self, checkout_service):
        with pytest.raises(AuthenticationException):
            await checkout_service.place_order(None, CheckoutRequest(shipping_address=shipping()))

    async def test_empty_cart(self, checkout_service):
        with pytest.raises(ValidationException) as exc_info:
            await checkout_service.place_order(USER, CheckoutRequest(shipping_address=shipping()))
        assert exc_info.value.field_name == "cart"

    async def test_incomplete_address(self, checkout_service, cart_service):
        await cart_service.add_item(OWNER, "1", 1)

        with pytest.raises(ValidationException) as exc_info:
            await checkout_service.place_order(
                USER, CheckoutRequest(shipping_address=shipping(phone="", city=""))
            )

        assert exc_info.value.details["fields"] == {
            "phone": "Phone number is required",
            "city": "City is required",
        }
