import pytest
from pydantic import ValidationError as SchemaError

from services.order_service.exceptions import ValidationError
from services.order_service.identifiers import Identifiers
from services.order_service.schemas import CustomerInfoIn, LineItemIn, OrderCreate
from services.order_service.service import (
    build_order,
    join_address,
    resolve_shipping,
    validate_order,
)

IDS = Identifiers(tracking_number="TRK12345678ABCD", order_number="ORD12345678")


def make_payload(**overrides):
    payload = {
        "items": [{"productRef": "p1", "quantity": 2, "unitPrice": 10}],
        "totalAmount": 20,
        "customerInfo": {"name": "Jane", "email": "jane@x.com"},
    }
    payload.update(overrides)
    return OrderCreate.model_validate(payload)


class TestJoinAddress:

    def test_skips_empty_parts(self):
        assert join_address("1 Main St", "", "NY", "10001") == "1 Main St, NY, 10001"

    def test_no_leading_or_trailing_separator(self):
        assert join_address("", "Springfield", "", "") == "Springfield"
        assert join_address("", "", "", "") == ""

    def test_whitespace_only_parts_are_empty(self):
        assert join_address("  ", "Albany ", None, "12207") == "Albany, 12207"


class TestValidateOrder:

    def test_missing_items(self):
        with pytest.raises(ValidationError) as exc:
            validate_order(make_payload(items=None))
        assert exc.value.message == "no items provided"
        assert "items" in exc.value.errors

    def test_empty_items(self):
        with pytest.raises(ValidationError, match="no items provided"):
            validate_order(make_payload(items=[]))

    def test_missing_email(self):
        with pytest.raises(ValidationError) as exc:
            validate_order(make_payload(customerInfo={"name": "Jane"}))
        assert exc.value.message == "customer name/email required"
        assert list(exc.value.errors) == ["customerInfo.email"]

    def test_blank_name(self):
        with pytest.raises(ValidationError) as exc:
            validate_order(make_payload(customerInfo={"name": "   ", "email": "jane@x.com"}))
        assert "customerInfo.name" in exc.value.errors

    def test_missing_customer_block(self):
        with pytest.raises(ValidationError) as exc:
            validate_order(make_payload(customerInfo=None))
        assert set(exc.value.errors) == {"customerInfo.name", "customerInfo.email"}

    def test_optional_fields_default_to_empty_strings(self):
        customer = validate_order(make_payload())
        assert customer.phone == ""
        assert customer.address == ""
        assert customer.city == ""
        assert customer.state == ""
        assert customer.zip_code == ""

    def test_values_are_trimmed(self):
        customer = validate_order(make_payload(customerInfo={
            "name": "  Jane Doe ",
            "email": "jane@x.com",
            "phone": " 555-0100 ",
        }))
        assert customer.name == "Jane Doe"
        assert customer.phone == "555-0100"


class TestSchema:

    def test_storefront_cart_aliases(self):
        item = LineItemIn.model_validate({"_id": "abc", "quantity": 1, "price": 4.5})
        assert item.product_ref == "abc"
        assert item.unit_price == 4.5

    def test_numeric_product_ref(self):
        assert LineItemIn.model_validate({"productRef": 7, "quantity": 1, "unitPrice": 1}).product_ref == "7"

    def test_rejects_non_positive_quantity(self):
        with pytest.raises(SchemaError):
            LineItemIn.model_validate({"productRef": "p1", "quantity": 0, "unitPrice": 1})

    def test_rejects_unknown_payment_status(self):
        with pytest.raises(SchemaError):
            make_payload(paymentStatus="refunded")

    def test_rejects_malformed_email(self):
        with pytest.raises(SchemaError):
            CustomerInfoIn.model_validate({"name": "Jane", "email": "not-an-email"})


class TestBuildOrder:

    def test_record_layout(self):
        data = make_payload(customerInfo={
            "name": "Jane",
            "email": "jane@x.com",
            "address": "1 Main St",
            "state": "NY",
            "zipCode": "10001",
        })
        order = build_order(data, validate_order(data), IDS, user_ref="u-1")

        assert order.tracking_number == "TRK12345678ABCD"
        assert order.order_number == "ORD12345678"
        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.total_price == 20.0
        assert order.user_ref == "u-1"
        assert order.address == "1 Main St, NY, 10001"
        assert order.customer_phone == ""
        assert order.phone_no == ""
        assert [(i.position, i.product_ref, i.quantity, i.unit_price) for i in order.items] == [
            (0, "p1", 2, 10.0)
        ]

    def test_caller_payment_status_is_kept(self):
        data = make_payload(paymentStatus="completed")
        order = build_order(data, validate_order(data), IDS)
        assert order.payment_status == "completed"

    def test_total_falls_back_to_line_sum(self):
        data = make_payload(
            totalAmount=None,
            items=[
                {"productRef": "p1", "quantity": 2, "unitPrice": 10},
                {"productRef": "p2", "quantity": 1, "unitPrice": 2.5},
            ],
        )
        order = build_order(data, validate_order(data), IDS)
        assert order.total_price == 22.5

    def test_line_order_is_preserved(self):
        data = make_payload(items=[
            {"productRef": "b", "quantity": 1, "unitPrice": 1},
            {"productRef": "a", "quantity": 1, "unitPrice": 1},
        ])
        order = build_order(data, validate_order(data), IDS)
        assert [i.product_ref for i in order.items] == ["b", "a"]


class TestResolveShipping:

    def test_explicit_shipping_wins(self):
        data = make_payload(shippingInfo={
            "country": "US", "postalCode": "10001", "city": "New York", "address": "1 Main St",
        })
        shipping = resolve_shipping(data.shipping_info, validate_order(data))
        assert shipping == {"country": "US", "postalCode": "10001", "city": "New York", "address": "1 Main St"}

    def test_derived_from_customer_address(self):
        data = make_payload(customerInfo={
            "name": "Jane", "email": "jane@x.com", "address": "1 Main St", "city": "Albany", "zipCode": "12207",
        })
        shipping = resolve_shipping(None, validate_order(data))
        assert shipping == {"country": "Unknown", "postalCode": "12207", "city": "Albany", "address": "1 Main St"}

    def test_none_without_address(self):
        data = make_payload()
        assert resolve_shipping(None, validate_order(data)) is None
