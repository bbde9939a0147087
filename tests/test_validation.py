from typing import Literal, Optional

import pytest

from commerce_bridge.core.exceptions import ValidationError
from commerce_bridge.validation import RequestModel, validate
from commerce_bridge.validation import schemas
from commerce_bridge.validation.base import Id
from commerce_bridge.validation.schemas import PerPage


def test_valid_input_passes():
    request = validate(
        {"data": {"name": "Hoodie", "regular_price": "19.99", "type": "simple"}},
        schemas.CreateProductRequest,
    )
    assert request.data.name == "Hoodie"


def test_missing_required_field_names_the_field():
    with pytest.raises(ValidationError) as exc:
        validate({"data": {"regular_price": "19.99"}}, schemas.CreateProductRequest)

    assert "data.name: is required" in exc.value.issues
    assert "data.name" in exc.value.details


def test_all_violations_are_collected():
    class Request(RequestModel):
        id: Id
        status: Optional[Literal["draft", "publish"]] = None
        per_page: Optional[PerPage] = None

    with pytest.raises(ValidationError) as exc:
        validate({"id": 0, "status": "archived", "per_page": 500}, Request)

    assert [issue.split(":")[0] for issue in exc.value.issues] == ["id", "status", "per_page"]
    assert exc.value.details == ", ".join(exc.value.issues)
    assert exc.value.message.startswith("Validation failed")


def test_unknown_fields_are_ignored():
    validate({"id": 5, "unexpected": object()}, schemas.IdRequest)


def test_boolean_is_not_an_integer():
    with pytest.raises(ValidationError) as exc:
        validate({"id": True}, schemas.IdRequest)
    assert len(exc.value.issues) == 1
    assert exc.value.issues[0].startswith("id: ")


def test_numeric_strings_are_not_coerced():
    with pytest.raises(ValidationError):
        validate({"id": "5"}, schemas.IdRequest)


def test_none_counts_as_absent():
    validate({"id": 3, "force": None}, schemas.DeleteRequest)
    with pytest.raises(ValidationError) as exc:
        validate({"id": None}, schemas.IdRequest)
    assert exc.value.issues == ["id: is required"]


def test_nested_array_items_use_indexed_paths():
    with pytest.raises(ValidationError) as exc:
        validate({"product_id": 1, "term_ids": [3, -1]}, schemas.AssignTermsRequest)
    assert exc.value.issues[0].startswith("term_ids.1: ")


def test_nested_object_paths():
    order = {"data": {"line_items": [{"product_id": 4, "quantity": 0}]}}
    with pytest.raises(ValidationError) as exc:
        validate(order, schemas.CreateOrderRequest)
    assert exc.value.issues[0].startswith("data.line_items.0.quantity: ")


def test_update_payload_fields_are_optional():
    validate({"id": 7, "data": {"regular_price": "5.00"}}, schemas.UpdateProductRequest)


def test_pattern_must_match_whole_string():
    with pytest.raises(ValidationError) as exc:
        validate({"date_min": "2024-01-01x", "date_max": "2024-02-01"}, schemas.RevenueByDateRequest)
    assert exc.value.issues[0].startswith("date_min: ")
    assert len(exc.value.issues) == 1


def test_email_and_url_formats():
    with pytest.raises(ValidationError) as exc:
        validate({"email": "not-an-email"}, schemas.FindCustomerByEmailRequest)
    assert exc.value.issues[0].startswith("email: ")

    validate({"base_url": "https://hooks.example.com/wc"}, schemas.SetupWebhooksRequest)
    with pytest.raises(ValidationError):
        validate({"base_url": "ftp://hooks.example.com"}, schemas.SetupWebhooksRequest)


def test_empty_id_list_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate({"product_id": 1, "media_ids": []}, schemas.AssignMediaToProductRequest)
    assert exc.value.issues[0].startswith("media_ids: ")


def test_error_payload_carries_details():
    with pytest.raises(ValidationError) as exc:
        validate({}, schemas.IdRequest)

    payload = exc.value.to_dict()["error"]
    assert payload["kind"] == "validation"
    assert payload["issues"] == ["id: is required"]
