"""Every error leaving the API uses the ``{"type", "errors"}`` envelope."""

import pytest

pytestmark = pytest.mark.integration


def _assert_envelope(data, error_type):
    assert data["type"] == error_type
    assert data["errors"]
    for error in data["errors"]:
        assert set(error) == {"code", "detail", "attr"}


class TestErrorFormat:
    def test_malformed_json_body(self, api_client):
        response = api_client.post(
            "/api/v1/orders/", data="{not json", content_type="application/json"
        )
        assert response.status_code == 400
        _assert_envelope(response.data, "client_error")
        assert response.data["errors"][0]["code"] == "parse_error"

    def test_non_object_body(self, api_client):
        response = api_client.post("/api/v1/orders/", [1, 2], format="json")
        assert response.status_code == 400
        _assert_envelope(response.data, "validation_error")

    def test_method_not_allowed(self, api_client):
        response = api_client.patch("/api/v1/orders/1/", {}, format="json")
        assert response.status_code == 405
        _assert_envelope(response.data, "client_error")

    def test_domain_not_found(self, api_client):
        response = api_client.delete("/api/v1/orders/31337/")
        assert response.status_code == 404
        _assert_envelope(response.data, "client_error")

    def test_validation_error_lists_field_paths(self, api_client):
        response = api_client.post(
            "/api/v1/orders/",
            {"customer_name": "Ana", "items": [{"product_id": "x", "quantity": 1}]},
            format="json",
        )
        assert response.status_code == 400
        _assert_envelope(response.data, "validation_error")
        attrs = {error["attr"] for error in response.data["errors"]}
        assert {"customer_email", "shipping_address", "items.0.product_id"} <= attrs

    def test_schema_is_served(self, api_client):
        response = api_client.get("/api/schema/")
        assert response.status_code == 200
