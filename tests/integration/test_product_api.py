"""End-to-end tests for the /api/v1/products/ endpoints."""

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


class TestProductAPI:
    def test_create(self, api_client):
        response = api_client.post(
            URL,
            {"name": "Lamp", "price": "19.90", "stock_quantity": 5},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["name"] == "Lamp"
        assert response.data["price"] == "19.90"
        assert response.data["stock_quantity"] == 5

    def test_create_invalid_is_400(self, api_client):
        response = api_client.post(
            URL, {"name": "", "price": "-1", "stock_quantity": -2}, format="json"
        )

        assert response.status_code == 400
        assert response.data["type"] == "validation_error"
        attrs = {error["attr"] for error in response.data["errors"]}
        assert {"name", "price", "stock_quantity"} <= attrs
        assert not Product.objects.exists()

    def test_list_and_filter_in_stock(self, api_client, make_product):
        make_product(name="Empty", stock=0)
        stocked = make_product(name="Stocked", stock=3)

        response = api_client.get(URL, {"in_stock": "true"})

        assert response.status_code == 200
        assert [p["id"] for p in response.data["results"]] == [stocked.id]

    def test_retrieve_unknown_is_404(self, api_client):
        response = api_client.get(f"{URL}999999/")
        assert response.status_code == 404
        assert response.data["errors"][0]["code"] == "product_not_found"

    def test_retrieve_out_of_range_id_is_404(self, api_client):
        response = api_client.get(f"{URL}{10**30}/")
        assert response.status_code == 404

    def test_price_beyond_column_is_400(self, api_client):
        response = api_client.post(
            URL, {"name": "Lamp", "price": "1e30", "stock_quantity": 1}, format="json"
        )

        assert response.status_code == 400
        assert response.data["errors"][0]["attr"] == "price"
        assert not Product.objects.exists()

    def test_patch_stock_resets_baseline(self, api_client, make_product):
        product = make_product(price="5.00", stock=1)

        response = api_client.patch(
            f"{URL}{product.id}/", {"stock_quantity": 50}, format="json"
        )

        assert response.status_code == 200
        assert response.data["stock_quantity"] == 50
        assert response.data["price"] == "5.00"

    def test_delete(self, api_client, make_product):
        product = make_product()
        assert api_client.delete(f"{URL}{product.id}/").status_code == 204
        assert api_client.delete(f"{URL}{product.id}/").status_code == 404
