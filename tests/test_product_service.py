"""Tests for the dev product service"""
import pytest
from fastapi.testclient import TestClient

from shopping_cart.product_service.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_get_product(client):
    response = client.get("/products/2")

    assert response.status_code == 200
    assert response.json()["name"] == "Mouse"


def test_get_unknown_product(client):
    assert client.get("/products/99").status_code == 404


def test_list_products_skips_unknown_ids(client):
    response = client.get("/products", params={"ids": "3,99,1"})

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [3, 1]
