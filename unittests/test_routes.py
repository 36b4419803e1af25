"""Unit tests for the routing helpers in routes/__init__.py."""

import pytest

from routes import get_path_param_keys, parse_path_parameters, parse_query_parameters, routes


def test_every_route_is_registered():
    expected = {
        ("/auth/login", "POST"),
        ("/auth/me", "GET"),
        ("/users", "GET"),
        ("/users/{user_id}", "PUT"),
        ("/add-product-batch", "POST"),
        ("/add-store-batch", "POST"),
        ("/add-category-batch", "POST"),
        ("/get-rows", "POST"),
        ("/export-data", "POST"),
        ("/filter-options/{table}", "GET"),
        ("/category-hierarchy", "GET"),
        ("/category-hierarchy/{parent_id}", "GET"),
        ("/product-history/{product_id}/{field}", "GET"),
        ("/store-history/{store_name}/{field}", "GET"),
        ("/upload-history", "GET"),
        ("/upload-history", "POST"),
        ("/uploads/{file_type}", "POST"),
        ("/uploads/{file_type}/presign", "POST"),
    }
    registered = {(path, method) for path, methods in routes.items() for method in methods}
    assert expected <= registered


def test_get_path_param_keys():
    assert get_path_param_keys("/product-history/{product_id}/{field}") == ["product_id", "field"]
    assert get_path_param_keys("/get-rows") == []


def test_static_route():
    assert parse_path_parameters("/get-rows") == ("/get-rows", {})


def test_dynamic_route():
    route, params = parse_path_parameters("/product-history/123456/price_usd")
    assert route == "/product-history/{product_id}/{field}"
    assert params == {"product_id": "123456", "field": "price_usd"}


def test_static_route_wins_over_dynamic():
    assert parse_path_parameters("/category-hierarchy") == ("/category-hierarchy", {})
    assert parse_path_parameters("/category-hierarchy/7") == ("/category-hierarchy/{parent_id}", {"parent_id": "7"})


def test_unknown_route():
    with pytest.raises(KeyError):
        parse_path_parameters("/no/such/route/here")


def test_parse_query_parameters():
    assert parse_query_parameters("/category-hierarchy?parent_id=3") == ("/category-hierarchy", {"parent_id": "3"})
    assert parse_query_parameters("/upload-history") == ("/upload-history", {})
    assert parse_query_parameters("/x?a=1&a=2&b=") == ("/x", {"a": "2", "b": ""})
