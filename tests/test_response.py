"""Tests for the JSON response envelope."""

import json

from authgate.response import PaginationOptions, calculate_pagination, error_response, success_response


def _body(response) -> dict:
    return json.loads(response.body)


def test_success_envelope_omits_empty_fields():
    response = success_response(200, "ok")
    assert response.status_code == 200
    assert _body(response) == {"success": True, "code": 200, "message": "ok"}


def test_success_list_data_gets_count():
    body = _body(success_response(200, data=[1, 2, 3]))
    assert body["data"] == [1, 2, 3]
    assert body["count"] == 3


def test_success_with_pagination():
    body = _body(success_response(200, data=[], pagination=PaginationOptions(page=2, limit=10, total_items=25)))
    assert body["count"] == 0
    assert body["pagination"] == {
        "page": 2,
        "limit": 10,
        "totalItems": 25,
        "totalPages": 3,
        "hasNextPage": True,
        "hasPrevPage": True,
    }


def test_pagination_zero_limit():
    assert calculate_pagination(PaginationOptions(page=1, limit=0, total_items=5))["totalPages"] == 0


def test_error_envelope():
    response = error_response(400, "bad", error=[{"field": "email", "message": "required"}])
    assert response.status_code == 400
    assert _body(response) == {
        "success": False,
        "code": 400,
        "message": "bad",
        "error": [{"field": "email", "message": "required"}],
    }


def test_error_default_message():
    assert _body(error_response())["message"] == "Internal server error"
