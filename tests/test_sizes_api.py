from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from pantry_sizes.api import create_app
from pantry_sizes.config import SizeSettings


@pytest.fixture()
def client() -> TestClient:
    app = create_app(SizeSettings(), allow_origins=["*"])
    return TestClient(app)


def test_health(client: TestClient) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "locale": "uk"}


def test_parse_endpoint(client: TestClient) -> None:
    resp = client.get("/api/sizes/parse", params={"size": "2 pints"})
    assert resp.status_code == 200
    parsed = resp.json()["parsed"]
    assert parsed["display"] == "2pt"
    assert parsed["normalizedValue"] == 1136
    assert parsed["unit"] == "ml"
    assert parsed["original"] == "2 pints"

    junk = client.get("/api/sizes/parse", params={"size": "family size"})
    assert junk.status_code == 200
    assert junk.json() == {"parsed": None}

    assert client.get("/api/sizes/parse").status_code == 400


def test_convert_endpoint(client: TestClient) -> None:
    resp = client.get("/api/sizes/convert", params={"size": "500g", "unit": "kg"})
    assert resp.json() == {"converted": "0.5kg"}
    cross = client.get("/api/sizes/convert", params={"size": "500g", "unit": "ml"})
    assert cross.json() == {"converted": None}


def test_price_per_unit_endpoint(client: TestClient) -> None:
    resp = client.get("/api/sizes/price-per-unit", params={"size": "250g", "price": "2.50"})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["pricePerUnit"] == pytest.approx(1.0)
    assert payload["formatted"] == "£1.00/100g"

    unknown = client.get("/api/sizes/price-per-unit", params={"size": "0g", "price": "1"})
    assert unknown.json() == {"pricePerUnit": None, "formatted": None}

    bad = client.get("/api/sizes/price-per-unit", params={"size": "250g", "price": "cheap"})
    assert bad.status_code == 400


def test_match_endpoint(client: TestClient) -> None:
    resp = client.post(
        "/api/sizes/match",
        json={"target": "500ml", "candidates": ["500g", "1L", "568ml"]},
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert [m["size"] for m in payload["allMatches"]] == ["568ml", "1L"]
    assert payload["bestMatch"]["isAutoMatchable"] is True
    assert payload["hasExactMatch"] is False

    strict = client.post(
        "/api/sizes/match",
        json={"target": "500ml", "candidates": ["568ml"], "tolerance": 0.1},
    )
    assert strict.json()["hasAutoMatch"] is False


def test_match_endpoint_validates_body(client: TestClient) -> None:
    assert client.post("/api/sizes/match", content=b"not json").status_code == 400
    assert client.post("/api/sizes/match", json=["500ml"]).status_code == 400
    assert client.post("/api/sizes/match", json={"target": "500ml"}).status_code == 400
    assert (
        client.post(
            "/api/sizes/match",
            json={"target": "500ml", "candidates": ["1L"], "tolerance": "wide"},
        ).status_code
        == 400
    )


def test_rank_endpoint(client: TestClient) -> None:
    resp = client.post("/api/sizes/rank", json={"sizes": ["4pt", "500g", "1pt", "junk"]})
    payload = resp.json()
    assert payload["ranked"] == ["500g", "1pt", "4pt"]
    assert payload["groups"] == {"volume": ["4pt", "1pt"], "weight": ["500g"], "count": []}


def test_suggest_endpoint(client: TestClient) -> None:
    resp = client.post("/api/sizes/suggest", json={"sizes": ["227g", "250g", "500g", "1L"], "category": "weight"})
    assert resp.json() == {"suggested": "500g"}
    bad = client.post("/api/sizes/suggest", json={"sizes": ["500g"], "category": "length"})
    assert bad.status_code == 400


def test_best_value_endpoint(client: TestClient) -> None:
    resp = client.post(
        "/api/sizes/best-value",
        json={"offers": [{"size": "1pt", "price": 0.65}, {"size": "4pt", "price": 1.55}, {"size": "?", "price": 1}]},
    )
    assert resp.status_code == 200
    items = resp.json()["items"]
    assert [i["size"] for i in items] == ["4pt", "1pt", "?"]
    assert items[0]["isBestValue"] is True
    assert items[0]["pricePerUnitDisplay"] == "£0.07/100ml"
    assert items[2]["pricePerUnit"] is None
    assert items[2]["category"] is None
