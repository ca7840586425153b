import json
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fastapi.testclient import TestClient

from pos_tool.api import state
from pos_tool.api.main import app
from pos_tool.engine import Register, Coupon


@pytest.fixture(scope="function")
def client(monkeypatch):
    monkeypatch.setattr(state, "register", Register())
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["store_version"] == "0.1"


def test_scan_and_subtotal(client):
    response = client.post("/scan", json={"name": "Beans", "price_each": 199})
    assert response.status_code == 200
    assert response.json() == {"name": "Beans", "price": 199, "item_count": 1, "raw_total": 199}

    response = client.post("/scan", json={"name": "Apples", "price_per_unit": 199, "weight": 1.5})
    assert response.json()["price"] == 299

    data = client.get("/subtotal").json()
    assert data["raw_total"] == 498
    assert data["subtotal"] == 498
    assert data["savings"] == 0
    assert data["trace"][0]["step"] == "Raw Total"


def test_scan_rejects_incomplete_item(client):
    response = client.post("/scan", json={"name": "Apples", "price_per_unit": 199})
    assert response.status_code == 400


def test_scan_rejects_negative_price(client):
    response = client.post("/scan", json={"name": "Beans", "price_each": -5})
    assert response.status_code == 400
    assert len(state.register.receipt) == 0


def test_add_scheme_and_subtotal(client):
    response = client.post("/schemes", json={"type": "bunched", "item_name": "Beans", "buy": 3, "pay": 2})
    assert response.status_code == 200
    assert response.json()["position"] == 1

    for _ in range(3):
        client.post("/scan", json={"name": "Beans", "price_each": 199})

    data = client.get("/subtotal").json()
    assert data["subtotal"] == 398
    assert data["savings"] == 199


def test_add_scheme_rejects_unknown_type(client):
    response = client.post("/schemes", json={"type": "loyalty"})
    assert response.status_code == 400
    assert state.register.pricing_schemes == ()


def test_list_schemes_shows_usage(client):
    state.register.add_pricing_scheme(Coupon("Beans"))
    client.post("/scan", json={"name": "Beans", "price_each": 200})

    assert client.get("/schemes").json()[0]["state"] == {"used": False}
    assert client.get("/subtotal").json()["subtotal"] == 170
    assert client.get("/schemes").json()[0]["state"] == {"used": True}


def test_finalize_returns_receipt_and_resets(client):
    client.post("/scan", json={"name": "Beans (8oz Can)", "price_each": 199})

    data = client.post("/total").json()
    assert data["total"] == 199
    assert data["items"] == [{"name": "Beans (8oz Can)", "price": 199}]
    assert data["receipt_text"] == "Receipt:\nBeans (8oz Can): $1.99\n------------------\nTOTAL: $1.99"

    assert client.get("/subtotal").json()["subtotal"] == 0


def test_system_status(client):
    data = client.get("/system/status").json()
    assert data["register_active"] is True
    assert data["schemes_count"] == 0


@pytest.fixture
def compiled_schemes(tmp_path, monkeypatch):
    path = tmp_path / "compiled_schemes.json"
    monkeypatch.setattr(state.settings, "compiled_schemes", path)
    monkeypatch.setattr(state, "scheme_loader", state.scheme_loader)
    return path


def write_compiled(path, configs):
    path.write_text(json.dumps({"schemes": [
        {"scheme_id": f"S{position}", "active": True, "position": position, "config": config}
        for position, config in enumerate(configs, start=1)
    ]}), encoding='utf-8')


def test_reload_installs_fresh_register(client, compiled_schemes):
    write_compiled(compiled_schemes, [
        {"type": "bunched", "item_name": "Beans", "buy": 3, "pay": 2},
        {"type": "coupon", "item_name": "Beans"},
    ])

    data = client.post("/system/reload").json()
    assert data == {"schemes_loaded": True, "schemes_count": 2, "loader_error": None}

    client.post("/scan", json={"name": "Beans", "price_each": 200})
    assert client.get("/subtotal").json()["subtotal"] == 170
    assert client.get("/schemes").json()[1]["state"] == {"used": True}

    client.post("/system/reload")

    assert client.get("/schemes").json()[1]["state"] == {"used": False}
    assert client.get("/subtotal").json()["item_count"] == 0
    assert client.get("/system/status").json()["schemes_count"] == 2


def test_reload_missing_file(client, compiled_schemes):
    data = client.post("/system/reload").json()
    assert data == {"schemes_loaded": False, "schemes_count": 0, "loader_error": None}


def test_reload_invalid_file_keeps_api_up(client, compiled_schemes):
    write_compiled(compiled_schemes, [
        {"type": "bunched", "item_name": "Beans", "buy": 3, "pay": -1},
    ])

    data = client.post("/system/reload").json()
    assert data["schemes_loaded"] is False
    assert data["schemes_count"] == 0
    assert "pay must be non-negative" in data["loader_error"]

    status = client.get("/system/status").json()
    assert "pay must be non-negative" in status["loader_error"]
    assert client.post("/scan", json={"name": "Beans", "price_each": 200}).status_code == 200
