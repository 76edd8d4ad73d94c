from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from services.api.main import app

SAMPLES = Path(__file__).resolve().parent.parent / "data" / "samples"


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "field_types": 12}


def test_generate_template(client):
    response = client.post(
        "/v1/templates:generate",
        json={"name": "landing", "label": "Landing", "sections": ["hero", "features"], "include_cta": True},
    )

    assert response.status_code == 200
    body = response.json()
    components = body["template"]["components"]
    assert [component["keyName"] for component in components] == ["hero_section", "features_section"]
    assert components[0]["fields"][-1]["name"] == "cta_button"
    assert body["issues"] == []


def test_invalid_template_name_is_a_bad_request(client):
    response = client.post("/v1/templates:generate", json={"name": "!!!", "label": "Landing", "sections": ["hero"]})

    assert response.status_code == 400
    assert "Invalid template name" in response.json()["detail"]


def test_generate_from_markup(client):
    markup = (SAMPLES / "landing.html").read_text(encoding="utf-8")

    response = client.post(
        "/v1/templates:from-markup",
        json={"markup": markup, "name": "landing"},
        headers={"X-Cloud-Trace-Context": "abc123/1;o=1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert [post_type["slug"] for post_type in body["post_types"]] == ["projects"]
    assert {analysis["archetype"] for analysis in body["analyses"]} >= {"single", "repeater", "group", "post_collection"}


def test_generate_from_json(client):
    response = client.post(
        "/v1/templates:from-json",
        json={"payload": {"faq": [{"question": "Why?", "answer": "Because."}]}, "name": "help"},
    )

    assert response.status_code == 200
    template = response.json()["template"]
    assert template["label"] == "Help"
    assert template["components"][0]["keyName"] == "faq_section"


def test_generate_from_prompt(client):
    response = client.post("/v1/templates:from-prompt", json={"prompt": "A landing page with hero and pricing"})

    assert response.status_code == 200
    keys = [component["keyName"] for component in response.json()["template"]["components"]]
    assert keys == ["hero_section", "pricing_section"]


def test_generate_field(client):
    response = client.post(
        "/v1/fields:generate",
        json={"name": "Contact Email", "label": "Contact Email", "field_type": "input"},
    )

    assert response.status_code == 200
    assert response.json()["attribute"]["type"] == "email"


def test_generate_field_with_unknown_kind(client):
    response = client.post("/v1/fields:generate", json={"name": "x", "label": "X", "field_type": "carousel"})

    assert response.status_code == 422
    assert response.json()["detail"] == "Unsupported field type: carousel"


def test_validate_template(client):
    response = client.post("/v1/templates:validate", json={"template_json": {"name": "landing"}})

    assert response.status_code == 200
    report = response.json()
    assert report["valid"] is False
    assert "Missing required key: components" in report["errors"]


def test_list_field_types(client):
    response = client.get("/v1/field-types")

    assert response.status_code == 200
    types = [entry["type"] for entry in response.json()["field_types"]]
    assert "post_related" in types
    assert len(types) == 12


def test_field_type_examples(client):
    response = client.get("/v1/field-types/media/examples")

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "media"
    assert body["examples"][0]["attribute"] == {"accept": ["image"]}


def test_field_type_examples_for_unknown_kind(client):
    response = client.get("/v1/field-types/carousel/examples")

    assert response.status_code == 422
    assert response.json()["detail"] == "Unsupported field type: carousel"
