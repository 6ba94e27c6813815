"""
Tests for the HTTP endpoints
"""
from fastapi.testclient import TestClient

from concern2care import recommendations as recs
from concern2care.main import app
from concern2care.settings import settings
from conftest import completion_response

client = TestClient(app)


def test_info_reports_llm_configuration():
	response = client.get("/info")
	assert response.status_code == 200
	assert response.json() == {"status": "ok", "llm_configured": False}


def test_format_endpoint():
	response = client.post("/interventions/format", json={"content": "### H\n\n* a **b**"})
	assert response.status_code == 200
	assert response.json() == {
		"blocks": [
			{"kind": "heading", "level": 3, "text": "H"},
			{"kind": "break"},
			{
				"kind": "bullet",
				"spans": [{"kind": "text", "text": "a "}, {"kind": "bold", "text": "b"}],
			},
		]
	}


def test_format_endpoint_accepts_empty_content():
	response = client.post("/interventions/format", json={"content": ""})
	assert response.json() == {"blocks": [{"kind": "break"}]}


def test_format_endpoint_requires_content():
	response = client.post("/interventions/format", json={})
	assert response.status_code == 422


def test_format_endpoint_rejects_oversized_content(monkeypatch):
	monkeypatch.setattr(settings, "max_content_chars", 5)
	response = client.post("/interventions/format", json={"content": "123456"})
	assert response.status_code == 413


def test_render_html_endpoint():
	response = client.post("/interventions/render", json={"content": "**Sub**"})
	assert response.status_code == 200
	body = response.json()
	assert body["output"] == "html"
	assert '<h4 class="intervention-subheading">Sub</h4>' in body["rendered"]


def test_render_text_endpoint():
	response = client.post("/interventions/render", json={"content": "* a **b**", "output": "text"})
	assert response.json() == {"output": "text", "rendered": "• a b"}


def test_render_rejects_unknown_output():
	response = client.post("/interventions/render", json={"content": "x", "output": "pdf"})
	assert response.status_code == 422


def test_generate_endpoint_without_key():
	response = client.post(
		"/recommendations/generate",
		json={
			"student_first_name": "Sam",
			"student_last_initial": "K",
			"grade": "4",
			"concern_types": ["Attention"],
			"severity_level": "urgent",
		},
	)
	assert response.status_code == 200
	body = response.json()
	assert body["source"] == "mock"
	assert body["recommendations"].endswith(recs.URGENT_APPENDIX)
	assert body["blocks"][0] == {"kind": "heading", "level": 3, "text": "Assessment Summary"}
	assert len(body["blocks"]) == len(body["recommendations"].split("\n"))


def test_generate_endpoint_with_api(monkeypatch, make_client):
	monkeypatch.setattr(settings, "deepseek_api_key", "configured")
	monkeypatch.setattr(recs, "DeepSeekClient", lambda: make_client(lambda request: completion_response("**Step 1**\nplain")))
	response = client.post(
		"/recommendations/generate",
		json={"student_first_name": "Sam", "student_last_initial": "K", "grade": "4"},
	)
	body = response.json()
	assert body["source"] == "api"
	assert body["blocks"] == [
		{"kind": "subheading", "level": 4, "text": "Step 1"},
		{"kind": "paragraph", "spans": [{"kind": "text", "text": "plain"}]},
	]


def test_follow_up_endpoint():
	response = client.post(
		"/recommendations/follow-up",
		json={
			"original_recommendations": "### Plan",
			"specific_question": "What materials do I need?",
			"student_first_name": "Sam",
			"student_last_initial": "K",
			"grade": "4",
		},
	)
	assert response.status_code == 200
	body = response.json()
	assert body["source"] == "mock"
	assert body["blocks"][0] == {"kind": "heading", "level": 3, "text": "Direct Answer"}


def test_generate_endpoint_falls_back_on_malformed_content(monkeypatch, make_client):
	monkeypatch.setattr(settings, "deepseek_api_key", "configured")
	monkeypatch.setattr(recs, "DeepSeekClient", lambda: make_client(lambda request: completion_response(["x"])))
	response = client.post(
		"/recommendations/generate",
		json={"student_first_name": "Sam", "student_last_initial": "K", "grade": "4"},
	)
	assert response.status_code == 200
	body = response.json()
	assert body["source"] == "mock"
	assert body["disclaimer"].endswith(recs.MOCK_UNAVAILABLE)
