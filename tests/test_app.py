"""Tests for the Flask HTTP surface."""

import json

import pytest

from app import SecurityManager, app
from name_generator import CHAT_APOLOGY, CHAT_WELCOME_SUGGESTIONS


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def request_body():
    return {
        "fatherName": "Rahul",
        "motherName": "Priya",
        "gender": "Boy",
        "birthDate": "2024-03-21",
        "siblingNames": "Rohan",
        "nameRules": ["Combination of parent names"],
        "searchType": "traditional",
    }


NAMES_PAYLOAD = [
    {"name": "Aarav", "meaning": "Peaceful", "origin": "Sanskrit", "gender": "boy", "pronunciation": "AA-rav",
     "popularity": 70, "numerology": 7, "astrology": "Aries", "siblingMatch": True},
]


def test_home(client):
    response = client.get('/')
    assert response.status_code == 200


def test_unknown_route_is_json_404(client):
    response = client.get('/nope')
    assert response.status_code == 404
    assert "error" in response.get_json()


class TestGenerateNamesEndpoint:
    def test_missing_required_fields(self, client):
        response = client.post('/generate_names', json={"fatherName": "Rahul"})
        assert response.status_code == 400
        assert "motherName" in response.get_json()["error"]
        assert "gender" in response.get_json()["error"]

    def test_invalid_gender(self, client, request_body):
        request_body["gender"] = "dragon"
        response = client.post('/generate_names', json=request_body)
        assert response.status_code == 400

    def test_returns_names_in_camel_case(self, client, request_body, make_stub, stub_llm_manager):
        reply = json.dumps([{"name": "Aarav", "meaning": "Peaceful", "origin": "Sanskrit", "gender": "boy",
                             "pronunciation": "AA-rav", "popularity": 70, "parentConnection": "Rhymes with Rahul"}])
        stub_llm_manager(make_stub(reply=reply))

        response = client.post('/generate_names', json=request_body)

        assert response.status_code == 200
        names = response.get_json()["names"]
        assert [n["name"] for n in names] == ["Raiya", "Prhul", "Aarav"]
        assert names[2]["parentConnection"] == "Rhymes with Rahul"
        assert names[2]["siblingMatch"] is True
        assert names[2]["astrology"] == "Aries"

    def test_service_failure_still_returns_names(self, client, request_body, make_stub, stub_llm_manager):
        stub_llm_manager(make_stub(error=TimeoutError("deadline exceeded")))

        response = client.post('/generate_names', json=request_body)

        assert response.status_code == 200
        names = response.get_json()["names"]
        assert 1 <= len(names) <= 15
        assert all(n["gender"] == "boy" for n in names)


class TestChatEndpoint:
    def test_welcome(self, client):
        response = client.get('/chat/welcome')
        assert response.get_json()["suggestions"] == CHAT_WELCOME_SUGGESTIONS

    def test_empty_message(self, client):
        response = client.post('/chat', json={"message": "   "})
        assert response.status_code == 400

    def test_script_message_rejected(self, client):
        response = client.post('/chat', json={"message": "<script>alert(1)</script>"})
        assert response.status_code == 400

    def test_reply(self, client, make_stub, stub_llm_manager):
        stub_llm_manager(make_stub(reply="Consider Ira, Tara or Mira."))

        response = client.post('/chat', json={"message": "Short girl names?", "preferences": {"gender": "girl"}})

        assert response.status_code == 200
        body = response.get_json()
        assert body["content"] == "Consider Ira, Tara or Mira."
        assert len(body["suggestions"]) == 3

    def test_everyday_words_are_not_rejected(self, client, make_stub, stub_llm_manager):
        stub_llm_manager(make_stub(reply="Happy to help you choose."))

        response = client.post('/chat', json={"message": "Can you help me select a name for my son?"})

        assert response.status_code == 200
        assert response.get_json()["content"] == "Happy to help you choose."

    def test_non_object_body(self, client):
        response = client.post('/chat', json=["Can you suggest names?"])
        assert response.status_code == 400
        assert "error" in response.get_json()

    def test_failure_is_apology(self, client, make_stub, stub_llm_manager):
        stub_llm_manager(make_stub(error=RuntimeError("500 from service")))

        response = client.post('/chat', json={"message": "Anything?"})

        assert response.status_code == 200
        assert response.get_json()["content"] == CHAT_APOLOGY


class TestExportEndpoints:
    def test_csv_attachment(self, client):
        response = client.post('/export/csv', json={"names": NAMES_PAYLOAD, "fileName": "shortlist"})
        assert response.status_code == 200
        assert response.mimetype == 'text/csv'
        assert 'shortlist-' in response.headers['Content-Disposition']
        assert response.data.decode('utf-8').splitlines()[1].startswith('"Aarav","Peaceful"')

    def test_text(self, client):
        response = client.post('/export/text', json={"names": NAMES_PAYLOAD})
        assert response.get_json()["text"].startswith("Aarav - Peaceful")

    def test_pdf(self, client):
        response = client.post('/export/pdf', json={"names": NAMES_PAYLOAD})
        assert response.status_code == 200
        assert response.mimetype == 'application/pdf'
        assert response.data.startswith(b"%PDF")

    def test_missing_names(self, client):
        assert client.post('/export/text', json={}).status_code == 400
        assert client.post('/export/csv', json={"names": [{"meaning": "no name"}]}).status_code == 400

    def test_non_object_body(self, client):
        response = client.post('/export/text', json=NAMES_PAYLOAD)
        assert response.status_code == 400
        assert "error" in response.get_json()


def test_security_manager():
    assert SecurityManager.validate_input_security("Names like Rahul and Priya") is True
    assert SecurityManager.validate_input_security("DROP TABLE names") is False
    assert SecurityManager.validate_input_security("<iframe src=x>") is False


def test_security_manager_checks_are_separate():
    assert SecurityManager.contains_sql("please select a name") is True
    assert SecurityManager.contains_markup("please select a name") is False
    assert SecurityManager.contains_markup("<script>alert(1)</script>") is True
