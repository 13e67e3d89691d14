import json

from db import database, repository
import routes.api
import routes.manage
from utils.openrouter import WordGenerationError


def _words():
    with database.get_conn() as conn:
        return repository.list_words_with_stats(conn)


def test_generate_stores_words_due_now(client, monkeypatch):
    calls = {}

    def fake_generate(prompt_template, seed=None, existing_words=None, config=None, client=None):
        calls["prompt"] = prompt_template
        calls["existing"] = list(existing_words)
        return [{"text": "whale", "hint": "Silent h"}, {"text": "shark", "hint": "Ends with a k"}]

    monkeypatch.setattr(routes.manage, "generate_words", fake_generate)
    with database.get_conn() as conn:
        repository.add_word(conn, "seal", "Sounds like the letter c")

    response = client.post("/manage/generate", follow_redirects=False)
    assert response.status_code == 303
    assert "Added%202%20new%20words" in response.headers["location"]
    assert calls == {"prompt": "3rd-grade animal words", "existing": ["seal"]}

    words = {w["text"]: w for w in _words()}
    assert set(words) == {"seal", "whale", "shark"}
    assert words["whale"]["source_prompt_hash"]
    assert words["whale"]["next_due"] is not None


def test_generate_failure_is_shown(client, monkeypatch):
    def failing(*args, **kwargs):
        raise WordGenerationError("OpenRouter API key not configured")

    monkeypatch.setattr(routes.manage, "generate_words", failing)
    response = client.post("/manage/generate")
    assert response.status_code == 200
    assert "Error generating words: OpenRouter API key not configured" in response.text


def test_add_and_delete_word(client):
    response = client.post("/manage/words", data={"text": " Giraffe ", "hint": "Double f at the end"})
    assert response.status_code == 200
    assert "giraffe" in response.text
    word_id = _words()[0]["id"]

    response = client.post(f"/manage/words/{word_id}/delete", headers={"HX-Request": "true"})
    assert response.status_code == 200
    assert response.text == ""
    assert _words() == []
    assert client.post(f"/manage/words/{word_id}/delete").status_code == 404


def test_add_word_requires_text_and_hint(client):
    assert client.post("/manage/words", data={"text": "  ", "hint": "x"}).status_code == 400


def test_clear_requires_confirmation(client):
    client.post("/manage/words", data={"text": "cat", "hint": "meows"})
    assert client.post("/manage/clear").status_code == 400
    client.post("/manage/clear", data={"confirm": "yes"})
    assert _words() == []


def test_export_then_import(client):
    client.post("/manage/words", data={"text": "cat", "hint": "meows"})
    response = client.get("/manage/export")
    assert response.status_code == 200
    assert response.headers["content-disposition"].startswith("attachment; filename=be-spelling-backup-")
    exported = response.json()
    assert [w["text"] for w in exported["words"]] == ["cat"]
    assert len(exported["srs"]) == 1

    client.post("/manage/clear", data={"confirm": "yes"})
    response = client.post("/manage/import", data={"import_data": json.dumps(exported)})
    assert "Imported 1 words" in response.text
    assert [w["text"] for w in _words()] == ["cat"]


def test_import_rejects_bad_json(client):
    response = client.post("/manage/import", data={"import_data": '{"reviews": []}'})
    assert "Error importing data: Invalid data format" in response.text


def test_api_generate_requires_template(client):
    response = client.post("/api/generate-words", json={"promptTemplate": ""})
    assert response.status_code == 400
    assert response.json()["detail"] == "promptTemplate is required"


def test_api_generate_without_key(client, monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "")
    response = client.post("/api/generate-words", json={"promptTemplate": "ocean words"})
    assert response.status_code == 500
    assert response.json()["detail"] == "OpenRouter API key not configured"


def test_api_generate_passes_request_fields(client, monkeypatch):
    seen = {}

    def fake_generate(prompt_template, seed=None, existing_words=None, config=None, client=None):
        seen.update(prompt=prompt_template, seed=seed, existing=existing_words)
        return [{"text": "whale", "hint": "Silent h"}]

    monkeypatch.setattr(routes.api, "generate_words", fake_generate)
    response = client.post(
        "/api/generate-words",
        json={"promptTemplate": "ocean words", "seed": 7, "existingWords": ["shark"]},
    )
    assert response.status_code == 200
    assert response.json() == {"words": [{"text": "whale", "hint": "Silent h"}]}
    assert seen == {"prompt": "ocean words", "seed": 7, "existing": ["shark"]}


def test_api_check_rate_and_stats(client):
    client.post("/manage/words", data={"text": "cat", "hint": "meows"})
    word_id = _words()[0]["id"]

    assert client.get("/api/stats").json() == {"total": 1, "due": 1, "learned": 0}
    assert client.get("/api/next").json()["word"]["id"] == word_id

    checked = client.post(f"/api/words/{word_id}/check", json={"attempt": "dog"}).json()
    assert checked["auto_rated"] is False and checked["srs"] is None

    checked = client.post(f"/api/words/{word_id}/check", json={"attempt": "cta"}).json()
    assert checked["rating"] == "ALMOST"
    assert checked["srs"]["interval"] == 1

    rated = client.post(f"/api/words/{word_id}/rate", json={"rating": "STUMPED"})
    assert rated.status_code == 200
    assert rated.json()["reps"] == 0
    assert client.get("/api/stats").json()["due"] == 0
    assert client.get("/api/next").json() == {"word": None}


def test_api_import_accepts_browser_export(client):
    payload = {
        "words": [{"id": "abc", "text": "cat", "hint": "meows"}],
        "reviews": [],
        "srs": [],
    }
    response = client.post("/api/import", json=payload)
    assert response.json() == {"imported": 1}
    assert client.get("/api/stats").json()["total"] == 1
    assert client.post("/api/import", json={"nope": 1}).status_code == 400


def test_api_import_rejects_bad_snapshots(client):
    client.post("/manage/words", data={"text": "cat", "hint": "meows"})
    bad_due = {
        "words": [{"id": "a", "text": "cat", "hint": "meows"}],
        "srs": [{"word_id": "a", "due": "tomorrow"}],
    }
    duplicate_ids = {
        "words": [{"id": "a", "text": "cat", "hint": "meows"}, {"id": "a", "text": "dog", "hint": "barks"}],
    }
    for payload in (bad_due, duplicate_ids):
        response = client.post("/api/import", json=payload)
        assert response.status_code == 400
    assert [w["text"] for w in _words()] == ["cat"]


def test_manage_import_reports_bad_snapshots(client):
    payload = {
        "words": [{"id": "a", "text": "cat", "hint": "meows"}],
        "srs": [{"word_id": "a", "due": "soon"}],
    }
    response = client.post("/manage/import", data={"import_data": json.dumps(payload)})
    assert "Error importing data: Invalid data format" in response.text

    response = client.post(
        "/manage/import",
        files={"file": ("backup.json", b'{"words": [\xff]}', "application/json")},
    )
    assert "Error importing data: Import file is not UTF-8 text" in response.text
    assert _words() == []


def test_import_ignores_schedules_for_missing_words(client):
    payload = {
        "words": [{"id": "real", "text": "cat", "hint": "meows"}],
        "srs": [
            {"word_id": "ghost", "due": "2024-01-01T00:00:00.000Z"},
            {"word_id": "real", "due": "2024-02-01T00:00:00.000Z"},
        ],
    }
    assert client.post("/api/import", json=payload).status_code == 200
    assert client.get("/api/stats").json() == {"total": 1, "due": 1, "learned": 0}
    assert client.get("/api/next").json()["word"]["id"] == "real"
    assert 'data-text="cat"' in client.get("/").text


def test_settings_page_saves_and_clamps(client):
    response = client.post(
        "/settings",
        data={"prompt_template": "ocean words", "selected_voice": "Alex", "speech_rate": "3", "speech_pitch": "0.2"},
    )
    assert response.status_code == 200
    assert "Settings saved!" in response.text
    settings = client.get("/api/settings").json()
    assert settings == {
        "prompt_template": "ocean words",
        "selected_voice": "Alex",
        "speech_rate": 1.5,
        "speech_pitch": 0.5,
    }


def test_settings_reset_and_api_update(client):
    response = client.put("/api/settings", json={"prompt_template": "", "speech_rate": 1.0})
    assert response.json()["prompt_template"].startswith("5th-grade level spelling words")
    client.post("/settings/reset")
    assert client.get("/api/settings").json()["speech_rate"] == 0.8


def test_speech_settings_reach_the_page_body(client):
    client.put("/api/settings", json={"selected_voice": "Samantha", "speech_rate": 1.2, "speech_pitch": 0.9})
    body = client.get("/").text
    assert 'data-voice="Samantha"' in body
    assert client.get("/settings/current").status_code == 404
