import json

PATCH_RESPONSE = json.dumps(
    {"ops": [{"type": "editFile", "path": "src/App.js", "find": "red", "replace": "blue"}]}
)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# --- chat ---


def test_chat_generate_returns_steps_and_errors(client, llm):
    resp = client.post("/api/chat", json={"userId": "u1", "userText": "build a todo app"})

    assert resp.status_code == 200
    body = resp.json()
    assert "<appiaArtifact" in body["response"]
    assert [s["path"] for s in body["steps"]] == ["package.json", "src/App.jsx"]
    assert body["steps"][1]["code"].startswith("export default")
    assert body["errors"][0]["kind"] == "unrecognized"
    assert body["usage"] == {"inputTokens": 10, "outputTokens": 5, "totalTokens": 15}
    assert "patch" not in body

    # First turn goes to the expensive model with the generation budget
    call = llm.calls[0]
    assert call["model"] == "claude-sonnet-4-20250514"
    assert call["max_tokens"] == 8000
    assert "appiaArtifact" in call["system"]


def test_chat_patch_mode(client, llm):
    llm.text = PATCH_RESPONSE
    history = [
        {"role": "user", "text": "build a todo app"},
        {"role": "assistant", "text": "done"},
    ]

    resp = client.post(
        "/api/chat",
        json={"userId": "u1", "userText": "make it blue", "mode": "patch", "messages": history},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["patch"]["ops"] == [
        {"type": "editFile", "path": "src/App.js", "find": "red", "replace": "blue"}
    ]
    assert body["steps"][0]["type"] == "editFile"
    assert "response" not in body
    assert llm.calls[0]["model"] == "claude-3-5-haiku-20241022"
    assert llm.calls[0]["max_tokens"] == 400


def test_chat_invalid_patch_is_upstream_error(client, llm):
    llm.text = "I changed the colour for you!"

    resp = client.post("/api/chat", json={"userId": "u1", "userText": "make it blue", "mode": "patch"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Model returned an invalid patch"}


def test_chat_invalid_patch_shows_detail_in_development(make_client, llm):
    llm.text = "{}"
    client = make_client(app_env="development")

    resp = client.post("/api/chat", json={"userId": "u1", "userText": "make it blue", "mode": "patch"})

    assert resp.status_code == 500
    assert resp.json()["details"] == "Missing or invalid ops array"


def test_chat_accepts_legacy_content_messages(client, llm):
    resp = client.post(
        "/api/chat",
        json={"userId": "u1", "messages": [{"role": "user", "content": "a landing page"}]},
    )
    assert resp.status_code == 200
    assert "User Request: a landing page" in llm.calls[0]["messages"][-1]["content"][0]["text"]


def test_chat_records_usage(client):
    client.post("/api/chat", json={"userId": "u1", "userText": "build a todo app"})

    summary = client.get("/api/usage/u1").json()

    assert summary["totalTokensUsed"] == 15
    assert summary["usageByType"] == {"chat_generate": 15}


def test_chat_validation_errors(client):
    resp = client.post("/api/chat", json={"userId": "u1"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation failed"

    resp = client.post("/api/chat", json={"userText": "hi"})
    assert resp.status_code == 400
    assert any(d["field"] == "userId" for d in resp.json()["details"])

    resp = client.post("/api/chat", json={"userId": "u1", "userText": "x" * 10001})
    assert resp.status_code == 400


def test_chat_rate_limit(make_client):
    client = make_client(rate_limit_per_min=2)
    payload = {"userId": "u1", "userText": "hi"}

    assert client.post("/api/chat", json=payload).status_code == 200
    assert client.post("/api/chat", json=payload).status_code == 200
    resp = client.post("/api/chat", json=payload)

    assert resp.status_code == 429
    assert resp.json() == {"error": "Too many requests", "message": "Please try again later"}


def test_chat_bearer_mismatch_is_forbidden(client, llm):
    resp = client.post(
        "/api/chat",
        json={"userId": "u1", "userText": "hi"},
        headers={"Authorization": "Bearer u2"},
    )
    assert resp.status_code == 403
    assert llm.calls == []


def test_chat_malformed_authorization_header(client, llm):
    resp = client.post(
        "/api/chat",
        json={"userId": "u1", "userText": "hi"},
        headers={"Authorization": "Basic dTE6cGFzcw=="},
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid authorization header"}


def test_chat_matching_bearer_is_allowed(client):
    resp = client.post(
        "/api/chat",
        json={"userId": "u1", "userText": "hi"},
        headers={"Authorization": "Bearer u1"},
    )
    assert resp.status_code == 200


# --- template ---


def test_template(client):
    resp = client.post("/api/template", json={"prompt": "todo", "language": "svelte"})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["prompts"]) == 3
    assert "Svelte" in body["prompts"][0]
    assert len(body["uiPrompts"]) == 1


# --- projects ---


def _create_project(client, user_id="u1", **overrides):
    payload = {"userId": user_id, "name": "Todo", "prompt": "build a todo app"}
    payload.update(overrides)
    return client.post("/api/projects", json=payload)


def test_project_crud(client):
    resp = _create_project(client, files=[{"name": "a.js", "path": "a.js", "type": "file"}])
    assert resp.status_code == 201
    project = resp.json()
    assert project["userId"] == "u1"
    assert project["language"] == "react"
    assert project["isPublic"] is False
    project_id = project["id"]

    resp = client.get(f"/api/projects/{project_id}", params={"userId": "u1"})
    assert resp.status_code == 200
    assert resp.json()["files"][0]["path"] == "a.js"

    resp = client.put(f"/api/projects/{project_id}", json={"userId": "u1", "name": "Todo v2", "isPublic": True})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Todo v2"
    assert resp.json()["isPublic"] is True
    assert resp.json()["prompt"] == "build a todo app"

    listing = client.get("/api/projects", params={"userId": "u1"}).json()
    assert [p["id"] for p in listing] == [project_id]

    resp = client.delete(f"/api/projects/{project_id}", params={"userId": "u1"})
    assert resp.json() == {"success": True}
    assert client.get(f"/api/projects/{project_id}", params={"userId": "u1"}).status_code == 404


def test_project_ownership(client):
    project_id = _create_project(client).json()["id"]

    assert client.get(f"/api/projects/{project_id}", params={"userId": "u2"}).status_code == 403
    assert client.put(f"/api/projects/{project_id}", json={"userId": "u2", "name": "x"}).status_code == 403
    assert client.delete(f"/api/projects/{project_id}", params={"userId": "u2"}).status_code == 403
    assert client.get("/api/projects", params={"userId": "u2"}).json() == []


def test_project_not_found(client):
    resp = client.get("/api/projects/does-not-exist", params={"userId": "u1"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Project not found"}


def test_project_create_validation(client):
    assert _create_project(client, name="").status_code == 400
    assert _create_project(client, name="x" * 201).status_code == 400
    assert client.post("/api/projects", json={"userId": "u1", "name": "Todo"}).status_code == 400


# --- usage ---


def test_usage_tracking_adds_up(client):
    for _ in range(2):
        resp = client.post("/api/usage", json={"userId": "u1", "actionType": "chat", "tokensUsed": 5000})
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert resp.json()["usage"]["tokensUsed"] == 5000

    summary = client.get("/api/usage/u1").json()

    assert summary["totalTokensUsed"] == 10000
    assert summary["subscription"]["tier"] == "free"
    assert summary["subscription"]["used"] == 10000
    assert summary["subscription"]["remaining"] == 98000


def test_usage_defaults_to_zero_tokens(client):
    resp = client.post("/api/usage", json={"userId": "u1", "actionType": "publish"})
    assert resp.status_code == 200
    assert resp.json()["usage"]["tokensUsed"] == 0


def test_usage_rejects_bad_token_counts(client):
    for bad in (-1, "5000", 1.5):
        resp = client.post("/api/usage", json={"userId": "u1", "actionType": "chat", "tokensUsed": bad})
        assert resp.status_code == 400


def test_user_setup(client):
    resp = client.post("/api/user-setup", json={"userId": "u1"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["subscription"]["tier"] == "free"
    assert body["subscription"]["limit"] == 108000

    # Idempotent
    assert client.post("/api/user-setup", json={"userId": "u1"}).json()["subscription"]["used"] == 0


# --- files ---


def test_files_apply(client):
    resp = client.post(
        "/api/files/apply",
        json={
            "files": [{"name": "index.html", "path": "index.html", "type": "file", "content": "<h1>Hi</h1>"}],
            "steps": [
                {"id": 1, "type": "createFile", "path": "src/App.js", "code": "export {}"},
                {"id": 2, "type": "editFile", "path": "index.html", "find": "Hi", "replace": "Hello"},
            ],
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["files"][0]["content"] == "<h1>Hello</h1>"
    assert body["files"][1]["type"] == "folder"
    assert body["files"][1]["children"][0]["path"] == "src/App.js"
    assert [s["status"] for s in body["steps"]] == ["completed", "completed"]
