from unittest.mock import MagicMock

import pytest

from appia.services.vercel_client import vercel_project_name

FILES = {"index.html": "<h1>Hi</h1>", "src/main.js": "console.log(1)"}


def _response(status_code=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload or {}
    resp.text = text
    return resp


@pytest.fixture
def vercel_client(make_client):
    return make_client(vercel_token="vercel-token", vercel_team_id="team_1")


@pytest.fixture
def github_client(make_client):
    return make_client(github_client_id="gh-id", github_client_secret="gh-secret")


def test_vercel_project_name():
    assert vercel_project_name("My Todo App!") == "my-todo-app-"


# --- publish ---


def test_publish_deploys_inline_files(vercel_client, mocker):
    post = mocker.patch(
        "appia.services.vercel_client.http_requests.post",
        return_value=_response(200, {"id": "dpl_1", "url": "todo.vercel.app"}),
    )

    resp = vercel_client.post(
        "/api/publish",
        json={"userId": "u1", "projectName": "Todo App", "files": FILES, "framework": "static"},
    )

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "url": "https://todo.vercel.app",
        "deploymentId": "dpl_1",
        "message": "Project deployed successfully",
    }
    kwargs = post.call_args.kwargs
    assert kwargs["params"] == {"teamId": "team_1"}
    assert kwargs["headers"]["Authorization"] == "Bearer vercel-token"
    assert kwargs["json"]["name"] == "todo-app"
    assert {f["file"] for f in kwargs["json"]["files"]} == set(FILES)
    assert all(f["encoding"] == "base64" for f in kwargs["json"]["files"])


def test_publish_without_token_is_not_configured(client, mocker):
    post = mocker.patch("appia.services.vercel_client.http_requests.post")

    resp = client.post("/api/publish", json={"userId": "u1", "projectName": "Todo", "files": FILES})

    assert resp.status_code == 503
    post.assert_not_called()


def test_publish_requires_files(vercel_client):
    resp = vercel_client.post("/api/publish", json={"userId": "u1", "projectName": "Todo", "files": {}})
    assert resp.status_code == 400


def test_publish_provider_failure(vercel_client, mocker):
    mocker.patch(
        "appia.services.vercel_client.http_requests.post",
        return_value=_response(400, {"error": {"message": "bad files"}}),
    )

    resp = vercel_client.post("/api/publish", json={"userId": "u1", "projectName": "Todo", "files": FILES})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Deployment failed"}


def _publish(client, mocker, user_id="u1"):
    mocker.patch(
        "appia.services.vercel_client.http_requests.post",
        return_value=_response(200, {"id": "dpl_1", "url": "todo.vercel.app"}),
    )
    resp = client.post("/api/publish", json={"userId": user_id, "projectName": "Todo", "files": FILES})
    assert resp.status_code == 200


def test_deployment_status(vercel_client, mocker):
    _publish(vercel_client, mocker)
    mocker.patch(
        "appia.services.vercel_client.http_requests.get",
        return_value=_response(200, {"id": "dpl_1", "url": "todo.vercel.app", "readyState": "READY", "createdAt": 1}),
    )

    resp = vercel_client.get("/api/publish/dpl_1", params={"userId": "u1"})

    assert resp.status_code == 200
    assert resp.json()["deployment"] == {
        "id": "dpl_1",
        "url": "https://todo.vercel.app",
        "state": "READY",
        "createdAt": 1,
    }


def test_deployment_status_not_found(vercel_client, mocker):
    get = mocker.patch("appia.services.vercel_client.http_requests.get", return_value=_response(404))

    assert vercel_client.get("/api/publish/missing", params={"userId": "u1"}).status_code == 404
    get.assert_not_called()

    _publish(vercel_client, mocker)
    assert vercel_client.get("/api/publish/dpl_1", params={"userId": "u1"}).status_code == 404


def test_deployment_requires_a_user(vercel_client, mocker):
    _publish(vercel_client, mocker)
    assert vercel_client.get("/api/publish/dpl_1").status_code == 401


def test_delete_deployment(vercel_client, mocker):
    _publish(vercel_client, mocker)
    delete = mocker.patch("appia.services.vercel_client.http_requests.delete", return_value=_response(204))

    resp = vercel_client.delete("/api/publish/dpl_1", headers={"Authorization": "Bearer u1"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert delete.call_args.args[0].endswith("/v13/deployments/dpl_1")
    assert vercel_client.delete("/api/publish/dpl_1", params={"userId": "u1"}).status_code == 404


def test_foreign_deployment_is_forbidden(vercel_client, mocker):
    _publish(vercel_client, mocker, user_id="alice")
    get = mocker.patch("appia.services.vercel_client.http_requests.get")
    delete = mocker.patch("appia.services.vercel_client.http_requests.delete")

    assert vercel_client.delete("/api/publish/dpl_1", headers={"Authorization": "Bearer mallory"}).status_code == 403
    assert vercel_client.delete("/api/publish/dpl_1", params={"userId": "mallory"}).status_code == 403
    assert vercel_client.get("/api/publish/dpl_1", params={"userId": "mallory"}).status_code == 403
    delete.assert_not_called()
    get.assert_not_called()


# --- expo snack ---


def test_expo_snack(client, mocker):
    mocker.patch("appia.services.expo_client.http_requests.post", return_value=_response(200, {"id": "abc123"}))

    resp = client.post("/api/expo-snack", json={"files": {"App.js": {"type": "CODE", "contents": "x"}}})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["id"] == "abc123"
    assert body["snackUrl"] == "https://snack.expo.dev/abc123"
    assert "abc123" in body["embedUrl"]


def test_expo_snack_failure(client, mocker):
    mocker.patch("appia.services.expo_client.http_requests.post", return_value=_response(500, text="boom"))
    assert client.post("/api/expo-snack", json={"files": {"App.js": "x"}}).status_code == 500


# --- github ---

GITHUB_USER = {"id": 7, "login": "octocat", "name": "The Octocat", "avatar_url": "https://avatars/7"}


def test_github_connect_and_status(github_client, mocker):
    mocker.patch(
        "appia.services.github_client.http_requests.post",
        return_value=_response(200, {"access_token": "gho_1"}),
    )
    mocker.patch("appia.services.github_client.http_requests.get", return_value=_response(200, GITHUB_USER))

    resp = github_client.post("/api/github-oauth", json={"userId": "u1", "code": "abc"})

    assert resp.status_code == 200
    user = resp.json()["githubUser"]
    assert (user["id"], user["username"], user["name"], user["avatar"]) == (
        7,
        "octocat",
        "The Octocat",
        "https://avatars/7",
    )

    status = github_client.get("/api/github-oauth", params={"userId": "u1"}).json()
    assert status["connected"] is True
    assert status["githubUser"]["username"] == "octocat"


def test_github_status_clears_revoked_token(github_client, mocker):
    mocker.patch(
        "appia.services.github_client.http_requests.post",
        return_value=_response(200, {"access_token": "gho_1"}),
    )
    get = mocker.patch("appia.services.github_client.http_requests.get", return_value=_response(200, GITHUB_USER))
    github_client.post("/api/github-oauth", json={"userId": "u1", "code": "abc"})

    get.return_value = _response(401)
    assert github_client.get("/api/github-oauth", params={"userId": "u1"}).json() == {"connected": False}

    # The token is gone, so GitHub is not asked again
    get.reset_mock()
    assert github_client.get("/api/github-oauth", params={"userId": "u1"}).json() == {"connected": False}
    get.assert_not_called()


def test_github_status_without_connection(github_client):
    assert github_client.get("/api/github-oauth", params={"userId": "u1"}).json() == {"connected": False}


def test_github_bad_code(github_client, mocker):
    mocker.patch(
        "appia.services.github_client.http_requests.post",
        return_value=_response(200, {"error": "bad_verification_code", "error_description": "The code is incorrect"}),
    )

    resp = github_client.post("/api/github-oauth", json={"userId": "u1", "code": "nope"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "The code is incorrect"}


def test_github_not_configured(client):
    resp = client.post("/api/github-oauth", json={"userId": "u1", "code": "abc"})
    assert resp.status_code == 503
