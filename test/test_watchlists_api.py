import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from fastapi.testclient import TestClient

from config.settings import AppSettings
from server.api.rest.dependencies import get_watchlist_service
from server.main import create_app

_SETTINGS = AppSettings(secret_key="api-test-secret-0123456789abcdef0123", bcrypt_rounds=4)


class _ExplodingWatchlistService:
    async def get_watchlist(self, *, user_id, list_id):
        raise RuntimeError("database is on fire")


class TestWatchlistsApi(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app(_SETTINGS)
        self.client = TestClient(self.app)
        self.owner_id, self.owner = self._register("owner")
        self.friend_id, self.friend = self._register("friend")
        self.stranger_id, self.stranger = self._register("stranger")

    def _register(self, username: str):
        resp = self.client.post(
            "/api/v1/users/register",
            json={"username": username, "email": f"{username}@example.com", "password": "pw"},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        login = self.client.post("/api/v1/users/login", json={"username": username, "password": "pw"})
        self.assertEqual(login.status_code, 200, login.text)
        token = login.json()["access_token"]
        return resp.json()["user"]["user_id"], {"Authorization": f"Bearer {token}"}

    def _create(self, name: str = "Movies") -> str:
        resp = self.client.post("/api/v1/watchlists", json={"list_name": name}, headers=self.owner)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["watchlist"]["list_id"]

    def test_requires_token(self):
        resp = self.client.post("/api/v1/watchlists", json={"list_name": "Movies"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized"})

        resp = self.client.get("/api/v1/watchlists/x", headers={"Authorization": "Bearer nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Invalid token"})

    def test_create_and_read(self):
        resp = self.client.post("/api/v1/watchlists", json={"list_name": "  Movies "}, headers=self.owner)
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["message"], "watchlist creation successful.")
        self.assertEqual(body["watchlist"]["list_name"], "Movies")
        self.assertEqual(body["watchlist"]["owner_user_id"], self.owner_id)
        self.assertFalse(body["watchlist"]["is_public"])

        resp = self.client.get(f"/api/v1/watchlists/{body['watchlist']['list_id']}", headers=self.owner)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["list_name"], "Movies")

    def test_create_with_blank_name(self):
        resp = self.client.post("/api/v1/watchlists", json={"list_name": " "}, headers=self.owner)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "List name cannot be empty."})

    def test_read_visibility(self):
        list_id = self._create()

        resp = self.client.get(f"/api/v1/watchlists/{list_id}", headers=self.stranger)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "User does not have permission to get this watchlist"})

        resp = self.client.get("/api/v1/watchlists/missing", headers=self.owner)
        self.assertEqual(resp.status_code, 404)

        self.client.put(f"/api/v1/watchlists/{list_id}", json={"is_public": True}, headers=self.owner)
        resp = self.client.get(f"/api/v1/watchlists/{list_id}", headers=self.stranger)
        self.assertEqual(resp.status_code, 200)

    def test_update_errors(self):
        list_id = self._create("Movies")
        self._create("Shows")

        resp = self.client.put(f"/api/v1/watchlists/{list_id}", json={"list_name": "Shows"}, headers=self.owner)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json(), {"error": "A watchlist with that name already exists!"})

        resp = self.client.put(f"/api/v1/watchlists/{list_id}", json={"is_public": "yes"}, headers=self.owner)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "isPublic must be a boolean."})

        resp = self.client.put(f"/api/v1/watchlists/{list_id}", json={"list_name": "Mine"}, headers=self.stranger)
        self.assertEqual(resp.status_code, 403)

        resp = self.client.put("/api/v1/watchlists/missing", json={"list_name": "Mine"}, headers=self.owner)
        self.assertEqual(resp.status_code, 404)

    def test_update_success(self):
        list_id = self._create()

        resp = self.client.put(
            f"/api/v1/watchlists/{list_id}",
            json={"list_name": "Favourites", "is_public": True},
            headers=self.owner,
        )

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["message"], "Watchlist updated successfully")
        self.assertEqual(body["watchlist"]["list_name"], "Favourites")
        self.assertTrue(body["watchlist"]["is_public"])

    def test_camel_case_body_keys(self):
        resp = self.client.post("/api/v1/watchlists", json={"listName": "Movies"}, headers=self.owner)
        self.assertEqual(resp.status_code, 201, resp.text)
        list_id = resp.json()["watchlist"]["list_id"]
        self.assertEqual(resp.json()["watchlist"]["list_name"], "Movies")

        resp = self.client.put(
            f"/api/v1/watchlists/{list_id}",
            json={"isPublic": "notabool", "listName": " "},
            headers=self.owner,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "List name cannot be empty."})

        resp = self.client.put(f"/api/v1/watchlists/{list_id}", json={"isPublic": "notabool"}, headers=self.owner)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "isPublic must be a boolean."})

        resp = self.client.put(
            f"/api/v1/watchlists/{list_id}",
            json={"listName": "Favourites", "isPublic": True},
            headers=self.owner,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["watchlist"]["list_name"], "Favourites")
        self.assertTrue(resp.json()["watchlist"]["is_public"])

    def test_non_string_list_name_is_rejected(self):
        resp = self.client.post("/api/v1/watchlists", json={"listName": 42}, headers=self.owner)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "List name cannot be empty."})

    def test_like_toggle_is_mirrored_on_user(self):
        list_id = self._create()

        resp = self.client.patch(f"/api/v1/watchlists/{list_id}/likes", headers=self.stranger)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "List has been successfully liked", "action": "liked"})
        me = self.client.get("/api/v1/users/me", headers=self.stranger).json()
        self.assertEqual(me["liked_lists"], [list_id])

        resp = self.client.patch(f"/api/v1/watchlists/{list_id}/likes", headers=self.stranger)
        self.assertEqual(resp.json()["action"], "unliked")
        me = self.client.get("/api/v1/users/me", headers=self.stranger).json()
        self.assertEqual(me["liked_lists"], [])

        resp = self.client.patch("/api/v1/watchlists/missing/likes", headers=self.stranger)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Watchlist could not be found"})

    def test_deleted_account_likes_are_withdrawn(self):
        list_id = self._create()
        self.client.patch(f"/api/v1/watchlists/{list_id}/likes", headers=self.stranger)
        self.client.patch(f"/api/v1/watchlists/{list_id}/likes", headers=self.friend)

        resp = self.client.delete("/api/v1/users/me", headers=self.stranger)
        self.assertEqual(resp.status_code, 200)

        watchlist = self.client.get(f"/api/v1/watchlists/{list_id}", headers=self.owner).json()
        self.assertEqual(watchlist["likes"], [self.friend_id])

    def test_comments(self):
        list_id = self._create()

        resp = self.client.put(f"/api/v1/watchlists/{list_id}/comments", json={"comment": "hi"}, headers=self.stranger)
        self.assertEqual(resp.status_code, 403)

        resp = self.client.put(f"/api/v1/watchlists/{list_id}/comments", json={"comment": "  "}, headers=self.owner)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Comment cannot be empty."})

        resp = self.client.put(f"/api/v1/watchlists/{list_id}/comments", json={"comment": "great"}, headers=self.owner)
        self.assertEqual(resp.status_code, 200)
        comment = resp.json()["comment"]
        self.assertEqual(comment["text"], "great")
        self.assertEqual(comment["username"], "owner")

        resp = self.client.delete(
            f"/api/v1/watchlists/{list_id}/comments/{comment['comment_id']}",
            headers=self.owner,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Comment deleted successfully")
        self.assertEqual(resp.json()["watchlist"]["comments"], [])

        resp = self.client.delete(
            f"/api/v1/watchlists/{list_id}/comments/{comment['comment_id']}",
            headers=self.owner,
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Comment not found"})

    def test_collaborator_can_read_and_comment(self):
        list_id = self._create()

        resp = self.client.put(f"/api/v1/watchlists/{list_id}/collaborators/{self.friend_id}", headers=self.owner)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["watchlist"]["collaborators"], [self.friend_id])

        self.assertEqual(self.client.get(f"/api/v1/watchlists/{list_id}", headers=self.friend).status_code, 200)
        resp = self.client.put(f"/api/v1/watchlists/{list_id}/comments", json={"comment": "+1"}, headers=self.friend)
        self.assertEqual(resp.status_code, 200)

        resp = self.client.delete(f"/api/v1/watchlists/{list_id}/collaborators/{self.friend_id}", headers=self.owner)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(f"/api/v1/watchlists/{list_id}", headers=self.friend).status_code, 403)

        resp = self.client.put(f"/api/v1/watchlists/{list_id}/collaborators/{self.stranger_id}", headers=self.friend)
        self.assertEqual(resp.status_code, 403)

    def test_unexpected_error_is_500(self):
        self.app.dependency_overrides[get_watchlist_service] = lambda: _ExplodingWatchlistService()
        try:
            client = TestClient(self.app, raise_server_exceptions=False)
            resp = client.get("/api/v1/watchlists/x", headers=self.owner)
        finally:
            self.app.dependency_overrides.clear()

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal Server Error"})

    def test_healthz(self):
        resp = self.client.get("/healthz")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True, "storage": "in_memory"})


if __name__ == "__main__":
    unittest.main()
