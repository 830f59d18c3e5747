import redis
from jose import jwt

from doctors_portal.core.config import settings
from doctors_portal.core.database import get_redis
from doctors_portal.main import app
from doctors_portal.core.security import verify_token
from doctors_portal.models.user import User

from .conftest import auth_headers, expired_headers

class UnreachableRedis:
    def get(self, key):
        raise redis.ConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    setex = incr = get

test_user_data = {
    "name": "Test User",
    "photoURL": "https://example.com/me.png"
}

class TestTokenIssuance:

    def test_get_token_creates_user(self, client, db_session):
        """Issuing a token upserts the user."""
        response = client.put("/getToken/test@example.com", json=test_user_data)
        assert response.status_code == 200

        data = response.json()
        assert data["result"]["upsertedId"] is not None
        assert data["result"]["matchedCount"] == 0
        assert verify_token(data["accessToken"]).email == "test@example.com"

        user = db_session.query(User).filter(User.email == "test@example.com").first()
        assert user.name == "Test User"
        assert user.profile == {"photoURL": "https://example.com/me.png"}
        assert user.role is None

    def test_get_token_existing_user(self, client):
        client.put("/getToken/test@example.com", json=test_user_data)

        response = client.put("/getToken/test@example.com", json={"name": "Renamed"})
        assert response.status_code == 200

        result = response.json()["result"]
        assert result["matchedCount"] == 1
        assert result["modifiedCount"] == 1
        assert result["upsertedId"] is None

    def test_get_token_cannot_set_role(self, client, db_session):
        client.put("/getToken/test@example.com", json={"role": "admin", "email": "x@example.com"})

        user = db_session.query(User).filter(User.email == "test@example.com").first()
        assert user.role is None
        assert user.profile == {}

    def test_get_token_rate_limited(self, client):
        for _ in range(settings.RATE_LIMIT_REQUESTS):
            assert client.put("/getToken/test@example.com", json={}).status_code == 200

        response = client.put("/getToken/test@example.com", json={})
        assert response.status_code == 429
        assert response.json()["success"] is False

    def test_get_token_when_redis_down(self, client):
        app.dependency_overrides[get_redis] = lambda: UnreachableRedis()

        response = client.put("/getToken/test@example.com", json=test_user_data)
        assert response.status_code == 200
        assert verify_token(response.json()["accessToken"]).email == "test@example.com"

class TestAuthGate:

    def test_missing_token(self, client):
        response = client.get("/allusers")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Unauthorized Access"}

    def test_malformed_token(self, client):
        headers = {"Authorization": "Bearer invalid_token"}

        response = client.get("/allusers", headers=headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden Access"

    def test_non_bearer_scheme(self, client):
        response = client.get("/allusers", headers={"Authorization": "Token abc.def.ghi"})
        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden Access"

    def test_bearer_without_token(self, client):
        response = client.get("/allusers", headers={"Authorization": "Bearer"})
        assert response.status_code == 403

    def test_expired_token(self, client):
        response = client.get("/allusers", headers=expired_headers("test@example.com"))
        assert response.status_code == 403

    def test_token_signed_with_other_secret(self, client):
        token = jwt.encode({"email": "test@example.com"}, "not-the-secret", algorithm="HS256")

        response = client.get("/allusers", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    def test_valid_token(self, client):
        client.put("/getToken/test@example.com", json=test_user_data)

        response = client.get("/allusers", headers=auth_headers("test@example.com"))
        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == ["test@example.com"]

    def test_identity_mismatch(self, client):
        response = client.get(
            "/myappointment",
            params={"email": "other@example.com", "date": "2024-01-01"},
            headers=auth_headers("test@example.com")
        )
        assert response.status_code == 401

    def test_identity_missing(self, client):
        response = client.get(
            "/myappointment",
            params={"date": "2024-01-01"},
            headers=auth_headers("test@example.com")
        )
        assert response.status_code == 401

    def test_identity_match(self, client):
        response = client.get(
            "/myappointment",
            params={"email": "test@example.com", "date": "2024-01-01"},
            headers=auth_headers("test@example.com")
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "result": []}

class TestAdminRoles:

    def test_is_admin(self, client, make_admin):
        make_admin("admin@example.com")

        assert client.get("/isadmin", params={"email": "admin@example.com"}).json() == {"isAdmin": True}
        assert client.get("/isadmin", params={"email": "nobody@example.com"}).json() == {"isAdmin": False}

    def test_is_admin_without_email(self, client):
        response = client.get("/isadmin")
        assert response.status_code == 200
        assert response.json() == {"isAdmin": False}

    def test_non_admin_rejected(self, client):
        client.put("/getToken/test@example.com", json=test_user_data)

        response = client.put(
            "/admin/user",
            json={"email": "test@example.com"},
            headers=auth_headers("test@example.com")
        )
        assert response.status_code == 403
        assert response.json()["message"] == "You are not admin"

    def test_promote_user(self, client, make_admin, db_session):
        make_admin("admin@example.com")
        client.put("/getToken/test@example.com", json=test_user_data)

        response = client.put(
            "/admin/user",
            json={"email": "test@example.com"},
            headers=auth_headers("admin@example.com")
        )
        assert response.status_code == 200
        assert response.json()["modifiedCount"] == 1
        assert client.get("/isadmin", params={"email": "test@example.com"}).json()["isAdmin"] is True

    def test_promote_unknown_user_upserts(self, client, make_admin):
        make_admin("admin@example.com")

        response = client.put(
            "/admin/user",
            json={"email": "new@example.com"},
            headers=auth_headers("admin@example.com")
        )
        assert response.status_code == 200
        assert response.json()["upsertedId"] is not None
        assert client.get("/isadmin", params={"email": "new@example.com"}).json()["isAdmin"] is True

    def test_demote_keeps_profile(self, client, make_admin, db_session):
        make_admin("admin@example.com")
        make_admin("other@example.com")

        response = client.put(
            "/admin/user/demote",
            json={"email": "other@example.com"},
            headers=auth_headers("admin@example.com")
        )
        assert response.status_code == 200
        assert client.get("/isadmin", params={"email": "other@example.com"}).json()["isAdmin"] is False
        assert db_session.query(User).filter(User.email == "other@example.com").count() == 1

    def test_demote_unknown_user_creates_nothing(self, client, make_admin, db_session):
        make_admin("admin@example.com")

        response = client.put(
            "/admin/user/demote",
            json={"email": "ghost@example.com"},
            headers=auth_headers("admin@example.com")
        )
        assert response.status_code == 200
        assert response.json() == {"matchedCount": 0, "modifiedCount": 0, "upsertedId": None}
        assert db_session.query(User).filter(User.email == "ghost@example.com").count() == 0

    def test_delete_user(self, client, make_admin, db_session):
        make_admin("admin@example.com")
        client.put("/getToken/test@example.com", json=test_user_data)

        response = client.request(
            "DELETE",
            "/delete/user",
            json={"email": "test@example.com"},
            headers=auth_headers("admin@example.com")
        )
        assert response.status_code == 200
        assert response.json() == {"deletedCount": 1}
        assert db_session.query(User).filter(User.email == "test@example.com").count() == 0

    def test_delete_requires_admin(self, client):
        response = client.request(
            "DELETE",
            "/delete/user",
            json={"email": "test@example.com"},
            headers=auth_headers("test@example.com")
        )
        assert response.status_code == 403
