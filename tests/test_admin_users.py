import pytest

from bloomhub.repositories.role_repo import RoleRepository
from bloomhub.routers import admin as admin_router


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(client, register_customer, session):
    """A customer promoted through a stored "admin" grant."""
    registered = register_customer("boss@example.com", "Secret123")
    RoleRepository().grant(session, "boss@example.com", "admin")
    session.commit()
    return registered["token"]


def test_customer_without_admin_role_gets_403(client, register_customer):
    token = register_customer()["token"]

    response = client.get("/api/admin/users", headers=auth_header(token))

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


def test_admin_routes_require_token(client):
    assert client.get("/api/admin/users").status_code == 401


def test_florist_token_cannot_use_admin_routes(client, register_florist):
    token = register_florist()["token"]

    assert client.get("/api/admin/users", headers=auth_header(token)).status_code == 401


def test_admin_grant_opens_admin_routes(client, admin_token):
    response = client.get("/api/admin/users", headers=auth_header(admin_token))

    assert response.status_code == 200
    boss = response.json()[0]
    assert boss["email"] == "boss@example.com"
    assert boss["roles"] == ["admin", "customer"]


def test_allow_listed_email_is_admin_with_zero_grants(client, register_customer, session):
    token = register_customer("ops@example.com", "Secret123")["token"]
    RoleRepository().revoke_all(session, "ops@example.com")
    session.commit()

    response = client.get("/api/admin/users", headers=auth_header(token))

    assert response.status_code == 200
    me = client.get("/api/auth/user", headers=auth_header(token)).json()
    assert me["roles"] == []
    assert me["isAdmin"] is True


def test_operator_token_reaches_admin_routes(client, operator_password):
    login = client.post(
        "/api/auth/customer/login",
        json={"email": "operator@example.com", "password": operator_password},
    )

    response = client.get("/api/admin/users", headers=auth_header(login.json()["token"]))

    assert response.status_code == 200


def test_create_user_returns_temp_password(client, admin_token):
    response = client.post(
        "/api/admin/users",
        json={"email": "new@example.com", "firstName": "New", "lastName": "Person", "role": "florist"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 201
    created = response.json()
    assert created["role"] == "florist"
    assert created["tempPassword"]

    login = client.post(
        "/api/auth/customer/login",
        json={"email": "new@example.com", "password": created["tempPassword"]},
    )
    assert login.status_code == 200


def test_create_user_with_password_has_no_temp_password(client, admin_token):
    response = client.post(
        "/api/admin/users",
        json={"email": "new@example.com", "password": "Chosen123"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 201
    assert response.json()["tempPassword"] is None


def test_create_duplicate_user_is_400(client, admin_token):
    response = client.post(
        "/api/admin/users",
        json={"email": "boss@example.com"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 400


def test_update_user_moves_grants_with_email(client, admin_token, register_customer, session):
    user_id = register_customer("old@example.com")["user"]["id"]

    response = client.put(
        f"/api/admin/users/{user_id}",
        json={"email": "new@example.com", "firstName": "Renamed", "role": "admin"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["firstName"] == "Renamed"
    assert body["role"] == "admin"
    assert body["roles"] == ["admin", "customer"]
    assert RoleRepository().list_roles(session, "old@example.com") == []


def test_demoted_admin_loses_admin_access(client, admin_token):
    deputy_id = client.post(
        "/api/admin/users",
        json={"email": "deputy@example.com", "password": "Deputy123", "role": "admin"},
        headers=auth_header(admin_token),
    ).json()["id"]
    login = client.post(
        "/api/auth/customer/login",
        json={"email": "deputy@example.com", "password": "Deputy123"},
    )
    deputy = login.json()["token"]
    assert client.get("/api/admin/users", headers=auth_header(deputy)).status_code == 200

    response = client.put(
        f"/api/admin/users/{deputy_id}",
        json={"role": "customer"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    assert response.json()["role"] == "customer"
    assert response.json()["roles"] == ["customer"]
    assert client.get("/api/admin/users", headers=auth_header(deputy)).status_code == 403


def test_operator_email_is_reserved_for_admin_created_users(client, admin_token, register_customer):
    created = client.post(
        "/api/admin/users",
        json={"email": "operator@example.com"},
        headers=auth_header(admin_token),
    )
    user_id = register_customer("plain@example.com")["user"]["id"]
    renamed = client.put(
        f"/api/admin/users/{user_id}",
        json={"email": "operator@example.com"},
        headers=auth_header(admin_token),
    )

    assert created.status_code == 400
    assert renamed.status_code == 400


def test_concurrent_create_user_is_400(client, admin_token, monkeypatch):
    monkeypatch.setattr(admin_router.service.repo, "get_by_email", lambda session, email: None)

    response = client.post(
        "/api/admin/users",
        json={"email": "boss@example.com"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 400


def test_update_password_allows_login_with_new_password(client, admin_token, register_customer):
    user_id = register_customer("shopper@example.com", "Secret123")["user"]["id"]

    client.put(
        f"/api/admin/users/{user_id}",
        json={"password": "Changed123"},
        headers=auth_header(admin_token),
    )

    old = client.post("/api/auth/customer/login", json={"email": "shopper@example.com", "password": "Secret123"})
    new = client.post("/api/auth/customer/login", json={"email": "shopper@example.com", "password": "Changed123"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_get_unknown_user_is_404(client, admin_token):
    response = client.get("/api/admin/users/missing", headers=auth_header(admin_token))

    assert response.status_code == 404


def test_delete_user_cascades_role_grants(client, admin_token, register_customer, session):
    registered = register_customer("gone@example.com")
    user_id = registered["user"]["id"]

    response = client.delete(f"/api/admin/users/{user_id}", headers=auth_header(admin_token))

    assert response.status_code == 204
    assert RoleRepository().list_roles(session, "gone@example.com") == []
    assert client.get(f"/api/admin/users/{user_id}", headers=auth_header(admin_token)).status_code == 404
    # The deleted user's token no longer resolves.
    assert client.get("/api/auth/user", headers=auth_header(registered["token"])).status_code == 401


def test_grant_role_twice_keeps_one_grant(client, admin_token, register_customer, session):
    user_id = register_customer("multi@example.com")["user"]["id"]

    for _ in range(2):
        response = client.post(
            f"/api/admin/users/{user_id}/roles",
            json={"role": "admin"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 200

    assert response.json()["roles"] == ["admin", "customer"]
    assert RoleRepository().count(session, "multi@example.com", "admin") == 1


def test_revoke_role(client, admin_token, register_customer):
    user_id = register_customer("multi@example.com")["user"]["id"]

    response = client.delete(
        f"/api/admin/users/{user_id}/roles/customer",
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    assert response.json()["roles"] == []


def test_admin_florist_listing_reports_completeness(client, admin_token, register_florist):
    token = register_florist("a@b.com")["token"]
    register_florist("c@d.com")
    client.post(
        "/api/florist/profile/setup",
        json={"businessName": "Acme", "address": "1 Main St", "city": "X", "state": "Y", "zipCode": "00000"},
        headers=auth_header(token),
    )

    response = client.get("/api/admin/florists", headers=auth_header(admin_token))

    assert response.status_code == 200
    state = {f["auth"]["email"]: f["profileComplete"] for f in response.json()}
    assert state == {"a@b.com": True, "c@d.com": False}
