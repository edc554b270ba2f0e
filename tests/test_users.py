"""
tests/test_users.py
Profile administration: admin-only access and self-protection rules.
"""

from fastapi.testclient import TestClient

from tests.conftest import auth_headers, future


def test_user_cannot_list_users(client: TestClient, user):
    assert client.get("/users/", headers=auth_headers(user)).status_code == 403


def test_admin_lists_users(client: TestClient, admin_user, user):
    response = client.get("/users/", headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {"admin@family.no", "kari@family.no"}


def test_admin_edits_other_profile(client: TestClient, admin_user, user):
    response = client.patch(
        f"/users/{user.id}",
        headers=auth_headers(admin_user),
        json={"full_name": "Kari N.", "is_admin": True},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["full_name"] == "Kari N."
    assert data["is_admin"] is True


def test_admin_cannot_change_own_admin_flag(client: TestClient, admin_user):
    response = client.patch(f"/users/{admin_user.id}", headers=auth_headers(admin_user), json={"is_admin": False})
    assert response.status_code == 403
    assert response.json()["detail"] == "Cannot change your own admin status"


def test_admin_can_rename_self(client: TestClient, admin_user):
    response = client.patch(f"/users/{admin_user.id}", headers=auth_headers(admin_user), json={"full_name": "Anne"})
    assert response.status_code == 200
    assert response.json()["full_name"] == "Anne"


def test_edit_missing_profile(client: TestClient, admin_user):
    response = client.patch("/users/nobody", headers=auth_headers(admin_user), json={"full_name": "X"})
    assert response.status_code == 404


def test_admin_cannot_delete_self(client: TestClient, admin_user):
    response = client.delete(f"/users/{admin_user.id}", headers=auth_headers(admin_user))
    assert response.status_code == 403


def test_deleting_user_removes_their_bookings(client: TestClient, admin_user, user, cabin, make_booking):
    booking_id = make_booking(cabin, user, future(3), future(4)).id
    user_id = user.id

    assert client.delete(f"/users/{user_id}", headers=auth_headers(admin_user)).status_code == 200
    assert client.get(f"/bookings/{booking_id}", headers=auth_headers(admin_user)).status_code == 404
