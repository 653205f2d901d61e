"""
Tests for the admin console endpoints.
"""
import pytest
from skillswap.models import AdminMessage, OfferedSkill, Rating, Swap, SwapStatus, User


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", email="admin@example.com", is_admin=True)


@pytest.mark.parametrize("method, path", [
    ("get", "/api/admin/users"),
    ("put", "/api/admin/users/1/ban"),
    ("put", "/api/admin/users/1/unban"),
    ("delete", "/api/admin/users/1"),
    ("get", "/api/admin/swaps"),
    ("delete", "/api/admin/swaps/1"),
    ("get", "/api/admin/stats"),
    ("get", "/api/admin/messages"),
    ("delete", "/api/admin/messages/1"),
])
def test_admin_routes_need_admin(client, headers, make_user, method, path):
    user = make_user()
    assert getattr(client, method)(path).status_code == 401

    response = getattr(client, method)(path, headers=headers(user))
    assert response.status_code == 403
    assert response.json() == {"message": "Access denied. Admin privileges required.", "code": "FORBIDDEN"}


def test_list_users(client, headers, admin, make_user, make_skill, offer):
    alice = make_user(name="Alice", email="alice@example.com", is_public=False)
    make_user(name="Bob", email="bob@example.com", is_banned=True)
    offer(alice, make_skill("Guitar"))

    response = client.get("/api/admin/users", headers=headers(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["total"] == 3
    by_name = {u["name"]: u for u in data["users"]}
    assert by_name["Alice"]["email"] == "alice@example.com"
    assert [s["name"] for s in by_name["Alice"]["skills_offered"]] == ["Guitar"]

    response = client.get("/api/admin/users", headers=headers(admin), params={"status": "banned"})
    assert [u["name"] for u in response.json()["users"]] == ["Bob"]

    response = client.get("/api/admin/users", headers=headers(admin), params={"search": "alice@"})
    assert [u["name"] for u in response.json()["users"]] == ["Alice"]

    response = client.get("/api/admin/users", headers=headers(admin), params={"status": "sleeping"})
    assert response.status_code == 400


def test_ban_and_unban(client, headers, admin, make_user, db_session):
    user = make_user()

    response = client.put(f"/api/admin/users/{user.id}/ban", headers=headers(admin))
    assert response.status_code == 200
    assert response.json() == {"message": "User banned successfully"}
    # Banning twice is fine
    assert client.put(f"/api/admin/users/{user.id}/ban", headers=headers(admin)).status_code == 200

    db_session.expire_all()
    assert db_session.get(User, user.id).is_banned is True
    assert client.get("/api/auth/me", headers=headers(user)).status_code == 403

    response = client.put(f"/api/admin/users/{user.id}/unban", headers=headers(admin))
    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.get(User, user.id).is_banned is False

    response = client.put(f"/api/admin/users/{user.id}/ban", headers=headers(admin), json={"is_banned": False})
    assert response.json() == {"message": "User unbanned successfully"}


def test_ban_unknown_or_self(client, headers, admin):
    assert client.put("/api/admin/users/9999/ban", headers=headers(admin)).status_code == 404

    response = client.put(f"/api/admin/users/{admin.id}/ban", headers=headers(admin))
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"


def test_delete_user_cascades(client, headers, admin, alice_bob, make_swap, db_session):
    alice, bob, javascript, cooking = alice_bob
    alice_id, bob_id = alice.id, bob.id
    swap = make_swap(alice, bob, [javascript], [cooking], status=SwapStatus.COMPLETED)
    swap_id = swap.id
    db_session.add(Rating(swap_id=swap_id, rater_id=bob_id, rated_id=alice_id, score=5))
    db_session.commit()

    response = client.delete(f"/api/admin/users/{alice_id}", headers=headers(admin))
    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}

    db_session.expire_all()
    assert db_session.get(User, alice_id) is None
    assert db_session.get(Swap, swap_id) is None
    assert db_session.query(Rating).count() == 0
    assert db_session.query(OfferedSkill).filter(OfferedSkill.user_id == alice_id).count() == 0
    assert db_session.get(User, bob_id) is not None

    assert client.delete(f"/api/admin/users/{admin.id}", headers=headers(admin)).status_code == 400
    assert client.delete("/api/admin/users/9999", headers=headers(admin)).status_code == 404


def test_list_and_delete_swaps(client, headers, admin, alice_bob, make_swap, db_session):
    alice, bob, javascript, cooking = alice_bob
    pending = make_swap(alice, bob, [javascript], [cooking])
    done = make_swap(alice, bob, [javascript], [cooking], status=SwapStatus.COMPLETED)
    pending_id, done_id = pending.id, done.id

    response = client.get("/api/admin/swaps", headers=headers(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["total"] == 2
    listed = data["swaps"][0]
    assert listed["requester"]["name"] == "Alice"
    assert listed["provider"]["name"] == "Bob"
    assert [s["name"] for s in listed["skills_offered"]] == ["JavaScript"]

    response = client.get("/api/admin/swaps", headers=headers(admin), params={"status": "completed"})
    assert [s["id"] for s in response.json()["swaps"]] == [done_id]

    response = client.delete(f"/api/admin/swaps/{done_id}", headers=headers(admin))
    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.get(Swap, done_id) is None
    assert db_session.get(Swap, pending_id) is not None

    assert client.delete(f"/api/admin/swaps/{done_id}", headers=headers(admin)).status_code == 404


def test_stats(client, headers, admin, alice_bob, make_swap, make_user, db_session):
    alice, bob, javascript, cooking = alice_bob
    make_user(is_banned=True)
    make_swap(alice, bob, [javascript], [cooking])
    make_swap(alice, bob, [javascript], [cooking], status=SwapStatus.REJECTED)
    done = make_swap(alice, bob, [javascript], [cooking], status=SwapStatus.COMPLETED)
    db_session.add_all([
        Rating(swap_id=done.id, rater_id=alice.id, rated_id=bob.id, score=5),
        Rating(swap_id=done.id, rater_id=bob.id, rated_id=alice.id, score=2),
    ])
    db_session.commit()

    response = client.get("/api/admin/stats", headers=headers(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["users"] == {"total_users": 4, "banned_users": 1, "new_users_30d": 4}
    assert data["swaps"] == {
        "total_swaps": 3,
        "pending_swaps": 1,
        "accepted_swaps": 0,
        "rejected_swaps": 1,
        "cancelled_swaps": 0,
        "completed_swaps": 1,
        "new_swaps_30d": 3,
    }
    assert data["ratings"] == {"avg_rating": 3.5, "total_ratings": 2}
    assert {s["name"] for s in data["popular_skills"]} == {"JavaScript", "Cooking"}


def test_stats_without_ratings(client, headers, admin):
    data = client.get("/api/admin/stats", headers=headers(admin)).json()
    assert data["ratings"] == {"avg_rating": None, "total_ratings": 0}
    assert data["popular_skills"] == []


def test_message_board(client, headers, admin, db_session):
    response = client.post(
        "/api/admin/messages",
        headers=headers(admin),
        json={"title": "Maintenance", "message": "Down at noon", "type": "warning"},
    )
    assert response.status_code == 201
    assert response.json()["message"] == "Admin message created successfully"
    message_id = response.json()["message_id"]

    client.post("/api/admin/messages", headers=headers(admin), json={"title": "Hello", "message": "Welcome"})

    response = client.get("/api/admin/messages/active")
    assert response.status_code == 200
    assert {m["title"] for m in response.json()["messages"]} == {"Maintenance", "Hello"}

    response = client.put(
        f"/api/admin/messages/{message_id}",
        headers=headers(admin),
        json={"is_active": False},
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert response.json()["type"] == "warning"
    assert response.json()["title"] == "Maintenance"

    response = client.get("/api/admin/messages/active")
    assert [m["title"] for m in response.json()["messages"]] == ["Hello"]

    response = client.get("/api/admin/messages", headers=headers(admin))
    assert len(response.json()["messages"]) == 2

    response = client.delete(f"/api/admin/messages/{message_id}", headers=headers(admin))
    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.get(AdminMessage, message_id) is None

    assert client.delete(f"/api/admin/messages/{message_id}", headers=headers(admin)).status_code == 404
    assert client.put(
        f"/api/admin/messages/{message_id}", headers=headers(admin), json={"title": "x"}
    ).status_code == 404


def test_message_validation(client, headers, admin):
    response = client.post(
        "/api/admin/messages",
        headers=headers(admin),
        json={"title": "", "message": "Empty title"},
    )
    assert response.status_code == 400

    response = client.post(
        "/api/admin/messages",
        headers=headers(admin),
        json={"title": "Bad", "message": "Unknown type", "type": "shout"},
    )
    assert response.status_code == 400
