from __future__ import annotations

from app.models import SubscriptionRequest, User


def test_request_subscription_requires_registered_user(client, db):
    res = client.post("/request-subscription", json={"email": "ghost@x.com", "plan": "weekly"})
    assert res.status_code == 404


def test_request_subscription_rejects_free_plan(client, make_user):
    make_user("u@x.com")
    res = client.post("/request-subscription", json={"email": "u@x.com", "plan": "free"})
    assert res.status_code == 400


def test_pending_request_is_updated_not_duplicated(client, db, make_user):
    make_user("u@x.com", approved=False)
    first = client.post(
        "/request-subscription", json={"email": "u@x.com", "plan": "weekly", "contact": "0789906001"}
    ).json()
    assert first["request"]["amount"] == 500
    res = client.post("/request-subscription", json={"email": "u@x.com", "plan": "vip", "message": "paid"})

    body = res.json()
    assert body["success"] is True
    assert body["request"]["plan"] == "vip"
    assert body["request"]["amount"] == 1500
    assert body["request"]["status"] == "pending"
    assert db.query(SubscriptionRequest).count() == 1


def test_admin_lists_and_approves_request(client, db, admin, make_user, headers_for):
    user = make_user("u@x.com", approved=False)
    request_id = client.post(
        "/request-subscription", json={"email": "u@x.com", "plan": "monthly"}
    ).json()["request"]["id"]

    assert client.get("/subscription-requests", headers=headers_for(user)).status_code == 403
    listed = client.get("/subscription-requests", params={"status": "pending"}, headers=headers_for(admin)).json()
    assert [r["id"] for r in listed["requests"]] == [request_id]

    res = client.post("/approve-request", json={"requestId": request_id}, headers=headers_for(admin))
    body = res.json()
    assert body["success"] is True
    assert body["user"]["plan"] == "monthly"
    assert body["user"]["approved"] is True
    assert body["user"]["daysRemaining"] == 30

    db.expire_all()
    assert db.get(User, user.id).premium is True
    assert db.query(SubscriptionRequest).one().status == "approved"

    again = client.post("/approve-request", json={"requestId": request_id}, headers=headers_for(admin))
    assert again.status_code == 400


def test_approve_unknown_request(client, admin, headers_for):
    res = client.post("/approve-request", json={"requestId": "nope"}, headers=headers_for(admin))
    assert res.status_code == 404
