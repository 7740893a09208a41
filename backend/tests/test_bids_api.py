import uuid

import pytest


@pytest.fixture
def tender(client, directory):
    """Published tender of org B (five representatives: carol, dave, erin, frank, grace)."""
    resp = client.post(
        "/api/tenders/new",
        json={
            "name": "Fleet maintenance",
            "description": "Yearly service for 12 delivery vans",
            "serviceType": "Delivery",
            "organizationId": str(directory["org_b"].id),
            "creatorUsername": "carol",
        },
    )
    assert resp.status_code == 200, resp.text
    tender = resp.json()
    client.put(f"/api/tenders/{tender['id']}/status", params={"status": "Published", "username": "carol"})
    return tender


@pytest.fixture
def alice_id(directory):
    return str(directory["users"]["alice"].id)


def _bid(client, tender, author_id, name="Vans serviced in-house", author_type="User"):
    resp = client.post(
        "/api/bids/new",
        json={
            "name": name,
            "description": "Two mechanics on site every Friday",
            "tenderId": tender["id"],
            "authorType": author_type,
            "authorId": author_id,
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def _tender_status(client, tender):
    return client.get(f"/api/tenders/{tender['id']}/status", params={"username": "carol"}).json()


def test_create_and_list(client, tender, alice_id):
    bid = _bid(client, tender, alice_id)
    assert bid["status"] == "Created"
    assert bid["version"] == 1
    assert bid["authorType"] == "User"

    resp = client.get("/api/bids/my", params={"username": "alice"})
    assert [b["id"] for b in resp.json()] == [bid["id"]]

    resp = client.get(f"/api/bids/{tender['id']}/list", params={"username": "dave"})
    assert [b["id"] for b in resp.json()] == [bid["id"]]

    resp = client.get(f"/api/bids/{tender['id']}/list", params={"username": "alice"})
    assert resp.status_code == 403


def test_create_for_unknown_tender_or_author(client, tender, directory, alice_id):
    resp = client.post(
        "/api/bids/new",
        json={
            "name": "Ghost",
            "description": "No such tender",
            "tenderId": str(uuid.uuid4()),
            "authorType": "User",
            "authorId": alice_id,
        },
    )
    assert resp.status_code == 404
    assert resp.json() == {"reason": "tender does not exist"}

    resp = client.post(
        "/api/bids/new",
        json={
            "name": "Ghost",
            "description": "No such organization",
            "tenderId": tender["id"],
            "authorType": "Organization",
            "authorId": str(uuid.uuid4()),
        },
    )
    assert resp.status_code == 401
    assert resp.json() == {"reason": "organization does not exist"}


def test_bad_author_type_is_bad_request(client, tender, alice_id):
    resp = client.post(
        "/api/bids/new",
        json={
            "name": "Odd",
            "description": "Unsupported author",
            "tenderId": tender["id"],
            "authorType": "Robot",
            "authorId": alice_id,
        },
    )
    assert resp.status_code == 400
    assert resp.json() == {"reason": "incorrect request body"}


def test_status_edit_and_rollback(client, tender, alice_id):
    bid = _bid(client, tender, alice_id)
    url = f"/api/bids/{bid['id']}"

    resp = client.put(f"{url}/status", params={"status": "Published", "username": "carol"})
    assert resp.status_code == 200
    assert resp.json()["version"] == 2

    resp = client.get(f"{url}/status", params={"username": "carol"})
    assert resp.json() == "Published"

    resp = client.patch(f"{url}/edit", params={"username": "carol"}, json={"name": "Vans serviced on site"})
    assert resp.status_code == 200
    edited = resp.json()
    assert edited["version"] == 3
    assert edited["name"] == "Vans serviced on site"
    assert edited["description"] == "Two mechanics on site every Friday"

    resp = client.put(f"{url}/rollback/1", params={"username": "carol"})
    assert resp.status_code == 200
    restored = resp.json()
    assert restored["version"] == 4
    assert restored["name"] == "Vans serviced in-house"
    assert restored["status"] == "Created"

    resp = client.get(f"{url}/history", params={"username": "carol"})
    assert [h["version"] for h in resp.json()] == [1, 2, 3]


def test_quorum_approval_closes_tender(client, tender, alice_id):
    # alice belongs to org A, which has two representatives: quorum 2.
    bid = _bid(client, tender, alice_id)
    url = f"/api/bids/{bid['id']}/submit_decision"

    resp = client.put(url, params={"decision": "Approved", "username": "carol"})
    assert resp.status_code == 200
    assert _tender_status(client, tender) == "Published"

    resp = client.put(url, params={"decision": "Approved", "username": "dave"})
    assert resp.status_code == 200
    assert _tender_status(client, tender) == "Closed"

    resp = client.put(url, params={"decision": "Approved", "username": "erin"})
    assert resp.status_code == 400
    assert resp.json() == {"reason": "bid is already approved"}


def test_rejection_locks_bid(client, tender, alice_id):
    bid = _bid(client, tender, alice_id)
    url = f"/api/bids/{bid['id']}/submit_decision"

    assert client.put(url, params={"decision": "Rejected", "username": "carol"}).status_code == 200
    resp = client.put(url, params={"decision": "Approved", "username": "dave"})
    assert resp.status_code == 400
    assert resp.json() == {"reason": "bid is already rejected"}


def test_unknown_decision_is_bad_request(client, tender, alice_id):
    bid = _bid(client, tender, alice_id)
    resp = client.put(
        f"/api/bids/{bid['id']}/submit_decision", params={"decision": "Maybe", "username": "carol"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"reason": "incorrect decision"}


def test_feedback_and_reviews(client, tender, alice_id):
    bid = _bid(client, tender, alice_id)

    resp = client.put(
        f"/api/bids/{bid['id']}/feedback",
        params={"bidFeedback": "Please add spare parts pricing", "username": "carol"},
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == bid["id"]

    resp = client.get(
        f"/api/bids/{tender['id']}/reviews",
        params={"authorUsername": "alice", "requesterUsername": "dave"},
    )
    assert resp.status_code == 200
    assert [r["description"] for r in resp.json()] == ["Please add spare parts pricing"]

    resp = client.get(
        f"/api/bids/{tender['id']}/reviews",
        params={"authorUsername": "alice", "requesterUsername": "alice"},
    )
    assert resp.status_code == 403


def test_feedback_requires_text(client, tender, alice_id):
    bid = _bid(client, tender, alice_id)
    resp = client.put(f"/api/bids/{bid['id']}/feedback", params={"username": "carol"})
    assert resp.status_code == 400
    assert resp.json() == {"reason": "bidFeedback param is required"}


def test_unknown_bid(client, tender):
    resp = client.get(f"/api/bids/{uuid.uuid4()}/status", params={"username": "carol"})
    assert resp.status_code == 404
    assert resp.json() == {"reason": "bid does not exist"}


def test_decision_is_logged_once(client, tender, alice_id, caplog):
    bid = _bid(client, tender, alice_id)
    caplog.set_level("INFO", logger="procurement")

    resp = client.put(
        f"/api/bids/{bid['id']}/submit_decision", params={"decision": "Approved", "username": "carol"},
    )
    assert resp.status_code == 200
    decision_logs = [r for r in caplog.records if bid["id"] in r.getMessage() and "Approved" in r.getMessage()]
    assert len(decision_logs) == 1
