# tests/v1/test_queues.py
"""Tests for queue endpoints."""

from fastapi import status

from dispatch_terminal.models import Period


def _join(client, headers, period: str, driver_id: str):
    return client.post(f"/api/v1/queues/{period}", json={"driver_id": driver_id}, headers=headers)


def _names(entries) -> list[str]:
    return [entry["name"] for entry in entries]


def test_join_then_drag_to_head(client, guest_headers, make_driver) -> None:
    """Two arrivals queue in order; dragging the second to 0 swaps them."""
    a = make_driver("Ana", fleet_number="F-1")
    b = make_driver("Bruno")

    first = _join(client, guest_headers, "morning", a.id)
    assert first.status_code == status.HTTP_201_CREATED
    assert first.json()["period"] == "Manhã"
    assert first.json()["fleet_number"] == "F-1"
    _join(client, guest_headers, "morning", b.id)

    queue = client.get("/api/v1/queues/morning", headers=guest_headers).json()
    assert _names(queue) == ["Ana", "Bruno"]

    moved = client.post(
        "/api/v1/queues/morning/move",
        json={"from_index": 1, "to_index": 0},
        headers=guest_headers,
    )
    assert moved.status_code == status.HTTP_200_OK
    entries = moved.json()
    assert _names(entries) == ["Bruno", "Ana"]
    assert entries[0]["arrival_time"] < entries[1]["arrival_time"]


def test_join_twice_conflicts(client, guest_headers, make_driver) -> None:
    driver = make_driver("Ana")
    _join(client, guest_headers, "afternoon", driver.id)
    response = _join(client, guest_headers, "afternoon", driver.id)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_unknown_period_and_driver(client, guest_headers, make_driver) -> None:
    driver = make_driver("Ana")
    assert _join(client, guest_headers, "night", driver.id).status_code == 404
    assert _join(client, guest_headers, "morning", "missing").status_code == 404


def test_period_accepts_stored_label(client, guest_headers, make_driver) -> None:
    driver = make_driver("Ana")
    response = _join(client, guest_headers, "Tarde", driver.id)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["period"] == "Tarde"


def test_list_both_queues(client, guest_headers, make_driver, enqueue) -> None:
    enqueue(make_driver("Ana"), Period.MORNING, 2)
    enqueue(make_driver("Bia"), Period.MORNING, 1)
    enqueue(make_driver("Caio"), Period.AFTERNOON, 1)

    data = client.get("/api/v1/queues", headers=guest_headers).json()
    assert _names(data["morning"]) == ["Bia", "Ana"]
    assert _names(data["afternoon"]) == ["Caio"]


def test_reorder_endpoint(client, guest_headers, make_driver, enqueue) -> None:
    entries = [enqueue(make_driver(name), Period.MORNING, i) for i, name in enumerate("ABC")]

    response = client.put(
        "/api/v1/queues/morning/order",
        json={"queue_ids": [entries[2].id, entries[0].id]},
        headers=guest_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert _names(response.json()) == ["C", "A", "B"]


def test_reorder_rejects_foreign_ids(client, guest_headers, make_driver, enqueue) -> None:
    enqueue(make_driver("A"), Period.MORNING, 1)
    other = enqueue(make_driver("B"), Period.AFTERNOON, 1)

    response = client.put(
        "/api/v1/queues/morning/order",
        json={"queue_ids": [other.id]},
        headers=guest_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_move_out_of_range(client, guest_headers, make_driver, enqueue) -> None:
    enqueue(make_driver("A"), Period.MORNING, 1)
    response = client.post(
        "/api/v1/queues/morning/move",
        json={"from_index": 0, "to_index": 3},
        headers=guest_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_top_and_up(client, guest_headers, make_driver, enqueue) -> None:
    entries = [enqueue(make_driver(name), Period.AFTERNOON, i) for i, name in enumerate("ABC")]

    up = client.post(
        f"/api/v1/queues/afternoon/entries/{entries[2].id}/up", headers=guest_headers
    )
    assert _names(up.json()) == ["A", "C", "B"]

    top = client.post(
        f"/api/v1/queues/afternoon/entries/{entries[1].id}/top", headers=guest_headers
    )
    assert _names(top.json()) == ["B", "A", "C"]

    missing = client.post("/api/v1/queues/afternoon/entries/nope/top", headers=guest_headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_remove_entry_and_by_position(client, guest_headers, make_driver, enqueue) -> None:
    entries = [enqueue(make_driver(name), Period.MORNING, i) for i, name in enumerate("ABC")]

    response = client.delete(f"/api/v1/queues/entries/{entries[0].id}", headers=guest_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = client.delete("/api/v1/queues/morning/positions/2", headers=guest_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert _names(client.get("/api/v1/queues/morning", headers=guest_headers).json()) == ["B"]

    assert client.delete("/api/v1/queues/morning/positions/5", headers=guest_headers).status_code == 404
    assert client.delete("/api/v1/queues/morning/positions/0", headers=guest_headers).status_code == 422


def test_queues_are_tenant_scoped(
    client, guest_headers, other_guest_headers, admin_headers, make_driver, enqueue
) -> None:
    mine = enqueue(make_driver("Mine"), Period.MORNING, 1)
    enqueue(make_driver("Theirs", tenant_id="tenant-b"), Period.MORNING, 2)

    assert _names(client.get("/api/v1/queues/morning", headers=guest_headers).json()) == ["Mine"]
    assert _names(client.get("/api/v1/queues/morning", headers=other_guest_headers).json()) == [
        "Theirs"
    ]
    assert len(client.get("/api/v1/queues/morning", headers=admin_headers).json()) == 2

    response = client.delete(f"/api/v1/queues/entries/{mine.id}", headers=other_guest_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
