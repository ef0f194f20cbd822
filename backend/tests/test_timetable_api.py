def generate_all(client, month=3, year=2025, **extra):
    response = client.post("/api/timetables/generate", json={"groupId": "all", "month": month, "year": year, **extra})
    assert response.status_code == 200
    return response.json()


def test_generate_and_read_timetable(client, campus):
    result = generate_all(client)
    assert len(result["success"]) == 2
    assert result["failed"] == []
    assert result["unassigned"] == []

    cs_id = result["success"][1]
    response = client.get(f"/api/timetables/{cs_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["groupId"] == campus.groups["CS-2023-1A"]
    assert body["status"] == "draft"
    assert len(body["timeSlots"]) == 3
    first = body["timeSlots"][0]
    assert (first["day"], first["startTime"], first["endTime"]) == ("Monday", "08:00", "10:00")
    assert first["isLocked"] is False
    assert set(body["optimizationDetails"]) == {"gapScore", "distributionScore", "preferenceScore"}


def test_generate_single_group_and_duplicate(client, campus):
    payload = {"groupId": campus.groups["CS-2023-1A"], "month": 3, "year": 2025}
    assert len(client.post("/api/timetables/generate", json=payload).json()["success"]) == 1

    again = client.post("/api/timetables/generate", json=payload).json()
    assert again["success"] == []
    assert again["failed"][0]["groupId"] == campus.groups["CS-2023-1A"]
    assert again["failed"][0]["reason"].startswith("duplicate:")


def test_generate_all_endpoint(client, campus):
    response = client.post("/api/timetables/generate-all", json={"month": 4, "year": 2025})
    assert response.status_code == 200
    assert len(response.json()["success"]) == 2


def test_generate_rejects_invalid_month(client, campus):
    response = client.post("/api/timetables/generate", json={"month": 13, "year": 2025})
    assert response.status_code == 422


def test_list_and_group_filters(client, campus):
    generate_all(client, month=3)
    generate_all(client, month=4)

    assert len(client.get("/api/timetables/").json()) == 4
    assert len(client.get("/api/timetables/", params={"month": 3, "year": 2025}).json()) == 2
    by_group = client.get(f"/api/timetables/group/{campus.groups['CE-2023-1A']}").json()
    assert {item["month"] for item in by_group} == {3, 4}


def test_conflict_audit_is_clean_after_generation(client, campus):
    generate_all(client)
    response = client.get("/api/timetables/conflicts", params={"month": 3, "year": 2025})
    assert response.status_code == 200
    assert response.json() == {"month": 3, "year": 2025, "conflicts": []}


def test_manual_assignment_conflict_names_resource(client, campus):
    result = generate_all(client)
    cs_id = result["success"][1]

    response = client.post(
        f"/api/timetables/{cs_id}/assign",
        json={
            "subjectId": campus.subjects["CS101"],
            "venueId": campus.venues["Room201"],
            "day": "Monday",
            "startTime": "08:00",
            "endTime": "10:00",
        },
    )
    assert response.status_code == 409
    body = response.json()
    assert "Room201" in body["message"]
    assert body["details"]["conflicts"][0]["resourceType"] == "venue"
    assert body["details"]["cell"] == {"day": "Monday", "startTime": "08:00", "endTime": "10:00"}


def test_manual_assignment_success(client, campus):
    cs_id = generate_all(client)["success"][1]
    response = client.post(
        f"/api/timetables/{cs_id}/assign",
        json={
            "subjectId": campus.subjects["CS101"],
            "venueId": campus.venues["Room102"],
            "day": "Thursday",
            "startTime": "13:00",
            "endTime": "15:00",
        },
    )
    assert response.status_code == 200
    moved = next(item for item in response.json()["timeSlots"] if item["subjectId"] == campus.subjects["CS101"])
    assert moved["day"] == "Thursday"
    assert moved["manuallyAssigned"] is True


def test_manual_assignment_validates_times(client, campus):
    cs_id = generate_all(client)["success"][1]
    response = client.post(
        f"/api/timetables/{cs_id}/assign",
        json={
            "subjectId": campus.subjects["CS101"],
            "venueId": campus.venues["Room102"],
            "day": "Thursday",
            "startTime": "15:00",
            "endTime": "13:00",
        },
    )
    assert response.status_code == 422


def test_lock_status_score_and_delete(client, campus):
    cs_id = generate_all(client)["success"][1]
    slot = client.get(f"/api/timetables/{cs_id}").json()["timeSlots"][0]

    locked = client.patch(f"/api/timetables/{cs_id}/slot/{slot['id']}/lock", json={"isLocked": True})
    assert locked.status_code == 200
    assert next(item for item in locked.json()["timeSlots"] if item["id"] == slot["id"])["isLocked"] is True

    published = client.patch(f"/api/timetables/{cs_id}/status", json={"status": "published"})
    assert published.json()["status"] == "published"

    score = client.get(f"/api/timetables/{cs_id}/score").json()
    assert score["timetableId"] == cs_id
    assert 0.0 <= score["total"] <= 1.0

    optimized = client.post(f"/api/timetables/{cs_id}/optimize").json()
    assert optimized["optimizationScore"] >= score["total"]
    assert optimized["status"] == "published"
    kept = next(item for item in optimized["timeSlots"] if item["id"] == slot["id"])
    assert (kept["day"], kept["startTime"], kept["isLocked"]) == (slot["day"], slot["startTime"], True)
    assert client.get("/api/timetables/conflicts", params={"month": 3, "year": 2025}).json()["conflicts"] == []

    assert client.delete(f"/api/timetables/{cs_id}").json() == {"success": True}
    missing = client.get(f"/api/timetables/{cs_id}")
    assert missing.status_code == 404
    assert missing.json() == {"message": f"Timetable with id {cs_id} not found", "details": {}}


def test_regeneration_through_api_keeps_locked_slot(client, campus):
    cs_payload = {"groupId": campus.groups["CS-2023-1A"], "month": 3, "year": 2025}
    cs_id = client.post("/api/timetables/generate", json=cs_payload).json()["success"][0]
    slots = client.get(f"/api/timetables/{cs_id}").json()["timeSlots"]
    keep = next(item for item in slots if item["subjectId"] == campus.subjects["CS201"])
    client.patch(f"/api/timetables/{cs_id}/slot/{keep['id']}/lock", json={"isLocked": True})

    result = client.post("/api/timetables/generate", json={**cs_payload, "forceRegenerate": True}).json()
    assert result["success"] == [cs_id]

    regenerated = client.get(f"/api/timetables/{cs_id}").json()["timeSlots"]
    kept = next(item for item in regenerated if item["id"] == keep["id"])
    assert (kept["day"], kept["startTime"], kept["isLocked"]) == (keep["day"], keep["startTime"], True)
    assert len(regenerated) == 3


def test_unknown_slot_lock_is_not_found(client, campus):
    cs_id = generate_all(client)["success"][1]
    response = client.patch(f"/api/timetables/{cs_id}/slot/missing/lock", json={"isLocked": False})
    assert response.status_code == 404
