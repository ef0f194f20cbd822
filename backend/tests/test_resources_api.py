def lecturer_payload(**overrides):
    payload = {"name": "Ada Lovelace", "email": "ada@university.edu", "department": "Computer Science"}
    payload.update(overrides)
    return payload


def test_create_and_list_resources(client):
    lecturer = client.post("/api/lecturers/", json=lecturer_payload())
    assert lecturer.status_code == 201
    lecturer_id = lecturer.json()["id"]

    subject = client.post(
        "/api/subjects/",
        json={
            "name": "Compilers",
            "code": "CS330",
            "department": "Computer Science",
            "lecturerId": lecturer_id,
            "preferredDays": ["Mon", "Wednesday"],
            "preferredTimeRanges": [{"startTime": "08:00", "endTime": "12:00"}],
            "requiredVenueTypes": ["Lecture"],
        },
    )
    assert subject.status_code == 201
    body = subject.json()
    assert body["preferredDays"] == ["Monday", "Wednesday"]
    assert body["preferredTimeRanges"] == [{"startTime": "08:00", "endTime": "12:00"}]
    assert body["requiredVenueTypes"] == ["lecture"]
    assert body["status"] == "active"

    venue = client.post(
        "/api/venues/",
        json={"name": "Hall A", "building": "Main", "department": "Computer Science", "capacity": 80, "type": "lecture"},
    )
    assert venue.status_code == 201

    group = client.post(
        "/api/groups/",
        json={"name": "CS-2024-1A", "faculty": "Science", "department": "Computer Science", "rosterSize": 40},
    )
    assert group.status_code == 201
    assert group.json()["rosterSize"] == 40
    assert group.json()["groupType"] == "weekday"

    assert [item["code"] for item in client.get("/api/subjects/").json()] == ["CS330"]
    assert len(client.get("/api/lecturers/").json()) == 1
    assert len(client.get("/api/venues/").json()) == 1
    assert len(client.get("/api/groups/").json()) == 1


def test_duplicates_are_rejected(client):
    assert client.post("/api/lecturers/", json=lecturer_payload()).status_code == 201
    assert client.post("/api/lecturers/", json=lecturer_payload(name="Other")).status_code == 409

    group = {"name": "CS-2024-1A", "faculty": "Science", "department": "Computer Science"}
    assert client.post("/api/groups/", json=group).status_code == 201
    assert client.post("/api/groups/", json=group).status_code == 409


def test_subject_requires_existing_lecturer(client):
    response = client.post(
        "/api/subjects/",
        json={"name": "Compilers", "code": "CS330", "department": "Computer Science", "lecturerId": "missing"},
    )
    assert response.status_code == 400


def test_subject_rejects_unknown_day_and_venue_type(client):
    lecturer_id = client.post("/api/lecturers/", json=lecturer_payload()).json()["id"]
    base = {"name": "Compilers", "code": "CS330", "department": "Computer Science", "lecturerId": lecturer_id}

    assert client.post("/api/subjects/", json={**base, "preferredDays": ["Someday"]}).status_code == 422
    assert client.post("/api/subjects/", json={**base, "requiredVenueTypes": ["studio"]}).status_code == 422


def test_resources_in_use_cannot_be_deleted(client, campus):
    client.post("/api/timetables/generate", json={"groupId": campus.groups["CS-2023-1A"], "month": 3, "year": 2025})

    assert client.delete(f"/api/lecturers/{campus.lecturers['John Smith']}").status_code == 409
    assert client.delete(f"/api/subjects/{campus.subjects['CS101']}").status_code == 409
    assert client.delete(f"/api/venues/{campus.venues['Room101']}").status_code == 409
    assert client.delete(f"/api/groups/{campus.groups['CS-2023-1A']}").status_code == 409

    assert client.delete(f"/api/venues/{campus.venues['Lab1']}").json() == {"success": True}
    assert client.delete(f"/api/groups/{campus.groups['CE-2023-1A']}").json() == {"success": True}
    assert client.delete("/api/venues/missing").status_code == 404


def test_schedule_settings_endpoint(client):
    response = client.get("/api/settings/schedule")
    assert response.status_code == 200
    body = response.json()
    assert body["days"] == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert body["timeWindows"][0] == {"startTime": "08:00", "endTime": "10:00"}
    assert body["supportingDepartments"] == ["Mathematics"]
    assert body["scoreWeights"] == {"gap": 1.0, "distribution": 1.0, "preference": 1.0}
