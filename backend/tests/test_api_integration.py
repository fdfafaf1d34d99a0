def _payload(section="A", **overrides):
    payload = {
        "class_name": "CSE",
        "year": 2,
        "section": section,
        "semester": 3,
        "created_by": "Dean",
        "faculties": [
            {
                "id": "F1",
                "name": "Asha",
                "subjects": [
                    {"name": "DBMS", "periods_per_week": 4},
                    {"name": "DBMS Lab", "type": "lab", "periods_per_week": 3},
                ],
            },
            {
                "id": "F2",
                "name": "Ravi",
                "subjects": [{"name": "Operating Systems", "periods_per_week": 3, "allocation": "continuous"}],
            },
        ],
    }
    payload.update(overrides)
    return payload


def test_generate_then_fetch_timetable(client):
    response = client.post("/api/timetables/generate", json=_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["warnings"] == []
    assert body["created_by"] == "Dean"
    assert len(body["entries"]) == 4 + 6 + 3
    assert all(entry["time_slot"]["type"] == "class" for entry in body["entries"])

    fetched = client.get(f"/api/timetables/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["entries"] == body["entries"]

    listing = client.get("/api/timetables")
    assert listing.status_code == 200
    [summary] = listing.json()
    assert summary["id"] == body["id"]
    assert summary["class_info"] == "CSE-2-A-3"
    assert summary["entry_count"] == 13
    assert summary["warning_count"] == 0


def test_generate_uses_default_author(client):
    payload = _payload()
    payload.pop("created_by")
    response = client.post("/api/timetables/generate", json=payload)
    assert response.status_code == 201
    assert response.json()["created_by"] == "Faculty"


def test_regenerating_a_class_replaces_the_stored_timetable(client):
    first = client.post("/api/timetables/generate", json=_payload()).json()
    second = client.post("/api/timetables/generate", json=_payload()).json()

    assert client.get(f"/api/timetables/{first['id']}").status_code == 404
    assert [item["id"] for item in client.get("/api/timetables").json()] == [second["id"]]
    assert [entry["id"] for entry in second["entries"]] == [entry["id"] for entry in first["entries"]]


def test_sections_share_the_faculty_registry(client):
    section_a = client.post("/api/timetables/generate", json=_payload("A")).json()
    section_b = client.post("/api/timetables/generate", json=_payload("B")).json()

    slots_a = {(entry["faculty_id"], entry["time_slot"]["day"], entry["time_slot"]["period"]) for entry in section_a["entries"]}
    slots_b = {(entry["faculty_id"], entry["time_slot"]["day"], entry["time_slot"]["period"]) for entry in section_b["entries"]}
    assert slots_a.isdisjoint(slots_b)

    schedule = client.get("/api/registry/faculty/F1").json()
    assert {item["class_info"] for item in schedule["reservations"]} == {"CSE-2-A-3", "CSE-2-B-3"}

    entry = section_a["entries"][0]
    availability = client.get(
        f"/api/registry/faculty/{entry['faculty_id']}/availability",
        params={"day": entry["time_slot"]["day"], "period": entry["time_slot"]["period"]},
    )
    assert availability.status_code == 200
    assert availability.json()["available"] is False

    assert len({item["class_name"] for item in client.get("/api/timetables", params={"class_name": "CSE"}).json()}) == 1
    assert client.get("/api/timetables", params={"class_name": "ECE"}).json() == []


def test_fully_booked_faculty_returns_scheduler_error(client):
    busy = _payload(
        class_name="X",
        faculties=[{"id": "F1", "name": "Asha", "subjects": [{"name": "Seminar", "periods_per_week": 48}]}],
    )
    first = client.post("/api/timetables/generate", json=busy)
    assert first.status_code == 201
    assert len(first.json()["entries"]) == 48

    blocked = _payload(faculties=[{"id": "F1", "name": "Asha", "subjects": [{"name": "DBMS", "periods_per_week": 4}]}])
    response = client.post("/api/timetables/generate", json=blocked)

    assert response.status_code == 400
    body = response.json()
    assert body["message"].startswith("Could not generate timetable")
    assert body["details"]["class_info"] == "CSE-2-A-3"
    [warning] = body["details"]["warnings"]
    assert warning["category"] == "cross_section_conflict"
    assert [item["class_name"] for item in client.get("/api/timetables").json()] == ["X"]


def test_subject_selection_limits_generation(client):
    response = client.post(
        "/api/timetables/generate",
        json=_payload(subject_selection={"F1": ["DBMS"]}),
    )
    assert response.status_code == 201
    subjects = {entry["subject_name"] for entry in response.json()["entries"]}
    assert subjects == {"DBMS"}
    assert client.get("/api/registry/faculty/F2").json()["reservations"] == []


def test_invalid_requests_are_rejected(client):
    assert client.post("/api/timetables/generate", json=_payload(faculties=[])).status_code == 422
    assert client.post("/api/timetables/generate", json=_payload(subject_selection={"F9": ["DBMS"]})).status_code == 422
    bad_subject = _payload(
        faculties=[
            {
                "id": "F1",
                "name": "Asha",
                "subjects": [{"name": "DBMS", "periods_per_week": 2, "allocation": "continuous", "continuous_periods": 4}],
            }
        ]
    )
    assert client.post("/api/timetables/generate", json=bad_subject).status_code == 422
    assert client.get("/api/registry/faculty/F1/availability", params={"day": "Monday", "period": 9}).status_code == 422


def test_delete_timetable_frees_its_reservations(client):
    body = client.post("/api/timetables/generate", json=_payload()).json()

    response = client.delete(f"/api/timetables/{body['id']}")
    assert response.status_code == 204
    assert client.get(f"/api/timetables/{body['id']}").status_code == 404
    assert client.get("/api/registry/faculty/F1").json()["reservations"] == []

    missing = client.delete(f"/api/timetables/{body['id']}")
    assert missing.status_code == 404
    assert missing.json()["message"] == f"Timetable with id {body['id']} not found"


def test_registry_maintenance_endpoints(client):
    client.post("/api/timetables/generate", json=_payload("A"))
    client.post("/api/timetables/generate", json=_payload("B"))

    released = client.delete("/api/registry/classes/CSE-2-A-3")
    assert released.status_code == 200
    assert released.json()["released"] == 13
    assert client.delete("/api/registry/classes/CSE-2-A-3").json()["released"] == 0

    cleared = client.delete("/api/registry")
    assert cleared.json()["released"] == 13
    assert client.get("/api/registry/faculty/F1").json() == {"faculty_id": "F1", "reservations": []}
