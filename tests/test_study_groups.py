GROUP = {
    "name": "Linear Algebra Crew",
    "description": "Weekly problem sets",
    "subject": "Mathematics",
    "max_members": 2,
    "meeting_schedule": "Tue 18:00",
    "tags": ["math", "exams"],
}


def _create(client, who, auth_headers, **overrides):
    return client.post("/api/v1/study-groups", json={**GROUP, **overrides}, headers=auth_headers(who))


def test_create_adds_creator_as_admin(client, fake_db, student, auth_headers):
    response = _create(client, student, auth_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["current_members"] == 1
    assert body["creator"]["id"] == student["id"]
    membership = fake_db.tables["study_group_members"][0]
    assert membership["is_admin"] is True


def test_faculty_cannot_create_group(client, faculty, auth_headers):
    assert _create(client, faculty, auth_headers).status_code == 403


def test_join_and_leave_toggle_membership(client, student, other_student, auth_headers):
    group_id = _create(client, student, auth_headers).json()["id"]

    joined = client.post(f"/api/v1/study-groups/{group_id}/join", headers=auth_headers(other_student))
    assert joined.status_code == 201
    assert joined.json()["current_members"] == 2
    assert client.get("/api/v1/study-groups/joined", headers=auth_headers(other_student)).json() == [group_id]

    left = client.delete(f"/api/v1/study-groups/{group_id}/join", headers=auth_headers(other_student))
    assert left.status_code == 200
    assert left.json()["current_members"] == 1
    assert client.get("/api/v1/study-groups/joined", headers=auth_headers(other_student)).json() == []


def test_full_group_rejects_join(client, fake_db, student, other_student, auth_headers):
    group_id = _create(client, student, auth_headers).json()["id"]
    client.post(f"/api/v1/study-groups/{group_id}/join", headers=auth_headers(other_student))
    third = fake_db.add_user(role="student", full_name="Third Wheel")
    response = client.post(f"/api/v1/study-groups/{group_id}/join", headers=auth_headers(third))
    assert response.status_code == 400
    assert response.json()["detail"] == "Study group is full"


def test_double_join_rejected(client, student, auth_headers):
    group_id = _create(client, student, auth_headers, max_members=5).json()["id"]
    response = client.post(f"/api/v1/study-groups/{group_id}/join", headers=auth_headers(student))
    assert response.status_code == 400


def test_list_active_newest_first(client, fake_db, student, auth_headers):
    first = _create(client, student, auth_headers, name="First").json()["id"]
    second = _create(client, student, auth_headers, name="Second").json()["id"]
    archived = _create(client, student, auth_headers, name="Archived").json()["id"]
    for row in fake_db.tables["study_groups"]:
        if row["id"] == archived:
            row["is_active"] = False

    response = client.get("/api/v1/study-groups", headers=auth_headers(student))
    assert [g["id"] for g in response.json()] == [second, first]


def test_unknown_group(client, student, auth_headers):
    response = client.post("/api/v1/study-groups/missing/join", headers=auth_headers(student))
    assert response.status_code == 404


def test_faculty_can_join(client, student, faculty, auth_headers):
    group_id = _create(client, student, auth_headers, max_members=5).json()["id"]
    response = client.post(f"/api/v1/study-groups/{group_id}/join", headers=auth_headers(faculty))
    assert response.status_code == 201
    assert response.json()["current_members"] == 2
    assert client.get("/api/v1/study-groups/joined", headers=auth_headers(faculty)).json() == [group_id]
