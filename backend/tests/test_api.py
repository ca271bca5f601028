CSV = "Subject,Section,Start,End,Days\nMath,001,9:00,10:00,MO\nArt,002,11:00,12:00,XX\n"
MAPPING = {"Subject": "subjectName", "Section": "sectionCode", "Start": "startTime", "End": "endTime", "Days": "daysOfWeek"}


def _upload(client, headers, name="schedule.csv", body=CSV):
    return client.post("/imports/upload", headers=headers, files={"file": (name, body.encode(), "text/csv")})


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_login_records_last_login_and_me(client, user, password):
    r = client.post("/auth/login", json={"email": user.email, "password": password})
    assert r.status_code == 200
    token = r.json()["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == "test@example.com"
    assert me["display_name"] == "Test User"
    assert me["last_login_at"] is not None


def test_login_rejects_bad_password(client, user):
    r = client.post("/auth/login", json={"email": user.email, "password": "wrong"})
    assert r.status_code == 401


def test_protected_endpoints_need_a_valid_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_update_display_name(client, auth_headers):
    r = client.put("/users/me", headers=auth_headers, json={"display_name": "New Name"})
    assert r.status_code == 200
    assert r.json()["display_name"] == "New Name"

    r = client.put("/users/me", headers=auth_headers, json={"display_name": ""})
    assert r.status_code == 422
    assert r.json()["detail"][0]["field"] == "displayName"


def test_import_flow(client, auth_headers):
    r = _upload(client, auth_headers)
    assert r.status_code == 200
    preview = r.json()
    assert preview["total_rows"] == 2
    job_id = preview["job_id"]

    jobs = client.get("/imports/jobs", headers=auth_headers).json()
    assert [j["id"] for j in jobs] == [job_id]
    assert jobs[0]["state"] == "preview"

    r = client.post(f"/imports/jobs/{job_id}/apply", headers=auth_headers)
    assert r.status_code == 400

    r = client.put(f"/imports/jobs/{job_id}/mapping", headers=auth_headers, json={"column_map": MAPPING})
    assert r.json()["column_map"] == MAPPING

    v = client.post(f"/imports/jobs/{job_id}/validate", headers=auth_headers).json()
    assert v["is_valid"] is False
    assert v["errors"][0]["row"] == 2

    result = client.post(f"/imports/jobs/{job_id}/apply", headers=auth_headers).json()
    assert result["summary"] == {"total_rows": 2, "created": 1, "skipped": 0, "failed": 1}

    items = client.get(f"/imports/jobs/{job_id}/items", headers=auth_headers, params={"status": "created"}).json()
    assert len(items) == 1
    assert items[0]["subject_id"] == "Math"

    assert client.get(f"/imports/jobs/{job_id}/result", headers=auth_headers).status_code == 200
    assert client.get(f"/imports/jobs/{job_id}/items", headers=auth_headers, params={"status": "x"}).status_code == 400

    assert client.delete(f"/imports/jobs/{job_id}", headers=auth_headers).json() == {"status": "ok"}
    assert client.get(f"/imports/jobs/{job_id}", headers=auth_headers).status_code == 404


def test_upload_rejects_unsupported_file(client, auth_headers):
    r = _upload(client, auth_headers, name="schedule.txt")
    assert r.status_code == 400


def test_login_ignores_email_case(client, user, password):
    r = client.post("/auth/login", json={"email": "Test@Example.com", "password": password})
    assert r.status_code == 200


def test_apply_is_queued_when_async(client, auth_headers, monkeypatch):
    from app.api.routers import imports as imports_router

    queued = []
    monkeypatch.setattr(imports_router.settings, "IMPORT_APPLY_ASYNC", True)
    monkeypatch.setattr(imports_router.apply_import_task, "delay", lambda job_id: queued.append(job_id))

    job_id = _upload(client, auth_headers).json()["job_id"]
    client.put(f"/imports/jobs/{job_id}/mapping", headers=auth_headers, json={"column_map": MAPPING})
    r = client.post(f"/imports/jobs/{job_id}/apply", headers=auth_headers)

    assert r.status_code == 200
    assert r.json() == {"job_id": job_id, "state": "preview", "queued": True}
    assert queued == [job_id]
