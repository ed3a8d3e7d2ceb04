from conftest import PASSWORD, auth_headers
from modules.users.models.organization import Branch, Division


def test_register_and_login_with_cookie(client):
    resp = client.post("/api/auth/register", json={
        "nomor_id": "FN-001", "nama_lengkap": "Staff Finance", "email": "finance@ramayana.co.id",
        "password": "rahasia", "divisi": "Finance", "cabang": "Surabaya", "role": "IT",
    })
    assert resp.status_code == 201, resp.text
    assert resp.json()["user"]["email"] == "finance@ramayana.co.id"

    dup = client.post("/api/auth/register", json={
        "nomor_id": "FN-002", "nama_lengkap": "Lain", "email": "finance@ramayana.co.id",
        "password": "x", "divisi": "Finance", "cabang": "Surabaya",
    })
    assert dup.status_code == 409
    assert dup.json() == {"error": "Email sudah terdaftar"}

    login = client.post("/api/auth/login", json={"email": "finance@ramayana.co.id", "password": "rahasia"})
    assert login.status_code == 200
    body = login.json()
    assert body["user"]["role"] == "NON_IT"
    assert "siar_session" in login.cookies

    session = client.get("/api/auth/session")
    assert session.status_code == 200
    assert session.json()["nomor_id"] == "FN-001"


def test_login_with_wrong_password(client, staff):
    resp = client.post("/api/auth/login", json={"email": staff.email, "password": "salah"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Password salah"}


def test_reference_lists_are_public(client, session):
    session.add_all([Division(name="Finance", code="FN"), Branch(name="Medan")])
    session.commit()
    assert client.get("/api/auth/divisions").json()[0]["code"] == "FN"
    assert client.get("/api/auth/branches").json()[0]["name"] == "Medan"


def test_guard_rejects_anonymous_api_calls(client):
    resp = client.get("/api/maintenance")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


def test_guard_redirects_anonymous_pages(client):
    resp = client.get("/dashboard/maintenance", follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/auth/login?callbackUrl=%2Fdashboard%2Fmaintenance"


def test_logs_are_it_only(client, staff, admin):
    denied = client.get("/api/logs", headers=auth_headers(staff))
    assert denied.status_code == 403
    assert denied.json() == {"error": "Forbidden"}

    page = client.get("/dashboard/logs", headers=auth_headers(staff), follow_redirects=False)
    assert page.status_code == 307
    assert page.headers["location"] == "/dashboard"

    allowed = client.get("/api/logs", params={"limit": 5}, headers=auth_headers(admin))
    assert allowed.status_code == 200


def test_invalid_payload_is_bad_request(client, staff):
    resp = client.post("/api/maintenance", json={"kategori": "Hardware", "deadline": "bukan-tanggal"},
                       headers=auth_headers(staff))
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_maintenance_deadline_and_status_flow(client, staff, admin):
    created = client.post("/api/maintenance", json={
        "kategori": "Hardware", "jenis_masalah": "Printer jam",
        "deskripsi": "Kertas macet", "deadline": "2026-02-01",
    }, headers=auth_headers(staff))
    assert created.status_code == 201, created.text
    issue_id = created.json()["id"]

    events = client.get("/api/events", headers=auth_headers(staff)).json()
    assert [(e["title"], e["date"]) for e in events] == [("Deadline: Printer jam", "2026-02-01")]

    forbidden = client.patch(f"/api/maintenance/{issue_id}", json={"status": "RESOLVED"},
                             headers=auth_headers(staff))
    assert forbidden.status_code == 403

    resolved = client.patch(f"/api/maintenance/{issue_id}", json={"status": "RESOLVED"},
                            headers=auth_headers(admin))
    assert resolved.status_code == 200
    assert resolved.json()["status"] == "RESOLVED"

    feed = client.get("/api/notifications", headers=auth_headers(staff)).json()
    assert feed[0]["title"] == "Status Maintenance Diperbarui"

    marked = client.post("/api/notifications/mark-all-read", headers=auth_headers(staff))
    assert marked.json() == {"success": True, "updated": 1}

    deleted = client.delete(f"/api/maintenance/{issue_id}", headers=auth_headers(staff))
    assert deleted.json() == {"success": True}
    assert client.get("/api/events", headers=auth_headers(staff)).json() == []
    assert client.get(f"/api/maintenance/{issue_id}", headers=auth_headers(staff)).status_code == 404


def test_staff_cannot_create_events(client, staff):
    resp = client.post("/api/events", json={"date": "2026-02-10", "title": "Rapat"}, headers=auth_headers(staff))
    assert resp.status_code == 403


def test_chat_with_subject(client, staff, admin):
    issue = client.post("/api/maintenance", json={
        "kategori": "Hardware", "jenis_masalah": "Printer jam", "deskripsi": "Kertas macet",
    }, headers=auth_headers(staff)).json()

    sent = client.post("/api/chat", json={
        "receiver_id": admin.id, "content": "Mohon dicek",
        "subject_type": "maintenance", "subject_id": issue["id"],
    }, headers=auth_headers(staff))
    assert sent.status_code == 201, sent.text

    notifications = client.get("/api/notifications", headers=auth_headers(admin)).json()
    assert notifications[0]["type"] == "chat"

    thread = client.get("/api/chat", params={"contact_id": staff.id}, headers=auth_headers(admin)).json()
    assert thread[0]["subject_title"] == "Printer jam"
    assert thread[0]["is_read"] is True

    conversations = client.get("/api/chat", headers=auth_headers(staff)).json()
    assert conversations[0]["id"] == admin.id


def test_upload_attachment(client, staff, upload_dir):
    issue = client.post("/api/maintenance", json={
        "kategori": "Hardware", "jenis_masalah": "Printer jam", "deskripsi": "Kertas macet",
    }, headers=auth_headers(staff)).json()

    missing = client.post("/api/upload", files={"file": ("foto.png", b"abc", "image/png")},
                          headers=auth_headers(staff))
    assert missing.status_code == 400
    assert missing.json() == {"error": "Entity type and ID are required"}

    resp = client.post(
        "/api/upload",
        files={"file": ("foto.png", b"abc", "image/png")},
        data={"entity_type": "maintenance", "entity_id": str(issue["id"])},
        headers=auth_headers(staff),
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["file_path"].startswith("/uploads/maintenance/")
    assert len(list((upload_dir / "maintenance").iterdir())) == 1

    listed = client.get("/api/upload", params={"entity_type": "maintenance", "entity_id": issue["id"]},
                        headers=auth_headers(staff)).json()
    assert [f["file_name"] for f in listed] == ["foto.png"]

    detail = client.get(f"/api/maintenance/{issue['id']}", headers=auth_headers(staff)).json()
    assert [a["file_name"] for a in detail["attachments"]] == ["foto.png"]


def test_profile_update_and_stats(client, staff):
    resp = client.patch("/api/profile", json={"nama_lengkap": "Nama Baru"}, headers=auth_headers(staff))
    assert resp.status_code == 200
    assert resp.json()["nama_lengkap"] == "Nama Baru"
    assert client.patch("/api/profile", json={}, headers=auth_headers(staff)).status_code == 400

    stats = client.get("/api/dashboard/stats", headers=auth_headers(staff)).json()
    assert stats["maintenance"]["total"] == 0
    assert stats["users"] == 0


def test_login_matches_registered_email_case_insensitively(client):
    for email, nomor_id in (("Staff.IT@Ramayana.CO.ID", "IT-010"), ("helpdesk@siar.local", "IT-011")):
        resp = client.post("/api/auth/register", json={
            "nomor_id": nomor_id, "nama_lengkap": "Helpdesk", "email": email,
            "password": "rahasia", "divisi": "Information Technology", "cabang": "Medan",
        })
        assert resp.status_code == 201, resp.text

        login = client.post("/api/auth/login", json={"email": email, "password": "rahasia"})
        assert login.status_code == 200, login.text
        assert login.json()["user"]["email"] == email.lower()

    dup = client.post("/api/auth/register", json={
        "nomor_id": "IT-012", "nama_lengkap": "Lain", "email": "staff.it@ramayana.co.id",
        "password": "x", "divisi": "Finance", "cabang": "Medan",
    })
    assert dup.status_code == 409
