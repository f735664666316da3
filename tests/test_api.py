from __future__ import annotations

import json


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json()["status"] == "OK"


def test_unknown_route_returns_json_error(client):
    resp = client.get("/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_register_login_and_me(client):
    resp = client.post(
        "/auth/register",
        json={"name": "Ann", "email": "ann@example.com", "phone": "555", "password": "secret1"},
    )
    assert resp.status_code == 201
    assert "password_hash" not in resp.get_json()["user"]

    resp = client.post("/auth/login", json={"email": "ann@example.com", "password": "secret1"})
    token = resp.get_json()["token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).get_json()["user"]
    assert me["email"] == "ann@example.com"
    assert me["isApproved"] is False


def test_protected_routes_require_token(client):
    assert client.get("/qr/my-qr").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_admin_routes_reject_regular_users(client, auth_header, attendee):
    resp = client.post("/qr/scan", json={"qrData": "{}"}, headers=auth_header(attendee))

    assert resp.status_code == 403


def test_bootstrap_admin_then_check(client):
    first = client.post("/setup/create-admin")
    second = client.post("/setup/create-admin")
    check = client.get("/setup/check-admin").get_json()

    assert first.status_code == 201
    assert first.get_json()["message"] == "Admin user created successfully"
    assert second.status_code == 200
    assert second.get_json()["message"] == "Admin already exists"
    assert check["hasAdmin"] is True
    assert check["needsSetup"] is False
    assert check["adminUser"]["email"] == "admin@example.com"


def test_generate_scan_and_audit_flow(client, auth_header, admin, attendee):
    admin_h = auth_header(admin)

    gen = client.post(f"/qr/generate/{attendee.user_id}", json={"eventId": "expo"}, headers=admin_h)
    assert gen.status_code == 200
    qr_data = gen.get_json()["qrData"]
    assert gen.get_json()["qrCode"].startswith("data:image/png;base64,")

    mine = client.get("/qr/my-qr", headers=auth_header(attendee)).get_json()
    assert mine["qrData"] == qr_data

    scan = client.post("/qr/scan", json={"qrData": qr_data, "notes": "front door"}, headers=admin_h)
    body = scan.get_json()
    assert scan.status_code == 200
    assert body["scanResult"] == "success"
    assert body["user"]["isApproved"] is True
    assert body["scan"]["userId"]["email"] == "jane@example.com"
    assert body["scan"]["scannedBy"]["email"] == "admin@example.com"

    again = client.post("/qr/scan", json={"qrData": qr_data}, headers=admin_h).get_json()
    assert again["scanResult"] == "duplicate"

    tampered = json.dumps({**json.loads(qr_data), "eventId": "other"})
    bad = client.post("/qr/scan", json={"qrData": tampered}, headers=admin_h)
    assert bad.status_code == 400
    assert bad.get_json()["error"] == "Invalid or expired QR code"

    history = client.get("/qr/scans?limit=2", headers=admin_h).get_json()
    assert history["total"] == 3
    assert history["totalPages"] == 2
    assert len(history["scans"]) == 2

    stats = client.get("/qr/scans/stats", headers=admin_h).get_json()
    assert stats["totalScans"] == 3
    assert stats["successfulScans"] == 1
    assert stats["failedScans"] == 1
    assert stats["duplicateScans"] == 1
    assert stats["successRate"] == 33.3


def test_scan_rejects_bad_input_without_recording(client, auth_header, scans_repo, admin):
    admin_h = auth_header(admin)

    assert client.post("/qr/scan", json={}, headers=admin_h).status_code == 400
    assert client.post("/qr/scan", json={"qrData": "{oops"}, headers=admin_h).status_code == 400
    assert client.post("/qr/scan", json={"qrData": '{"userId": 77}'}, headers=admin_h).status_code == 404
    assert client.post("/qr/scan", json={"qrData": '{"userId": 1}', "scanType": "exit"}, headers=admin_h).status_code == 400
    assert scans_repo.scans == []


def test_my_qr_before_generation(client, auth_header, attendee):
    resp = client.get("/qr/my-qr", headers=auth_header(attendee))

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "QR code not generated yet"


def test_user_generates_own_qr(client, auth_header, attendee):
    resp = client.post("/qr/generate-my-qr", json={}, headers=auth_header(attendee))

    assert resp.status_code == 200
    assert json.loads(resp.get_json()["qrData"])["generatedBy"] == attendee.user_id


def test_users_crud(client, auth_header, scans_repo, admin, attendee):
    admin_h = auth_header(admin)

    listing = client.get("/users?status=pending", headers=admin_h).get_json()
    assert [u["email"] for u in listing["users"]] == ["jane@example.com"]

    updated = client.put(f"/users/{attendee.user_id}", json={"phone": "999"}, headers=auth_header(attendee))
    assert updated.get_json()["user"]["phone"] == "999"

    forbidden = client.get(f"/users/{admin.user_id}", headers=auth_header(attendee))
    assert forbidden.status_code == 403

    qr_data = client.post(f"/qr/generate/{attendee.user_id}", headers=admin_h).get_json()["qrData"]
    client.post("/qr/scan", json={"qrData": qr_data}, headers=admin_h)
    assert len(scans_repo.scans) == 1

    deleted = client.delete(f"/users/{attendee.user_id}", headers=admin_h)
    assert deleted.status_code == 200
    assert scans_repo.scans == []
    assert client.get(f"/users/{attendee.user_id}", headers=admin_h).status_code == 404

    overview = client.get("/users/stats/overview", headers=admin_h).get_json()
    assert overview["totalUsers"] == 1
    assert overview["totalScans"] == 0


def test_image_scan_requires_file(client, auth_header, admin):
    resp = client.post("/qr/scan/image", data={}, headers=auth_header(admin))

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Missing image file"


def test_non_text_fields_are_client_errors(client, auth_header, admin, attendee):
    register = client.post(
        "/auth/register",
        json={"name": "Ann", "email": "ann@example.com", "phone": "555", "password": 1234567},
    )
    login = client.post("/auth/login", json={"email": 5, "password": "secret1"})
    generate = client.post(f"/qr/generate/{attendee.user_id}", json={"eventId": 7}, headers=auth_header(admin))

    assert register.status_code == 400
    assert login.status_code == 400
    assert generate.status_code == 400
    assert generate.get_json()["error"] == "eventId must be a string"


def test_scan_with_zero_user_id_is_missing_id(client, auth_header, scans_repo, admin):
    resp = client.post("/qr/scan", json={"qrData": '{"userId": 0}'}, headers=auth_header(admin))

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid QR code: missing user ID"
    assert scans_repo.scans == []
