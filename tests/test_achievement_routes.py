from ensenando.achievements.usage import UsageStore, UsageTracker
from ensenando.core.deps import get_usage_tracker
from ensenando.main import app


def _create_gesture(client, admin_headers, nombre):
    resp = client.post("/api/gestures", json={"nombre": nombre, "descripcion": "Seña"}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["id_gesto"]


def _ids(entries):
    return [e["id_logro"] for e in entries]


def test_catalog_is_public_and_locked(client):
    resp = client.get("/api/achievements/catalog")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert _ids(data) == list(range(1, 19))
    assert not any(e["desbloqueado"] for e in data)


def test_only_admin_creates_gestures(client, signup):
    _, headers = signup()
    resp = client.post("/api/gestures", json={"nombre": "Z"}, headers=headers)
    assert resp.status_code == 403


def test_progress_update_unlocks_once(client, signup, admin):
    _, admin_headers = admin
    gesture_id = _create_gesture(client, admin_headers, "Hola")
    usuario, headers = signup()

    resp = client.post("/api/progress", json={"id_gesto": gesture_id, "porcentaje": 90}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["data"]["actualizado"] is True
    new_ids = _ids(body["nuevos_logros"])
    assert 1 in new_ids
    assert 3 in new_ids

    # Lower reading: stored progress does not move and nothing new unlocks
    resp = client.post("/api/progress", json={"id_gesto": gesture_id, "porcentaje": 30}, headers=headers)
    body = resp.json()
    assert body["data"]["porcentaje"] == 90
    assert body["nuevos_logros"] == []

    check = client.post("/api/achievements/check", headers=headers)
    assert check.json() == {"success": True, "data": []}

    listing = client.get("/api/achievements", headers=headers).json()["data"]
    unlocked = {e["id_logro"] for e in listing if e["desbloqueado"]}
    assert {1, 3} <= unlocked
    assert len(listing) == 18


def test_progress_for_unknown_gesture(client, signup):
    _, headers = signup()
    resp = client.post("/api/progress", json={"id_gesto": 999999, "porcentaje": 50}, headers=headers)
    assert resp.status_code == 404


def test_progress_validation(client, signup):
    _, headers = signup()
    resp = client.post("/api/progress", json={"id_gesto": 1, "porcentaje": 150}, headers=headers)
    assert resp.status_code == 422


def test_manual_unlock_then_refresh(client, signup):
    usuario, headers = signup()

    resp = client.post("/api/achievements/unlock", json={"id_logro": 11}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logro desbloqueado exitosamente"
    assert resp.json()["data"]["id_usuario"] == usuario["id_usuario"]

    resp = client.post(
        "/api/achievements/unlock",
        json={"logro_id": 11, "fecha_obtenido": "2026-10-18 10:00:00"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logro actualizado exitosamente"
    assert resp.json()["data"]["fecha_obtenido"] == "2026-10-18 10:00:00"

    listing = client.get("/api/achievements", headers=headers).json()["data"]
    entry = next(e for e in listing if e["id_logro"] == 11)
    assert entry["desbloqueado"] is True
    assert entry["fechaDesbloqueo"] == "2026-10-18 10:00:00"


def test_manual_unlock_errors(client, signup):
    other, _ = signup()
    _, headers = signup()

    assert client.post("/api/achievements/unlock", json={}, headers=headers).status_code == 400
    assert client.post("/api/achievements/unlock", json={"id_logro": "x"}, headers=headers).status_code == 400
    assert client.post("/api/achievements/unlock", json={"id_logro": 999}, headers=headers).status_code == 404
    assert client.post(
        "/api/achievements/unlock", json={"id_logro": 1, "fecha_obtenido": "ayer"}, headers=headers
    ).status_code == 400

    resp = client.post(
        "/api/achievements/unlock",
        json={"id_logro": 1, "id_usuario": other["id_usuario"]},
        headers=headers,
    )
    assert resp.status_code == 403


def test_me_progress_profile(client, signup):
    usuario, headers = signup(nombre="Perfil")
    resp = client.get("/api/me/progress", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["usuario"]["nombre"] == "Perfil"
    assert body["racha"] == 1
    assert body["metricas"]["streak_days"] == 1
    assert 3 in _ids(body["nuevos_logros"])
    assert len(body["logros"]) == 18


def test_installation_header_keeps_separate_streaks(client, signup):
    _, headers = signup()
    first = client.get("/api/me/progress", headers={**headers, "X-Installation-Id": "tablet-1"}).json()
    second = client.get("/api/me/progress", headers={**headers, "X-Installation-Id": "phone-1"}).json()
    assert first["racha"] == 1
    assert second["racha"] == 1


def test_installation_header_cannot_reach_another_users_state(client, signup):
    victim, victim_headers = signup(nombre="Víctima")
    attacker, attacker_headers = signup(nombre="Atacante")

    spoofed = {**attacker_headers, "X-Installation-Id": f"user-{victim['id_usuario']}"}
    assert client.get(f"/api/reports/{attacker['id_usuario']}", headers=spoofed).status_code == 200

    new_ids = _ids(client.post("/api/achievements/check", headers=victim_headers).json()["data"])
    assert 15 not in new_ids

    # The attacker's own state under that header did get the report mark
    attacker_ids = _ids(client.post("/api/achievements/check", headers=spoofed).json()["data"])
    assert 15 in attacker_ids


def test_profile_survives_usage_store_failure(client, signup):
    class BrokenStore(UsageStore):
        key = "broken"

        def read(self):
            raise RuntimeError("usage store unavailable")

        def write(self, state):
            raise RuntimeError("usage store unavailable")

    _, headers = signup()
    app.dependency_overrides[get_usage_tracker] = lambda: UsageTracker(BrokenStore())
    try:
        resp = client.get("/api/me/progress", headers=headers)
    finally:
        app.dependency_overrides.pop(get_usage_tracker, None)

    assert resp.status_code == 200
    body = resp.json()
    assert body["racha"] == 0
    assert body["metricas"] is None
    assert len(body["logros"]) == 18
