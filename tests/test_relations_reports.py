def _request(client, student_headers, teacher_id):
    return client.post("/api/relations", data={"id_docente": teacher_id}, headers=student_headers)


def _accept(client, teacher_headers, teacher_id, student_id, estado="aceptado"):
    return client.post(
        f"/api/relations/{teacher_id}/{student_id}/respond",
        data={"estado": estado},
        headers=teacher_headers,
    )


def test_relation_request_lifecycle(client, signup):
    teacher, teacher_headers = signup(rol="docente", nombre="Docente Uno")
    student, student_headers = signup(nombre="Estudiante Uno")

    resp = _request(client, student_headers, teacher["id_usuario"])
    assert resp.status_code == 200
    assert resp.json()["data"]["estado"] == "pendiente"

    # Duplicate requests are rejected
    assert _request(client, student_headers, teacher["id_usuario"]).status_code == 400

    assert _accept(client, teacher_headers, teacher["id_usuario"], student["id_usuario"], "otro").status_code == 400
    resp = _accept(client, teacher_headers, teacher["id_usuario"], student["id_usuario"])
    assert resp.status_code == 200
    assert resp.json()["data"]["estado"] == "aceptado"

    relations = client.get("/api/relations", headers=student_headers).json()["data"]
    assert relations == [
        {
            "id_docente": teacher["id_usuario"],
            "id_estudiante": student["id_usuario"],
            "estado": "aceptado",
            "fecha_solicitud": relations[0]["fecha_solicitud"],
        }
    ]

    resp = client.delete(f"/api/relations/{teacher['id_usuario']}/{student['id_usuario']}", headers=student_headers)
    assert resp.status_code == 200
    assert client.get("/api/relations", headers=student_headers).json()["data"] == []


def test_request_to_non_teacher_is_404(client, signup):
    other, _ = signup()
    _, headers = signup()
    assert _request(client, headers, other["id_usuario"]).status_code == 404


def test_only_the_addressed_teacher_can_respond(client, signup):
    teacher, _ = signup(rol="docente")
    _, intruder_headers = signup(rol="docente")
    student, student_headers = signup()
    _request(client, student_headers, teacher["id_usuario"])

    resp = _accept(client, intruder_headers, teacher["id_usuario"], student["id_usuario"])
    assert resp.status_code == 403


def test_teacher_search(client, signup):
    signup(rol="docente", nombre="Marisol Buscable")
    _, headers = signup()
    data = client.get("/api/teachers", params={"q": "marisol buscable"}, headers=headers).json()["data"]
    assert [u["nombre"] for u in data] == ["Marisol Buscable"]

    # Students cannot list students
    assert client.get("/api/students", headers=headers).status_code == 403


def test_csv_report_layout(client, signup, admin):
    _, admin_headers = admin
    gesture = client.post("/api/gestures", json={"nombre": "Gracias"}, headers=admin_headers).json()["data"]
    student, headers = signup(nombre="Lucía")
    client.post("/api/progress", json={"id_gesto": gesture["id_gesto"], "porcentaje": 75}, headers=headers)

    resp = client.get(f"/api/reports/{student['id_usuario']}", params={"formato": "csv"}, headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert f'reporte_{student["id_usuario"]}.csv' in resp.headers["content-disposition"]

    assert resp.content.startswith(b"\xef\xbb\xbf")
    lines = resp.content.decode("utf-8-sig").split("\n")
    assert lines[0] == "Usuario;Correo;Rol"
    assert lines[1] == f"Lucía;{student['correo']};estudiante"
    assert lines[2] == ""
    assert lines[3] == "Gesto;Porcentaje;Estado"
    assert lines[4] == "Gracias;75;pendiente"


def test_report_unlocks_perfect_report(client, signup):
    student, headers = signup()
    resp = client.get(f"/api/reports/{student['id_usuario']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Reporte generado"

    new_ids = [e["id_logro"] for e in client.post("/api/achievements/check", headers=headers).json()["data"]]
    assert 15 in new_ids


def test_report_permissions(client, signup, admin):
    teacher, teacher_headers = signup(rol="docente")
    student, student_headers = signup()
    _, other_student_headers = signup()
    _, admin_headers = admin

    url = f"/api/reports/{student['id_usuario']}"
    assert client.get(url, headers=other_student_headers).status_code == 403
    assert client.get(url, headers=teacher_headers).status_code == 403
    assert client.get(url, headers=admin_headers).status_code == 200
    assert client.get("/api/reports/999999", headers=admin_headers).status_code == 404

    _request(client, student_headers, teacher["id_usuario"])
    _accept(client, teacher_headers, teacher["id_usuario"], student["id_usuario"])
    assert client.get(url, headers=teacher_headers).status_code == 200

    # An accepted relationship unlocks the social achievements for the student
    new_ids = [e["id_logro"] for e in client.post("/api/achievements/check", headers=student_headers).json()["data"]]
    assert 13 in new_ids
    assert 14 in new_ids


def test_teacher_progress_summary_lists_accepted_students_only(client, signup):
    teacher, teacher_headers = signup(rol="docente")
    accepted, accepted_headers = signup(nombre="Aceptado")
    pending, pending_headers = signup(nombre="Pendiente")
    _request(client, accepted_headers, teacher["id_usuario"])
    _request(client, pending_headers, teacher["id_usuario"])
    _accept(client, teacher_headers, teacher["id_usuario"], accepted["id_usuario"])

    summary = client.get("/api/admin/progress", headers=teacher_headers).json()["progreso"]
    assert [s["id_usuario"] for s in summary] == [accepted["id_usuario"]]

    resp = client.get("/api/admin/progress", params={"id_estudiante": pending["id_usuario"]}, headers=teacher_headers)
    assert resp.status_code == 403
