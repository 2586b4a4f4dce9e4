from datetime import datetime

import requests

from ensenando.achievements.remote import RemoteAchievementClient


class FakeResponse:
    def __init__(self, status_code=200, body=None, bad_json=False):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._body = body
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_disabled_client_does_not_call_out():
    session = FakeSession(error=AssertionError("should not be called"))
    client = RemoteAchievementClient(base_url="", session=session)
    assert client.enabled is False
    assert client.fetch_achievements(1) == []
    assert client.report_unlock(1, 1, datetime(2026, 10, 19)) is False
    assert session.calls == []


def test_network_error_yields_empty_list():
    session = FakeSession(error=requests.ConnectionError("offline"))
    client = RemoteAchievementClient(base_url="http://remote.test/api", session=session)
    assert client.fetch_achievements(3) == []


def test_bad_status_and_bad_json_yield_empty_list():
    client = RemoteAchievementClient(base_url="http://remote.test", session=FakeSession(FakeResponse(500, [])))
    assert client.fetch_achievements(3) == []
    client = RemoteAchievementClient(base_url="http://remote.test", session=FakeSession(FakeResponse(200, bad_json=True)))
    assert client.fetch_achievements(3) == []


def test_fetch_accepts_wrapped_list_and_skips_malformed_items():
    body = {
        "success": True,
        "data": [
            {"id_logro": 1, "titulo": "Primer Paso", "desbloqueado": True},
            "garbage",
            {"id_logro": "not-a-number"},
        ],
    }
    session = FakeSession(FakeResponse(200, body))
    client = RemoteAchievementClient(base_url="http://remote.test/", token="tok", session=session)

    result = client.fetch_achievements(3)

    assert [a.resolved_id for a in result] == [1]
    method, url, kwargs = session.calls[0]
    assert url == "http://remote.test/logros_usuario.php"
    assert kwargs["params"] == {"id_usuario": 3}
    assert kwargs["headers"]["Authorization"] == "Bearer tok"


def test_report_unlock_posts_json():
    session = FakeSession(FakeResponse(200, {"success": True}))
    client = RemoteAchievementClient(base_url="http://remote.test", session=session)

    assert client.report_unlock(3, 8, datetime(2026, 10, 19, 7, 5, 0)) is True

    method, url, kwargs = session.calls[0]
    assert url == "http://remote.test/desbloquear_logro.php"
    assert kwargs["json"] == {"id_usuario": 3, "id_logro": 8, "fecha_obtenido": "2026-10-19 07:05:00"}


def test_report_unlock_failure_is_false():
    session = FakeSession(error=requests.Timeout("slow"))
    client = RemoteAchievementClient(base_url="http://remote.test", session=session)
    assert client.report_unlock(3, 8, datetime(2026, 10, 19)) is False
