"""
Client for the upstream achievement service (the PHP backend).

Every failure mode (not configured, offline, non-2xx, bad JSON) degrades
to "no information": fetch returns [] and report returns False.
"""
import logging
from datetime import datetime

import requests
from pydantic import ValidationError

from ensenando.achievements.schemas import AchievementDisplay
from ensenando.core.config import REMOTE_API_URL, REMOTE_API_TIMEOUT

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter('%(levelname)s: [REMOTE] %(message)s'))
    logger.addHandler(handler)
    logger.propagate = False


class RemoteAchievementClient:
    def __init__(
        self,
        base_url: str = REMOTE_API_URL,
        token: str | None = None,
        timeout: float = REMOTE_API_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch_achievements(self, user_id: int) -> list[AchievementDisplay]:
        if not self.enabled:
            return []
        try:
            r = self.session.get(
                f"{self.base_url}/logros_usuario.php",
                params={"id_usuario": user_id},
                headers=self._headers(),
                timeout=self.timeout,
            )
            if not r.ok:
                logger.warning(f"fetch user={user_id} status={r.status_code}")
                return []
            body = r.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning(f"fetch user={user_id} failed: {exc!r}")
            return []

        if isinstance(body, dict):
            body = body.get("data") or []
        if not isinstance(body, list):
            return []

        result = []
        for raw in body:
            if not isinstance(raw, dict):
                continue
            try:
                result.append(AchievementDisplay.model_validate(raw))
            except ValidationError as exc:
                logger.warning(f"skipping malformed achievement {raw!r}: {exc.error_count()} errors")
        return result

    def report_unlock(self, user_id: int, achievement_id: int, obtained_at: datetime) -> bool:
        if not self.enabled:
            return False
        try:
            r = self.session.post(
                f"{self.base_url}/desbloquear_logro.php",
                json={
                    "id_usuario": user_id,
                    "id_logro": achievement_id,
                    "fecha_obtenido": obtained_at.strftime("%Y-%m-%d %H:%M:%S"),
                },
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning(f"report user={user_id} logro={achievement_id} failed: {exc!r}")
            return False
        if not r.ok:
            logger.warning(f"report user={user_id} logro={achievement_id} status={r.status_code}")
            return False
        return True
