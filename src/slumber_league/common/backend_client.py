from typing import Any, cast

import requests  # type: ignore[import-untyped]

from aws_lambda_powertools import Logger

from .errors import UploadError
from .models import AggregatedNight, SleepUploadModel

logger = Logger()


class BackendClient:
    """Calls the SlumberLeague sleep API on behalf of one authenticated user."""

    UPLOAD_PATH = "/sleep/upload"
    ME_PATH = "/sleep/me"

    def __init__(self, base_url: str, token: str | None, timeout: int = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        if not self.token:
            raise UploadError("No auth token")
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = self._headers()
        try:
            resp = requests.request(method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise UploadError(f"{method} {path} failed: {exc}") from exc
        if resp.status_code >= 400:
            raise UploadError(f"{method} {path} failed: {resp.status_code} {resp.text}", status_code=resp.status_code)
        return resp.json()

    def upload_night(self, night: AggregatedNight) -> dict[str, Any]:
        payload = SleepUploadModel.from_night(night).model_dump()
        logger.debug("uploading night", date=night.date)
        return cast(dict[str, Any], self._request("POST", self.UPLOAD_PATH, json=payload))

    def get_my_nights(self, days: int = 7) -> list[dict[str, Any]]:
        body = self._request("GET", self.ME_PATH, params={"days": int(days)})
        if not isinstance(body, dict):
            raise UploadError(f"GET {self.ME_PATH} returned unexpected body: {type(body).__name__}")
        return list(body.get("nights") or [])
