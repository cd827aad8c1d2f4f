import base64
from typing import Any, cast

import requests  # type: ignore[import-untyped]

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities import parameters

from .errors import InputUnavailableError

logger = Logger()

# Fitbit answers these when the user revoked or never granted the sleep scope
PERMISSION_STATUSES = (401, 403)


class FitbitClient:
    """Fitbit Web API calls needed to pull recent sleep stage data.

    Client id and secret are resolved through AWS Parameters/Secrets names given at
    construction time. Response headers are logged for rate-limit visibility.
    """

    TOKEN_URL = "https://api.fitbit.com/oauth2/token"
    BASE_URL = "https://api.fitbit.com"

    def __init__(self, client_id_param_name: str, client_secret_name: str) -> None:
        self.client_id_param_name = client_id_param_name
        self.client_secret_name = client_secret_name

    def _get_client_credentials(self) -> tuple[str, str]:
        client_id = parameters.get_parameter(self.client_id_param_name)
        client_secret = parameters.get_secret(self.client_secret_name)
        return client_id, client_secret

    @staticmethod
    def _basic_auth_header(client_id: str, client_secret: str) -> str:
        token = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode("ascii")
        return f"Basic {token}"

    @staticmethod
    def _check(resp: Any, what: str) -> None:
        if resp.status_code in PERMISSION_STATUSES:
            raise InputUnavailableError(f"Fitbit {what} not permitted: {resp.status_code}")
        if resp.status_code >= 400:
            raise RuntimeError(f"Fitbit {what} failed: {resp.status_code}")

    def refresh_access_token(self, refresh_token: str) -> tuple[str, str]:
        """Exchange refresh_token for access_token (and possibly a new refresh_token).

        Returns (access_token, new_refresh_token).
        """
        client_id, client_secret = self._get_client_credentials()
        headers = {
            "Authorization": self._basic_auth_header(client_id, client_secret),
            "Content-Type": "application/x-www-form-urlencoded",
        }
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": client_id,
        }
        try:
            resp = requests.post(self.TOKEN_URL, headers=headers, data=data, timeout=10)
        except requests.RequestException as exc:
            raise InputUnavailableError(f"Fitbit unreachable: {exc}") from exc
        logger.info("fitbit_token_headers", headers=dict(resp.headers))
        self._check(resp, "token refresh")
        payload: dict[str, Any] = resp.json()
        access_token = str(payload.get("access_token", ""))
        new_refresh = str(payload.get("refresh_token", refresh_token))
        if not access_token:
            raise RuntimeError("Fitbit token refresh missing access_token")
        return access_token, new_refresh

    def get_sleep_by_date_range(self, start_date: str, end_date: str, access_token: str) -> dict[str, Any]:
        url = f"{self.BASE_URL}/1.2/user/-/sleep/date/{start_date}/{end_date}.json"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        try:
            resp = requests.get(url, headers=headers, timeout=15)
        except requests.RequestException as exc:
            raise InputUnavailableError(f"Fitbit unreachable: {exc}") from exc
        logger.info("fitbit_sleep_headers", headers=dict(resp.headers))
        self._check(resp, "sleep fetch")
        return cast(dict[str, Any], resp.json())
