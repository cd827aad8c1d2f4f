import os
from typing import Any
from zoneinfo import ZoneInfo

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities import parameters
from aws_lambda_powertools.utilities.data_classes import EventBridgeEvent, event_source

from ..common.backend_client import BackendClient
from ..common.config import BACKEND_API_URL, BACKEND_TOKEN_SECRET_NAME, SYNC_WINDOW_DAYS, TIMEZONE
from ..common.fitbit_client import FitbitClient
from ..sources.fitbit import FitbitSleepSource
from .sync import run_sync

logger = Logger()

refresh_secret_name = os.environ.get("FITBIT_REFRESH_SECRET_NAME", "fitbit/refresh/token")
client_secret_name = os.environ.get("FITBIT_CLIENT_SECRET_NAME", "fitbit/client/secret")
client_id_param_name = os.environ.get("FITBIT_CLIENT_ID_PARAM_NAME", "fitbit/client/id")


@event_source(data_class=EventBridgeEvent)
@logger.inject_lambda_context
def lambda_handler(event: EventBridgeEvent, context: object) -> dict[str, Any]:
    if not BACKEND_API_URL:
        return {"ok": False, "error": "missing_backend_api_url"}

    client = FitbitClient(client_id_param_name=client_id_param_name, client_secret_name=client_secret_name)
    source = FitbitSleepSource(client, refresh_secret_name)

    try:
        backend = BackendClient(BACKEND_API_URL, parameters.get_secret(BACKEND_TOKEN_SECRET_NAME))
        report = run_sync(source, backend.upload_night, window_days=SYNC_WINDOW_DAYS, tz=ZoneInfo(TIMEZONE))
    except Exception as exc:
        logger.exception("sleep_sync_failed")
        return {"ok": False, "error": str(exc)}

    return {"ok": report.status != "unavailable", **report.model_dump()}
