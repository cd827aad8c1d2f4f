from typing import Any

from aws_lambda_powertools import Logger

from ..common.ddb import get_dynamodb, query_recent_nights
from ..common.apigw import principal_id, response
from ..common.models import StoredNightModel
from ..common.timeutil import first_day_of_window
from ..scoring import night_display

logger = Logger()
ddb = get_dynamodb()

DEFAULT_DAYS = 7
MAX_DAYS = 90


def _days_param(event: dict[str, Any]) -> int:
    params = event.get("queryStringParameters") or {}
    try:
        days = int(params.get("days", DEFAULT_DAYS))
    except (TypeError, ValueError):
        days = DEFAULT_DAYS
    return min(MAX_DAYS, max(1, days))


def _night_body(night: StoredNightModel) -> dict[str, Any]:
    display = night_display(night.totalSleepMinutes, night.remSleepMinutes, night.deepSleepMinutes)
    return {
        "id": f"{night.userId}#{night.sleepDate}",
        "date": night.sleepDate,
        "totalSleepMinutes": night.totalSleepMinutes,
        "remSleepMinutes": night.remSleepMinutes,
        "deepSleepMinutes": night.deepSleepMinutes,
        **display.model_dump(mode="json"),
    }


@logger.inject_lambda_context
def lambda_handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    user_id = principal_id(event)
    if not user_id:
        return response(401, {"error": "unauthorized"})

    days = _days_param(event)
    nights = query_recent_nights(ddb, user_id, first_day_of_window(days))
    return response(200, {"days": days, "nights": [_night_body(n) for n in nights]})
