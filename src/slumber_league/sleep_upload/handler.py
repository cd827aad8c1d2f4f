import json
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import ValidationError

from ..common.ddb import get_dynamodb, upsert_sleep_night
from ..common.apigw import principal_id, response
from ..common.models import SleepUploadModel

logger = Logger()
ddb = get_dynamodb()


@logger.inject_lambda_context
def lambda_handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    user_id = principal_id(event)
    if not user_id:
        return response(401, {"error": "unauthorized"})

    try:
        night = SleepUploadModel.model_validate_json(event.get("body") or "{}")
    except ValidationError as ve:
        logger.warning("invalid sleep upload", errors=ve.errors(include_url=False))
        return response(400, {"error": "invalid_body", "detail": json.loads(ve.json(include_url=False))})

    upsert_sleep_night(ddb, user_id, night)
    logger.info("sleep night stored", date=night.date)
    return response(200, {"ok": True, "date": night.date})
