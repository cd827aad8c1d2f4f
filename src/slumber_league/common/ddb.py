import time
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key

from .config import SLEEP_NIGHTS_TABLE
from .models import SleepUploadModel, StoredNightModel


def get_dynamodb() -> Any:
    """Return DynamoDB resource to be used by helpers below."""
    return boto3.resource("dynamodb")


def _to_int(value: Any) -> int:
    if isinstance(value, Decimal):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def upsert_sleep_night(ddb: Any, user_id: str, night: SleepUploadModel) -> StoredNightModel:
    """Write one night keyed by (userId, sleepDate); a later write for the same key replaces it."""
    table = ddb.Table(SLEEP_NIGHTS_TABLE)
    stored = StoredNightModel(
        userId=user_id,
        sleepDate=night.date,
        totalSleepMinutes=night.totalSleepMinutes,
        remSleepMinutes=night.remSleepMinutes,
        deepSleepMinutes=night.deepSleepMinutes,
        updatedAt=int(time.time()),
    )
    table.put_item(Item=stored.model_dump())
    return stored


def _from_item(item: Mapping[str, Any]) -> StoredNightModel:
    return StoredNightModel(
        userId=str(item["userId"]),
        sleepDate=str(item["sleepDate"]),
        totalSleepMinutes=_to_int(item.get("totalSleepMinutes")),
        remSleepMinutes=_to_int(item.get("remSleepMinutes")),
        deepSleepMinutes=_to_int(item.get("deepSleepMinutes")),
        updatedAt=_to_int(item.get("updatedAt")) or None,
    )


def query_recent_nights(ddb: Any, user_id: str, since_date: str) -> list[StoredNightModel]:
    """Return the user's nights on or after since_date, newest first."""
    table = ddb.Table(SLEEP_NIGHTS_TABLE)
    kwargs: dict[str, Any] = {
        "KeyConditionExpression": Key("userId").eq(user_id) & Key("sleepDate").gte(since_date),
        "ScanIndexForward": False,
    }
    nights: list[StoredNightModel] = []
    while True:
        resp = table.query(**kwargs)
        nights.extend(_from_item(item) for item in resp.get("Items", []))
        lek = resp.get("LastEvaluatedKey")
        if not lek:
            break
        kwargs["ExclusiveStartKey"] = lek
    return nights
