import json
from typing import Any


def response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def principal_id(event: dict[str, Any]) -> str | None:
    """User id placed on the request by the API Gateway authorizer."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    principal = authorizer.get("principalId")
    return str(principal) if principal else None
