import os
from datetime import date, datetime
from typing import Any
from unittest.mock import patch

import boto3
import pytest
import requests  # type: ignore[import-untyped]

from slumber_league.common.errors import InputUnavailableError


def _make_source() -> Any:
    from slumber_league.common.fitbit_client import FitbitClient
    from slumber_league.sources.fitbit import FitbitSleepSource

    client = FitbitClient(
        client_id_param_name=os.environ["FITBIT_CLIENT_ID_PARAM_NAME"],
        client_secret_name=os.environ["FITBIT_CLIENT_SECRET_NAME"],
    )
    return FitbitSleepSource(client, os.environ["FITBIT_REFRESH_SECRET_NAME"])


def _set_refresh_token(value: str) -> None:
    secrets = boto3.client("secretsmanager")
    secrets.put_secret_value(SecretId=os.environ["FITBIT_REFRESH_SECRET_NAME"], SecretString=value)


def _resp(status: int, body: dict[str, Any]) -> Any:
    class _Resp:
        status_code = status

        def __init__(self) -> None:
            self.headers = {"fitbit-rate-limit-remaining": "150"}

        def json(self) -> dict[str, Any]:
            return body

    return _Resp()


SLEEP_PAYLOAD = {
    "sleep": [
        {
            "dateOfSleep": "2025-03-02",
            "type": "stages",
            "levels": {
                "data": [
                    {"dateTime": "2025-03-01T23:30:00.000", "level": "light", "seconds": 1800},
                    {"dateTime": "2025-03-02T00:00:00.000", "level": "deep", "seconds": 1200},
                    {"dateTime": "not-a-date", "level": "rem", "seconds": 600},
                    {"dateTime": "2025-03-02T00:20:00.000", "level": "wake", "seconds": 120},
                ]
            },
        }
    ]
}


def test_samples_from_sleep_payload_skips_bad_entries() -> None:
    from slumber_league.sources.fitbit import samples_from_sleep_payload

    samples = samples_from_sleep_payload(SLEEP_PAYLOAD)

    assert len(samples) == 3
    assert samples[0].start == datetime(2025, 3, 1, 23, 30)
    assert samples[0].end == datetime(2025, 3, 2, 0, 0)
    assert samples[0].stage_value == "light"
    assert {s.source for s in samples} == {"fitbit"}


def test_fetch_recent_requests_window_and_rotates_refresh_token(aws_moto: None) -> None:  # type: ignore[unused-ignore]
    _set_refresh_token("REFRESH0")
    source = _make_source()

    with (
        patch(
            "slumber_league.common.fitbit_client.requests.post",
            return_value=_resp(200, {"access_token": "AT", "refresh_token": "REFRESH1"}),
        ),
        patch("slumber_league.common.fitbit_client.requests.get", return_value=_resp(200, SLEEP_PAYLOAD)) as get,
    ):
        samples = source.fetch_recent_sleep_samples(7, today=date(2025, 3, 2))

    assert len(samples) == 3
    assert get.call_args.args[0].endswith("/1.2/user/-/sleep/date/2025-02-24/2025-03-02.json")
    assert get.call_args.kwargs["headers"]["Authorization"] == "Bearer AT"

    stored = boto3.client("secretsmanager").get_secret_value(SecretId=os.environ["FITBIT_REFRESH_SECRET_NAME"])
    assert stored["SecretString"] == "REFRESH1"


@pytest.mark.parametrize("status", [401, 403])
def test_permission_errors_mean_source_unavailable(aws_moto: None, status: int) -> None:  # type: ignore[unused-ignore]
    _set_refresh_token("REFRESH0")
    source = _make_source()

    with (
        patch("slumber_league.common.fitbit_client.requests.post", return_value=_resp(status, {})),
        pytest.raises(InputUnavailableError),
    ):
        source.fetch_recent_sleep_samples(7)


def test_network_failure_means_source_unavailable(aws_moto: None) -> None:  # type: ignore[unused-ignore]
    _set_refresh_token("REFRESH0")
    source = _make_source()

    with (
        patch(
            "slumber_league.common.fitbit_client.requests.post",
            return_value=_resp(200, {"access_token": "AT"}),
        ),
        patch(
            "slumber_league.common.fitbit_client.requests.get",
            side_effect=requests.ConnectionError("offline"),
        ),
        pytest.raises(InputUnavailableError),
    ):
        source.fetch_recent_sleep_samples(7)


def test_server_error_is_a_plain_runtime_error(aws_moto: None) -> None:  # type: ignore[unused-ignore]
    _set_refresh_token("REFRESH0")
    source = _make_source()

    with (
        patch(
            "slumber_league.common.fitbit_client.requests.post",
            return_value=_resp(200, {"access_token": "AT"}),
        ),
        patch("slumber_league.common.fitbit_client.requests.get", return_value=_resp(500, {})),
        pytest.raises(RuntimeError, match="sleep fetch failed: 500"),
    ):
        source.fetch_recent_sleep_samples(7)


def test_samples_from_sleep_payload_skips_non_object_entries() -> None:
    from slumber_league.sources.fitbit import samples_from_sleep_payload

    payload = {
        "sleep": [
            "not-a-log",
            None,
            {"levels": ["unexpected"]},
            {"levels": {"data": [42, None, {"dateTime": "2025-03-02T01:00:00.000", "level": "deep", "seconds": 600}]}},
        ]
    }

    (sample,) = samples_from_sleep_payload(payload)
    assert sample.start == datetime(2025, 3, 2, 1, 0)
    assert sample.stage_value == "deep"
