import contextlib
import os
from collections.abc import Iterator

import boto3
import pytest
from moto import mock_aws

# Ensure AWS SDK has a region and fake credentials for moto
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")

# Environment variables read at import time by common.config
os.environ.setdefault("SLEEP_NIGHTS_TABLE", "sleep_nights")
os.environ.setdefault("BACKEND_API_URL", "https://api.example.com")
os.environ.setdefault("BACKEND_TOKEN_SECRET_NAME", "slumber/backend/token")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("SYNC_WINDOW_DAYS", "7")

# Secrets rotate during tests; never serve cached values
os.environ.setdefault("POWERTOOLS_PARAMETERS_MAX_AGE", "0")

# Defaults for the Fitbit source
os.environ.setdefault("FITBIT_CLIENT_ID_PARAM_NAME", "fitbit/client/id")
os.environ.setdefault("FITBIT_REFRESH_SECRET_NAME", "fitbit/refresh/token")
os.environ.setdefault("FITBIT_CLIENT_SECRET_NAME", "fitbit/client/secret")


@pytest.fixture(scope="session", autouse=True)
def aws_moto() -> Iterator[None]:
    with mock_aws():
        ddb = boto3.client("dynamodb")
        ddb.create_table(
            TableName=os.environ["SLEEP_NIGHTS_TABLE"],
            AttributeDefinitions=[
                {"AttributeName": "userId", "AttributeType": "S"},
                {"AttributeName": "sleepDate", "AttributeType": "S"},
            ],
            KeySchema=[
                {"AttributeName": "userId", "KeyType": "HASH"},
                {"AttributeName": "sleepDate", "KeyType": "RANGE"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        ssm = boto3.client("ssm")
        ssm.put_parameter(
            Name=os.environ["FITBIT_CLIENT_ID_PARAM_NAME"],
            Type="String",
            Value="TEST_CLIENT_ID",
            Overwrite=True,
        )

        secrets = boto3.client("secretsmanager")
        for name, value in [
            (os.environ["FITBIT_REFRESH_SECRET_NAME"], "REFRESH0"),
            (os.environ["FITBIT_CLIENT_SECRET_NAME"], "SECRET"),
            (os.environ["BACKEND_TOKEN_SECRET_NAME"], "BACKEND_TOKEN"),
        ]:
            with contextlib.suppress(secrets.exceptions.ResourceExistsException):  # type: ignore[attr-defined]
                secrets.create_secret(Name=name, SecretString=value)

        yield
