import json

from aws_lambda_powertools import Logger

from .aggregator import aggregate
from .common.backend_client import BackendClient
from .common.config import load_settings
from .common.errors import InputUnavailableError
from .sleep_sync import run_sync
from .sources.export_file import ExportFileSource

logger = Logger()


def main() -> int:
    settings = load_settings()
    logger.setLevel(settings.log_level.value)

    source = ExportFileSource(settings.export_path)
    if settings.dry_run:
        try:
            samples = source.fetch_recent_sleep_samples(settings.window_days)
        except InputUnavailableError as exc:
            print(f"{exc} {exc.action}")
            return 1
        nights = aggregate(samples, tz=settings.tz)
        print(json.dumps([n.model_dump() for n in nights], indent=2))
        return 0

    backend = BackendClient(settings.api_url, settings.api_token, timeout=settings.request_timeout_secs)
    report = run_sync(source, backend.upload_night, window_days=settings.window_days, tz=settings.tz)
    print(report.message)
    return 1 if report.status in ("unavailable", "partial") else 0


if __name__ == "__main__":
    raise SystemExit(main())
