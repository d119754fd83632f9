from __future__ import annotations

import logging

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse

from .config import configure_logging, settings
from .errors import InvalidInputError, TimelogError
from .models import TimelogData
from .pipeline import run_aggregation
from .report import build_day_report, build_text_report, report_stats
from .timeutils import dates_to_fetch

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(title="Timelog Reports")


def _error_response(exc: TimelogError) -> JSONResponse:
    return JSONResponse({"error": str(exc), "kind": exc.kind}, status_code=exc.status_code)


def _aggregate(request_data: dict, data_source: str | None = None) -> JSONResponse:
    try:
        data = run_aggregation(
            data_source or request_data.get("dataSource"),
            request_data.get("targetDates"),
            request_data.get("selectedUsers"),
        )
        return JSONResponse(data.to_dict())
    except TimelogError as e:
        logger.warning("Timelog request failed (%s): %s", e.kind, e)
        return _error_response(e)
    except Exception:
        logger.exception("Error fetching data")
        return JSONResponse({"error": "Failed to fetch data", "kind": "internal_error"}, status_code=500)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/dates")
def api_dates() -> dict:
    """Даты по умолчанию: вчера, в понедельник пятница..воскресенье."""
    return {"targetDates": dates_to_fetch()}


@app.post("/api/timelogs")
def api_timelogs(request_data: dict = Body(...)):
    return _aggregate(request_data)


@app.post("/api/jira-timelogs")
def api_jira_timelogs(request_data: dict = Body(...)):
    return _aggregate(request_data, data_source="jira")


@app.post("/api/report")
def api_report(request_data: dict = Body(...)):
    """Текстовые отчёты по уже полученным данным (без обращения к трекеру)."""
    try:
        raw = request_data.get("timelogData")
        selected_dates = request_data.get("selectedDates")
        if not isinstance(raw, dict):
            raise InvalidInputError("Missing or invalid timelogData parameter")
        if not isinstance(selected_dates, list) or not all(isinstance(d, str) for d in selected_dates):
            raise InvalidInputError("Missing or invalid selectedDates parameter")

        try:
            data = TimelogData.from_dict(raw)
        except (AttributeError, TypeError, ValueError, OverflowError) as exc:
            raise InvalidInputError(f"Malformed timelogData: {exc}") from exc
        mapping = settings.name_mapping
        return JSONResponse({
            "report": build_text_report(data, selected_dates, mapping),
            "days": {day: build_day_report(data, day, mapping) for day in selected_dates},
            "stats": report_stats(data, selected_dates, mapping),
        })
    except TimelogError as e:
        return _error_response(e)
    except Exception:
        logger.exception("Error building report")
        return JSONResponse({"error": "Failed to build report", "kind": "internal_error"}, status_code=500)
