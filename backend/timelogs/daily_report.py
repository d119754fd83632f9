from __future__ import annotations

import argparse
import json
import logging
from time import perf_counter

from .config import configure_logging, settings
from .errors import TimelogError
from .pipeline import run_aggregation
from .report import build_text_report
from .timeutils import dates_to_fetch

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Daily timelog report from GitLab or Jira")
    parser.add_argument("--source", choices=("gitlab", "jira"), default="gitlab", help="Откуда брать списания")
    parser.add_argument("--date", action="append", dest="dates", default=None, help="Дата YYYY-MM-DD (можно несколько)")
    parser.add_argument("--user", action="append", dest="users", required=True, help="Имя пользователя в трекере (можно несколько)")
    parser.add_argument("--json", action="store_true", help="Вывести сырые данные вместо текстового отчёта")
    parser.add_argument("--log-level", default=None, help="Уровень логирования (INFO, DEBUG, ...)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    dates = args.dates or dates_to_fetch()
    started = perf_counter()
    try:
        data = run_aggregation(args.source, dates, args.users)
    except TimelogError as exc:
        logger.error("source=%s status=fail kind=%s reason=%s", args.source, exc.kind, exc)
        return 1

    if args.json:
        print(json.dumps(data.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(build_text_report(data, dates, settings.name_mapping))
    for warning in data.warnings:
        logger.warning(warning)

    elapsed_ms = int((perf_counter() - started) * 1000)
    logger.info("source=%s dates=%s status=ok duration_ms=%d", args.source, ",".join(dates), elapsed_ms)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
