"""
Daily Prediction Task

Resolves the no-hitter prediction for a day and prints it as JSON. A day
that already has a cached prediction is answered from the cache unless
--force is given.

Usage:
    python -m tasks.daily_prediction
    python -m tasks.daily_prediction --date 2025-06-01 --force --no-weather
"""

import argparse
import asyncio
from datetime import date
from typing import Optional, Sequence

from core.logging import setup_logging, get_logger
from core.settings import settings
from db.base import close_db, init_db
from services.prediction_service import PredictionService


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve the day's no-hitter prediction")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to resolve (YYYY-MM-DD). Defaults to today.",
    )
    parser.add_argument("--force", action="store_true", help="Ignore the cache and run a live pass")
    parser.add_argument(
        "--no-weather",
        dest="include_weather",
        action="store_false",
        default=settings.include_weather,
        help="Skip forecast lookups",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(
        log_level=settings.log_level,
        json_format=settings.log_format == "json",
        service_name=settings.service_name,
    )
    log = get_logger("daily_prediction")

    init_db()
    try:
        service = PredictionService.live()
        prediction = asyncio.run(service.fetch_prediction(
            for_date=args.date,
            force_refresh=args.force,
            include_weather=args.include_weather,
        ))
        log.info(
            "daily_prediction_resolved",
            date=prediction.date.isoformat(),
            pitcher=prediction.pitcher.full_name,
            score=round(prediction.confidence_score, 2),
            sample=prediction.is_sample_data,
        )
        print(prediction.model_dump_json(indent=2))
    finally:
        close_db()


if __name__ == "__main__":
    main()
