# File: app/db/init_db.py
"""
Database initialization script.

This script creates the tables and, on request, a sample city with its
texts in every supported language.

    python -m app.db.init_db --reset --seed
"""

import argparse
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging_config import configure_logging
from app.db.session import SessionLocal, init_db
from app.services.city_service import CityService

logger = logging.getLogger(__name__)

SAMPLE_CITY = {
    "state": "BA",
    "latitude": -12.9714,
    "longitude": -38.5014,
    "texts": {
        "pt": {"name": "Salvador", "description": "Primeira capital do Brasil."},
        "en": {"name": "Salvador", "description": "The first capital of Brazil."},
        "es": {"name": "Salvador", "description": "La primera capital de Brasil."},
    },
}


def seed(db: Session) -> None:
    """
    Create the sample city unless a city of its state already exists.

    Args:
        db: SQLAlchemy database session
    """
    service = CityService(db)
    if service.find_by_state(SAMPLE_CITY["state"]):
        logger.info(f"Sample city already present in state {SAMPLE_CITY['state']}")
        return

    texts = SAMPLE_CITY["texts"]
    default_texts = texts[settings.DEFAULT_LANGUAGE]
    city = service.create(
        {
            "state": SAMPLE_CITY["state"],
            "latitude": SAMPLE_CITY["latitude"],
            "longitude": SAMPLE_CITY["longitude"],
            **default_texts,
        },
        language=settings.DEFAULT_LANGUAGE,
    )

    for language, values in texts.items():
        if language == settings.DEFAULT_LANGUAGE or language not in settings.SUPPORTED_LANGUAGES:
            continue
        for field, text in values.items():
            service.set_translation(city["city_id"], field, language, text)

    logger.info(f"Sample city created with ID: {city['city_id']}")


def main() -> None:
    """Run database initialization."""
    parser = argparse.ArgumentParser(description="Create the content platform tables")
    parser.add_argument("--reset", action="store_true", help="drop every table first")
    parser.add_argument("--seed", action="store_true", help="create a sample city")
    args = parser.parse_args()

    configure_logging()
    if not init_db(reset=args.reset):
        raise SystemExit(1)

    if args.seed:
        db = SessionLocal()
        try:
            seed(db)
        finally:
            db.close()
    logger.info("Database initialization finished")


if __name__ == "__main__":
    main()
