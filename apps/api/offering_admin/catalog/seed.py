from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from offering_admin.catalog.models import (
    BrandLookup,
    Ecosystem,
    FulfillmentPlatform,
    LanguageLookup,
    ProductFeature,
)


logger = logging.getLogger("offering_admin.catalog.seed")

DEFAULT_ECOSYSTEMS = ("Accounting", "Financial Planning", "Insurance")
DEFAULT_BRANDS = (
    ("Becker", "CPA and CMA exam review", "Accounting"),
    ("Kaplan", "Licensing and continuing education", "Insurance"),
    ("Dalton", "CFP certification education", "Financial Planning"),
)
DEFAULT_PLATFORMS = (
    ("Learning Management System", "https://lms.example.com"),
    ("Print Fulfillment", None),
    ("Mobile App", None),
)
DEFAULT_FEATURES = (
    ("Practice Exams", "Timed, exam-style practice tests"),
    ("Live Instruction", "Instructor-led sessions"),
    ("Pass Guarantee", "Free retake access after an unsuccessful attempt"),
)
DEFAULT_LANGUAGES = (
    (1, "English", "EN"),
    (2, "Spanish", "ES"),
    (3, "French", "FR"),
)


class CatalogSeedHelper:
    """Loads reference data into empty lookup tables; populated tables are left alone."""

    def ensure_reference_data(self, session: Session) -> dict[str, int]:
        created = {
            "ecosystems": 0,
            "brands": 0,
            "fulfillment_platforms": 0,
            "product_features": 0,
            "languages": 0,
        }

        if self._is_empty(session, Ecosystem):
            session.add_all(Ecosystem(ecosystem_name=name) for name in DEFAULT_ECOSYSTEMS)
            session.flush()
            created["ecosystems"] = len(DEFAULT_ECOSYSTEMS)

        if self._is_empty(session, BrandLookup):
            ecosystems = {row.ecosystem_name: row.ecosystem_id for row in session.scalars(select(Ecosystem))}
            session.add_all(
                BrandLookup(name=name, description=description, ecosystem_id=ecosystems.get(ecosystem_name))
                for name, description, ecosystem_name in DEFAULT_BRANDS
            )
            created["brands"] = len(DEFAULT_BRANDS)

        if self._is_empty(session, FulfillmentPlatform):
            session.add_all(FulfillmentPlatform(name=name, url=url, active=True) for name, url in DEFAULT_PLATFORMS)
            created["fulfillment_platforms"] = len(DEFAULT_PLATFORMS)

        if self._is_empty(session, ProductFeature):
            session.add_all(
                ProductFeature(feature_name=name, feature_description=description, active=True)
                for name, description in DEFAULT_FEATURES
            )
            created["product_features"] = len(DEFAULT_FEATURES)

        if self._is_empty(session, LanguageLookup):
            session.add_all(
                LanguageLookup(language_id=language_id, language_name=name, language_abbr=abbr)
                for language_id, name, abbr in DEFAULT_LANGUAGES
            )
            created["languages"] = len(DEFAULT_LANGUAGES)

        session.commit()
        logger.info("catalog.seed.completed", extra={"operation": "ensure_reference_data"})
        return created

    @staticmethod
    def _is_empty(session: Session, model: type) -> bool:
        return not session.scalar(select(func.count()).select_from(model))


catalog_seed_helper = CatalogSeedHelper()
