from typing import Any, Callable, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from domain.models import CompanyFeature, SessionLocal
from domain.schemas.company_schemas import FeatureUpsert
from repositories import FeatureRepository
from app.config import settings

logger = logging.getLogger("foodops.features")


class FeatureService:
    @staticmethod
    def is_feature_enabled(db: Session, company_id: UUID, feature_name: str) -> bool:
        """True iff the company has the feature row with is_enabled set.

        Lookup failures are logged and read as disabled.
        """
        try:
            feature = FeatureRepository(db).get(company_id, feature_name)
        except SQLAlchemyError as e:
            logger.warning(f"Feature lookup failed for {company_id}/{feature_name}: {e}")
            return False
        return bool(feature and feature.is_enabled)

    @staticmethod
    def get_feature_config(
        db: Session,
        company_id: UUID,
        feature_name: str,
        key: str,
        default: Any = None,
    ) -> Any:
        try:
            feature = FeatureRepository(db).get(company_id, feature_name)
        except SQLAlchemyError as e:
            logger.warning(f"Feature config lookup failed for {company_id}/{feature_name}: {e}")
            return default
        if not feature or not feature.config:
            return default
        return feature.config.get(key, default)

    @staticmethod
    def list_features(db: Session, company_id: UUID) -> List[CompanyFeature]:
        return FeatureRepository(db).list_for_company(company_id)

    @staticmethod
    def set_feature(db: Session, company_id: UUID, data: FeatureUpsert) -> CompanyFeature:
        feature = FeatureRepository(db).upsert(
            company_id, data.feature_name, data.is_enabled, data.config
        )
        logger.info(
            f"Feature {data.feature_name} {'enabled' if data.is_enabled else 'disabled'} "
            f"for company {company_id}"
        )
        return feature

    @staticmethod
    def enable_default_features(
        db: Session, company_id: UUID, features: Optional[List[str]] = None
    ) -> None:
        """Stage the default feature rows for a new company; the caller commits"""
        repo = FeatureRepository(db)
        for name in features if features is not None else settings.default_features:
            repo.upsert(company_id, name, True, commit=False)

    @staticmethod
    def ensure_required_features(
        company_id: UUID, session_factory: Callable[[], Session] = SessionLocal
    ) -> int:
        """
        Backfill required features missing or disabled for a company.

        Runs after the response as a background task with its own session.
        Each failure is logged and discarded. Returns how many rows were fixed.
        """
        fixed = 0
        db = session_factory()
        try:
            repo = FeatureRepository(db)
            for name in settings.required_features:
                try:
                    feature = repo.get(company_id, name)
                    if feature and feature.is_enabled:
                        continue
                    repo.upsert(company_id, name, True)
                    fixed += 1
                except SQLAlchemyError as e:
                    db.rollback()
                    logger.warning(f"Could not backfill feature {name} for {company_id}: {e}")
        finally:
            db.close()
        if fixed:
            logger.info(f"Backfilled {fixed} required feature(s) for company {company_id}")
        return fixed
