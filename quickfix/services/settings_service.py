"""Runtime site settings backed by the site_settings table."""
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quickfix.app.config import settings as app_settings
from quickfix.app.exceptions import ValidationError
from quickfix.repositories.settings_repo import SiteSettingRepository
from quickfix.schemas.settings import SiteSettings, SETTING_NAMES

logger = logging.getLogger(__name__)


class SettingsService:
    """Typed access to the enumerated site settings."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SiteSettingRepository(db)

    def get(self, name: str, default: Any = None) -> Any:
        """
        Get the stored value of a setting.

        Args:
            name: Setting name (one of SETTING_NAMES)
            default: Returned when the setting is not stored or the lookup fails

        Returns:
            The stored value as-is, or ``default``
        """
        if name not in SETTING_NAMES:
            raise ValidationError(f"Unknown setting '{name}'.")
        try:
            row = self.repo.get_by_name(name)
        except SQLAlchemyError as exc:
            logger.error(f"Error fetching setting '{name}': {exc}")
            return default
        return row.value if row is not None else default

    def load(self) -> SiteSettings:
        """Get every setting, stored values over defaults."""
        stored = self.repo.all_values()
        known = {name: value for name, value in stored.items() if name in SETTING_NAMES}
        try:
            site = SiteSettings.model_validate(known)
        except PydanticValidationError as exc:
            # A bad stored value must not hide the rest of the settings
            logger.error(f"Stored settings failed validation, using defaults where invalid: {exc}")
            site = SiteSettings.model_validate(
                {k: v for k, v in known.items() if _is_valid(k, v)}
            )
        if not site.admin_panel_url:
            site.admin_panel_url = self.admin_panel_url()
        return site

    def admin_panel_url(self) -> str:
        return self.get("adminPanelUrl", None) or f"{app_settings.FRONTEND_URL}/admin"

    def update(self, values: Dict[str, Any], updated_by: Optional[UUID] = None) -> SiteSettings:
        """
        Validate and store a batch of settings in one commit.

        Args:
            values: Mapping of setting name to new value
            updated_by: Admin user UUID

        Raises:
            ValidationError: Unknown names or values of the wrong type
        """
        unknown = sorted(set(values) - SETTING_NAMES)
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(unknown)}.")

        try:
            validated = SiteSettings.model_validate(values)
        except PydanticValidationError as exc:
            messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
            raise ValidationError("; ".join(messages))

        cleaned = validated.model_dump(by_alias=True)
        for name in values:
            self.repo.upsert(name, cleaned[name], updated_by=updated_by)
        self.db.commit()
        logger.info(f"Settings updated: {', '.join(sorted(values))}")
        return self.load()


def _is_valid(name: str, value: Any) -> bool:
    try:
        SiteSettings.model_validate({name: value})
        return True
    except PydanticValidationError:
        return False
