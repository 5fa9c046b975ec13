"""Site setting repository."""
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
from uuid import UUID

from quickfix.repositories.base import BaseRepository
from quickfix.models.site_setting import SiteSetting


class SiteSettingRepository(BaseRepository[SiteSetting]):
    """Repository for named site settings."""

    def __init__(self, db: Session):
        super().__init__(SiteSetting, db)

    def get_by_name(self, name: str) -> Optional[SiteSetting]:
        return self.get_by_field('name', name)

    def all_values(self) -> Dict[str, Any]:
        """Get every stored setting as a name -> value mapping."""
        return {row.name: row.value for row in self.db.query(SiteSetting).all()}

    def upsert(self, name: str, value: Any, updated_by: Optional[UUID] = None) -> SiteSetting:
        """Insert or overwrite a setting without committing."""
        row = self.get_by_name(name)
        if row is None:
            row = SiteSetting(name=name, value=value, updated_by=updated_by)
            self.db.add(row)
        else:
            row.value = value
            row.updated_by = updated_by
        self.db.flush()
        return row
