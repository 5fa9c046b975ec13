"""Public endpoints: announcements and public site settings."""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quickfix.api.deps import get_db, get_settings_service
from quickfix.repositories.notification_repo import AnnouncementRepository
from quickfix.schemas.notification import AnnouncementResponse
from quickfix.schemas.settings import PUBLIC_SETTING_NAMES
from quickfix.services.settings_service import SettingsService


router = APIRouter()


@router.get('/announcements', response_model=List[AnnouncementResponse])
def list_active_announcements(db: Session = Depends(get_db)):
    return [AnnouncementResponse.model_validate(a) for a in AnnouncementRepository(db).get_active()]


@router.get('/public/settings')
def get_public_settings(settings_service: SettingsService = Depends(get_settings_service)) -> Dict[str, Any]:
    values = settings_service.load().model_dump(by_alias=True)
    return {name: value for name, value in values.items() if name in PUBLIC_SETTING_NAMES}
