import pytest
from sqlalchemy.exc import SQLAlchemyError

from quickfix.app.config import settings
from quickfix.app.exceptions import ValidationError
from quickfix.models import SiteSetting
from quickfix.schemas.settings import DEFAULT_CONTACT_EMAIL, PUBLIC_SETTING_NAMES


def test_get_returns_default_until_stored(settings_service, set_setting):
    assert settings_service.get("upiIdForPremium", "fallback@upi") == "fallback@upi"

    set_setting("upiIdForPremium", "quickfix@okaxis")

    assert settings_service.get("upiIdForPremium", "fallback@upi") == "quickfix@okaxis"


def test_get_returns_stored_value_as_is(settings_service, set_setting):
    set_setting("basicPlanPrice", "oops")
    assert settings_service.get("basicPlanPrice", 499) == "oops"


def test_get_unknown_setting(settings_service):
    with pytest.raises(ValidationError, match="Unknown setting"):
        settings_service.get("favouriteColour")


def test_get_falls_back_when_database_fails(settings_service, mocker, caplog):
    mocker.patch.object(settings_service.repo, "get_by_name", side_effect=SQLAlchemyError("down"))

    assert settings_service.get("contactEmail", "x@y.z") == "x@y.z"
    assert "Error fetching setting 'contactEmail'" in caplog.text


def test_load_merges_defaults(settings_service, set_setting):
    set_setting("proPlanPrice", 2499)

    site = settings_service.load()

    assert site.pro_plan_price == 2499
    assert site.basic_plan_price == 499
    assert site.contact_email == DEFAULT_CONTACT_EMAIL
    assert site.admin_panel_url == f"{settings.FRONTEND_URL}/admin"


def test_load_ignores_invalid_stored_value(settings_service, set_setting):
    set_setting("advancedPlanPrice", -1)
    set_setting("upiIdForPremium", "shop@upi")

    site = settings_service.load()

    assert site.advanced_plan_price == 999
    assert site.upi_id_for_premium == "shop@upi"


def test_update_persists_and_records_admin(settings_service, db_session, admin_user):
    site = settings_service.update(
        {"basicPlanPrice": "599", "globalAnnouncement": "Diwali sale"},
        updated_by=admin_user.id,
    )

    assert site.basic_plan_price == 599
    assert site.global_announcement == "Diwali sale"
    row = db_session.query(SiteSetting).filter(SiteSetting.name == "basicPlanPrice").one()
    assert row.value == 599
    assert row.updated_by == admin_user.id


def test_update_overwrites_existing(settings_service, set_setting):
    set_setting("enableComments", True)

    settings_service.update({"enableComments": False})

    assert settings_service.get("enableComments") is False


def test_update_rejects_unknown_names(settings_service, db_session):
    with pytest.raises(ValidationError, match="Unknown settings: bogus"):
        settings_service.update({"bogus": 1, "contactEmail": "a@b.c"})

    assert db_session.query(SiteSetting).count() == 0


def test_update_rejects_bad_values(settings_service, db_session):
    with pytest.raises(ValidationError, match="proPlanPrice"):
        settings_service.update({"proPlanPrice": 0})

    assert db_session.query(SiteSetting).count() == 0


def test_public_settings_hide_admin_values():
    assert "adminPanelUrl" not in PUBLIC_SETTING_NAMES
    assert "enableEmailVerification" not in PUBLIC_SETTING_NAMES
    assert "upiIdForPremium" in PUBLIC_SETTING_NAMES
