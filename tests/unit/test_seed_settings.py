from quickfix.models import SiteSetting, User
from quickfix.models.enums import UserRole
from quickfix.schemas.settings import SETTING_NAMES
from scripts.seed_settings import seed_admin, seed_settings


def test_seed_settings_is_idempotent(db_session, set_setting):
    set_setting("basicPlanPrice", 599)

    created = seed_settings(db_session)

    assert created == len(SETTING_NAMES) - 1
    assert seed_settings(db_session) == 0
    stored = {row.name: row for row in db_session.query(SiteSetting).all()}
    assert stored["basicPlanPrice"].value == 599
    assert stored["proPlanPrice"].value == 1999
    assert stored["contactEmail"].description == "Address that receives payment review emails"


def test_seed_admin_creates_or_promotes(db_session, make_user):
    seed_admin(db_session, "owner@quickfix.test", "owner")
    existing = make_user(email="editor@quickfix.test")
    seed_admin(db_session, "editor@quickfix.test", "ignored")

    owner = db_session.query(User).filter(User.email == "owner@quickfix.test").one()
    assert owner.role == UserRole.admin
    assert owner.email_verified is True
    db_session.refresh(existing)
    assert existing.role == UserRole.admin
    assert existing.username != "ignored"
