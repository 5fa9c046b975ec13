"""Site settings schemas."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


DEFAULT_UPI_ID = "your.default.upi@bank"
DEFAULT_CONTACT_EMAIL = "support@quickfix.com"


class SiteSettings(BaseModel):
    """Every runtime setting the site knows about, with its default.

    Field aliases are the stored setting names.
    """
    model_config = ConfigDict(populate_by_name=True)

    # Access
    allow_registration: bool = Field(True, alias="allowRegistration")
    allow_login: bool = Field(True, alias="allowLogin")
    website_maintenance_mode: bool = Field(False, alias="websiteMaintenanceMode")
    enable_email_verification: bool = Field(False, alias="enableEmailVerification")

    # Premium
    upi_id_for_premium: str = Field(DEFAULT_UPI_ID, alias="upiIdForPremium")
    basic_plan_price: float = Field(499, gt=0, alias="basicPlanPrice")
    advanced_plan_price: float = Field(999, gt=0, alias="advancedPlanPrice")
    pro_plan_price: float = Field(1999, gt=0, alias="proPlanPrice")

    # Content
    new_guide_notification_to_subscribers: bool = Field(False, alias="newGuideNotificationToSubscribers")
    global_announcement: Optional[str] = Field(None, alias="globalAnnouncement")
    enable_comments: bool = Field(True, alias="enableComments")
    enable_ratings: bool = Field(True, alias="enableRatings")
    privacy_policy_last_updated: Optional[str] = Field(None, alias="privacyPolicyLastUpdated")
    terms_of_service_last_updated: Optional[str] = Field(None, alias="termsOfServiceLastUpdated")

    # Contact / admin
    contact_email: str = Field(DEFAULT_CONTACT_EMAIL, alias="contactEmail")
    admin_panel_url: Optional[str] = Field(None, alias="adminPanelUrl")
    office_phone: Optional[str] = Field(None, alias="officePhone")
    office_address: Optional[str] = Field(None, alias="officeAddress")
    office_map_url: Optional[str] = Field(None, alias="officeMapUrl")

    # Social
    social_facebook_url: Optional[str] = Field(None, alias="socialFacebookUrl")
    social_twitter_url: Optional[str] = Field(None, alias="socialTwitterUrl")
    social_instagram_url: Optional[str] = Field(None, alias="socialInstagramUrl")


SETTING_NAMES = frozenset(field.alias for field in SiteSettings.model_fields.values())

# Exposed without authentication
PUBLIC_SETTING_NAMES = SETTING_NAMES - {"adminPanelUrl", "enableEmailVerification"}
