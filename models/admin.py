import hmac

from flask_login import UserMixin

ADMIN_ID = "admin"


class AdminUser(UserMixin):
    """The single gallery administrator. Lives only in the session, never in the database."""

    id = ADMIN_ID

    @staticmethod
    def check_password(raw_password, configured_password):
        if not isinstance(raw_password, str) or not isinstance(configured_password, str):
            return False
        if not configured_password or not raw_password:
            return False
        return hmac.compare_digest(raw_password.encode("utf-8"), configured_password.encode("utf-8"))
