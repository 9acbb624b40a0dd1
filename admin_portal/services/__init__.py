from .admin_service import login_admin, onboard_admin, update_admin
from .invitation_service import validate_invitation_code
from .password_service import hash_password, verify_password
from .token_service import issue_token, verify_token

__all__ = ["login_admin", "onboard_admin", "update_admin", "validate_invitation_code", "hash_password", "verify_password", "issue_token", "verify_token"]
