from .role import Role
from .branch import Branch
from .admin import Admin
from .invitation_code import InvitationCode

__all__ = ["Role", "Branch", "Admin", "InvitationCode"]
