from .role import Role
from .user import User
from .useremail import Useremail
from .association import UserRoles

__all__ = ["Role", "User", "Useremail", "UserRoles"]
