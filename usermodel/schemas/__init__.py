from .user import UseremailIn, UserRoleIn, UserCreate, UserPatch

__all__ = ["UseremailIn", "UserRoleIn", "UserCreate", "UserPatch"]
