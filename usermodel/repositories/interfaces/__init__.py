from .role import IRoleRepository
from .user import IUserRepository
from .unit_of_work import IUnitOfWork

__all__ = ["IRoleRepository", "IUserRepository", "IUnitOfWork"]
