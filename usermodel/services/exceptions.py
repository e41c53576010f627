# usermodel/services/exceptions.py

# --- Not Found Exceptions ---
class NotFoundError(Exception):
    """참조한 엔티티(ID/이름)를 찾을 수 없을 때"""
    pass

class UserNotFoundError(NotFoundError):
    """사용자를 찾을 수 없을 때"""
    pass

class RoleNotFoundError(NotFoundError):
    """역할을 찾을 수 없을 때"""
    pass

class UserRoleNotFoundError(NotFoundError):
    """사용자-역할 연결을 찾을 수 없을 때"""
    pass

# --- Conflict Exceptions ---
class ConflictError(Exception):
    """유일성 제약을 위반할 때"""
    pass

class UsernameExistsError(ConflictError):
    """사용자 이름이 이미 존재할 때"""
    pass

class UserRoleExistsError(ConflictError):
    """사용자-역할 연결이 이미 존재할 때"""
    pass
