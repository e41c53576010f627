from typing import Any, Dict, List

from usermodel.repositories.interfaces import IRoleRepository
from usermodel.services.exceptions import RoleNotFoundError

class RoleService:
    """역할 조회 서비스. 역할은 사용자 경로와 별개로 관리되며, 여기서는 읽기만 제공합니다."""

    def __init__(self, role_repo: IRoleRepository):
        self.role_repo = role_repo

    def list_roles(self) -> List[Dict[str, Any]]:
        """모든 역할의 목록을 ID 오름차순으로 조회합니다."""
        return [{"roleid": r.id, "name": r.name} for r in self.role_repo.list_all()]

    def get_role(self, role_id: int) -> Dict[str, Any]:
        """
        ID로 특정 역할을 조회합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        role = self.role_repo.find_by_id(role_id)
        if not role:
            raise RoleNotFoundError(f"Role with id '{role_id}' not found.")
        return {"roleid": role.id, "name": role.name}
