# tests/services/test_role_service.py
import pytest
from unittest.mock import MagicMock

from usermodel.services.role_service import RoleService
from usermodel.services.exceptions import RoleNotFoundError
from usermodel.repositories.interfaces import IRoleRepository
from usermodel.database import models

@pytest.fixture
def mock_role_repo() -> MagicMock:
    """IRoleRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IRoleRepository)

@pytest.fixture
def role_service(mock_role_repo: MagicMock) -> RoleService:
    return RoleService(mock_role_repo)

class TestRoleService:
    def test_list_roles(self, role_service: RoleService, mock_role_repo: MagicMock):
        # === Arrange ===
        mock_role_repo.list_all.return_value = [models.Role(id=1, name="admin"), models.Role(id=2, name="user")]

        # === Act ===
        result = role_service.list_roles()

        # === Assert ===
        assert result == [{"roleid": 1, "name": "admin"}, {"roleid": 2, "name": "user"}]

    def test_get_role_not_found(self, role_service: RoleService, mock_role_repo: MagicMock):
        """존재하지 않는 역할 조회 시 RoleNotFoundError가 발생하는지 테스트합니다."""
        # === Arrange ===
        mock_role_repo.find_by_id.return_value = None

        # === Act & Assert ===
        with pytest.raises(RoleNotFoundError):
            role_service.get_role(42)
