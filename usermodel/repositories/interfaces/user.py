from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from usermodel.database import models

class IUserRepository(ABC):
    """
    사용자 애그리거트(User + Useremail + UserRoles)에 대한 저장소 인터페이스.

    모든 변경 메서드는 flush까지만 수행하며 commit하지 않습니다.
    트랜잭션 경계는 IUnitOfWork가 담당합니다.
    """

    @abstractmethod
    def create(self, user_model: models.User) -> models.User:
        """새로운 사용자 행을 추가하고, 할당된 ID를 채워서 반환합니다."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[models.User]:
        """고유 ID로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[models.User]:
        """(정규화된) 사용자 이름으로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def find_by_username_containing(self, substring: str, offset: int, limit: int) -> List[models.User]:
        """
        사용자 이름에 substring이 포함된 사용자를 이름 오름차순으로 조회합니다.

        Args:
            substring: 검색할 부분 문자열 (소문자).
            offset: 건너뛸 행의 수.
            limit: 반환할 최대 행의 수.
        """
        pass

    @abstractmethod
    def list_all(self) -> List[models.User]:
        """모든 사용자의 목록을 조회합니다."""
        pass

    @abstractmethod
    def delete(self, user: models.User) -> bool:
        """사용자와 그 사용자가 소유한 이메일, 역할 연결을 모두 삭제합니다."""
        pass

    @abstractmethod
    def replace_emails(self, user: models.User, emails: List[str]) -> None:
        """사용자의 기존 이메일을 모두 삭제하고, 주어진 순서대로 새 이메일을 추가합니다."""
        pass

    @abstractmethod
    def replace_roles(self, user: models.User, role_ids: List[int]) -> None:
        """사용자의 기존 역할 연결을 모두 삭제하고, 주어진 역할 연결을 새로 추가합니다."""
        pass

    @abstractmethod
    def find_user_role(self, user_id: int, role_id: int) -> Optional[models.UserRoles]:
        """사용자-역할 연결 한 건을 조회합니다."""
        pass

    @abstractmethod
    def add_user_role(self, user_id: int, role_id: int) -> models.UserRoles:
        """사용자-역할 연결을 추가합니다."""
        pass

    @abstractmethod
    def delete_user_role(self, user_role: models.UserRoles) -> None:
        """사용자-역할 연결을 삭제합니다."""
        pass

    @abstractmethod
    def count_emails_per_user(self) -> List[Tuple[int, str, int]]:
        """
        모든 사용자에 대해 (user_id, username, 전체 이메일 수) 튜플을 이름 오름차순으로 반환합니다.
        이메일이 없는 사용자도 0으로 포함됩니다.
        """
        pass
