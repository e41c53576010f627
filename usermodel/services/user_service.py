import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from usermodel.database import models
from usermodel.repositories.interfaces import IRoleRepository, IUnitOfWork, IUserRepository
from usermodel.schemas import UserCreate, UserPatch, UseremailIn, UserRoleIn
from usermodel.services.exceptions import (
    RoleNotFoundError, UsernameExistsError, UserNotFoundError,
    UserRoleExistsError, UserRoleNotFoundError
)
from usermodel.utils.passwords import hash_password

logger = logging.getLogger(__name__)

# 저장소의 정수 컬럼(64비트)으로 표현할 수 있는 최대 ID
MAX_ID = 2 ** 63 - 1

class UserService:
    """
    사용자 애그리거트(User, Useremail, UserRoles)의 조회와 변경을 담당합니다.

    모든 변경 작업은 unit_of_work.transaction() 안에서 수행되므로, 사용자 행과
    자식 컬렉션의 변경은 전부 커밋되거나 전부 롤백됩니다.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        unit_of_work: IUnitOfWork,
        password_hasher: Callable[[str], str] = hash_password,
        page_size: int = 20,
        max_page_size: int = 100,
    ):
        """
        UserService를 초기화합니다.

        Args:
            user_repo: 사용자 애그리거트에 접근하기 위한 리포지토리.
            role_repo: 역할 존재 여부 검증에 사용하는 리포지토리.
            unit_of_work: 트랜잭션 경계를 제공하는 객체.
            password_hasher: 저장 전에 비밀번호를 해시하는 함수.
            page_size: 이름 검색의 기본 페이지 크기.
            max_page_size: 이름 검색에서 허용하는 최대 페이지 크기.
        """
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.unit_of_work = unit_of_work
        self.password_hasher = password_hasher
        self.page_size = page_size
        self.max_page_size = max_page_size

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    def list_users(self) -> List[Dict[str, Any]]:
        """모든 사용자의 목록을 이름 오름차순으로 조회합니다. (비밀번호 제외)"""
        return [self._to_dict(u) for u in self.user_repo.list_all()]

    def get_user(self, user_id: int) -> Dict[str, Any]:
        """
        ID로 특정 사용자를 이메일, 역할과 함께 조회합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        return self._to_dict(self._get_user_or_raise(user_id))

    def get_user_by_name(self, username: str) -> Dict[str, Any]:
        """
        사용자 이름으로 특정 사용자를 조회합니다. 대소문자를 구분하지 않습니다.

        Raises:
            UserNotFoundError: 해당 이름의 사용자를 찾을 수 없을 때.
        """
        user = self.user_repo.find_by_username(self._normalize_username(username))
        if not user:
            raise UserNotFoundError(f"User with username '{username}' not found.")
        return self._to_dict(user)

    def find_users_by_name_containing(self, substring: str, page: int = 0, size: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        사용자 이름에 substring이 포함된 사용자 한 페이지를 조회합니다.

        결과가 없으면 빈 리스트를 반환합니다. size는 max_page_size로 제한됩니다.

        Raises:
            ValueError: page가 음수이거나 size가 1보다 작을 때.
        """
        size = self.page_size if size is None else size
        if page < 0:
            raise ValueError("page must not be negative.")
        if size < 1:
            raise ValueError("size must be at least 1.")
        size = min(size, self.max_page_size)
        if page * size > MAX_ID:
            return []

        users = self.user_repo.find_by_username_containing(substring.lower(), page * size, size)
        return [self._to_dict(u) for u in users]

    def count_user_emails(self) -> List[Dict[str, Any]]:
        """
        사용자별로 대표 이메일을 제외한 이메일 수를 조회합니다.

        Returns:
            {"userid", "username", "countemails"} 딕셔너리의 리스트.
            이메일이 하나도 없는 사용자의 countemails는 0입니다.
        """
        return [
            {"userid": user_id, "username": username, "countemails": max(total - 1, 0)}
            for user_id, username, total in self.user_repo.count_emails_per_user()
        ]

    # ------------------------------------------------------------------
    # 변경
    # ------------------------------------------------------------------

    def create_user(self, new_user: UserCreate) -> Dict[str, Any]:
        """
        사용자와 이메일, 역할 연결을 하나의 트랜잭션으로 생성합니다.
        요청에 포함된 userid는 무시됩니다.

        Returns:
            새로 할당된 ID가 채워진 사용자 딕셔너리.

        Raises:
            UsernameExistsError: 동일한 이름의 사용자가 이미 존재할 때.
            RoleNotFoundError: 참조한 역할 ID가 존재하지 않을 때.
        """
        username = self._normalize_username(new_user.username)
        emails = self._normalize_emails(new_user.useremails)
        role_ids = self._unique_role_ids(new_user.roles)

        with self.unit_of_work.transaction():
            self._ensure_username_available(username)
            self._ensure_roles_exist(role_ids)

            user = self.user_repo.create(
                models.User(username=username, password=self.password_hasher(new_user.password))
            )
            self.user_repo.replace_emails(user, emails)
            self.user_repo.replace_roles(user, role_ids)

        logger.info("User '%s' created with id %s (%d emails, %d roles).", username, user.id, len(emails), len(role_ids))
        return self._to_dict(user)

    def replace_user(self, user_id: int, user_data: UserCreate) -> Dict[str, Any]:
        """
        사용자를 통째로 교체합니다. (PUT)

        경로의 user_id가 본문의 userid보다 우선합니다. 스칼라 필드를 덮어쓰고,
        기존 이메일과 역할 연결은 모두 삭제한 뒤 본문의 값으로 다시 생성합니다.
        본문의 컬렉션이 비어 있으면 저장된 컬렉션도 비워집니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            UsernameExistsError: 다른 사용자가 이미 같은 이름을 사용 중일 때.
            RoleNotFoundError: 참조한 역할 ID가 존재하지 않을 때.
        """
        username = self._normalize_username(user_data.username)
        emails = self._normalize_emails(user_data.useremails)
        role_ids = self._unique_role_ids(user_data.roles)

        with self.unit_of_work.transaction():
            user = self._get_user_or_raise(user_id)
            self._ensure_username_available(username, user_id)
            self._ensure_roles_exist(role_ids)

            user.username = username
            user.password = self.password_hasher(user_data.password)
            self.user_repo.replace_emails(user, emails)
            self.user_repo.replace_roles(user, role_ids)

        logger.info("User %s replaced.", user_id)
        return self._to_dict(user)

    def update_user(self, user_id: int, changes: UserPatch) -> Dict[str, Any]:
        """
        사용자를 부분 수정합니다. (PATCH)

        본문에 포함된 스칼라 필드만 덮어씁니다. useremails/roles는 비어 있지 않을
        때만 해당 컬렉션 전체를 교체하고, 비어 있거나 없으면 그대로 둡니다.
        자식 원소 단위의 병합은 하지 않습니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            UsernameExistsError: 다른 사용자가 이미 같은 이름을 사용 중일 때.
            RoleNotFoundError: 참조한 역할 ID가 존재하지 않을 때.
        """
        with self.unit_of_work.transaction():
            user = self._get_user_or_raise(user_id)

            if changes.is_set("username"):
                username = self._normalize_username(changes.username)
                self._ensure_username_available(username, user_id)
                user.username = username

            if changes.is_set("password"):
                user.password = self.password_hasher(changes.password)

            if changes.useremails:
                self.user_repo.replace_emails(user, self._normalize_emails(changes.useremails))

            if changes.roles:
                role_ids = self._unique_role_ids(changes.roles)
                self._ensure_roles_exist(role_ids)
                self.user_repo.replace_roles(user, role_ids)

        logger.info("User %s updated (fields: %s).", user_id, sorted(changes.model_fields_set))
        return self._to_dict(user)

    def delete_user(self, user_id: int) -> bool:
        """
        사용자를 삭제합니다. 사용자의 이메일과 역할 연결도 같은 트랜잭션에서 함께 삭제됩니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        with self.unit_of_work.transaction():
            user = self._get_user_or_raise(user_id)
            self.user_repo.delete(user)

        logger.info("User %s deleted.", user_id)
        return True

    def add_user_role(self, user_id: int, role_id: int) -> bool:
        """
        사용자에게 역할을 연결합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
            UserRoleExistsError: 이미 같은 연결이 존재할 때.
        """
        with self.unit_of_work.transaction():
            self._get_user_or_raise(user_id)
            self._get_role_or_raise(role_id)

            if self.user_repo.find_user_role(user_id, role_id):
                raise UserRoleExistsError(f"User '{user_id}' already has role '{role_id}'.")
            self.user_repo.add_user_role(user_id, role_id)

        logger.info("Role %s added to user %s.", role_id, user_id)
        return True

    def remove_user_role(self, user_id: int, role_id: int) -> bool:
        """
        사용자-역할 연결을 삭제합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
            UserRoleNotFoundError: 해당 연결이 존재하지 않을 때.
        """
        with self.unit_of_work.transaction():
            self._get_user_or_raise(user_id)
            self._get_role_or_raise(role_id)

            user_role = self.user_repo.find_user_role(user_id, role_id)
            if not user_role:
                raise UserRoleNotFoundError(f"User '{user_id}' does not have role '{role_id}'.")
            self.user_repo.delete_user_role(user_role)

        logger.info("Role %s removed from user %s.", role_id, user_id)
        return True

    # ------------------------------------------------------------------
    # 내부 헬퍼
    # ------------------------------------------------------------------

    def _get_user_or_raise(self, user_id: int) -> models.User:
        user = self.user_repo.find_by_id(user_id) if abs(user_id) <= MAX_ID else None
        if not user:
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        return user

    def _get_role_or_raise(self, role_id: int) -> models.Role:
        role = self.role_repo.find_by_id(role_id) if abs(role_id) <= MAX_ID else None
        if not role:
            raise RoleNotFoundError(f"Role with id '{role_id}' not found.")
        return role

    def _ensure_username_available(self, username: str, user_id: Optional[int] = None):
        existing = self.user_repo.find_by_username(username)
        if existing and existing.id != user_id:
            raise UsernameExistsError(f"User with username '{username}' already exists.")

    def _ensure_roles_exist(self, role_ids: Iterable[int]):
        for role_id in role_ids:
            self._get_role_or_raise(role_id)

    @staticmethod
    def _normalize_username(username: str) -> str:
        return username.strip().lower()

    @staticmethod
    def _normalize_emails(items: Iterable[UseremailIn]) -> List[str]:
        # 정규화 후 중복된 이메일은 처음 등장한 것만 남깁니다. (순서 = 대표 이메일 결정)
        emails = []
        for item in items:
            email = item.useremail.strip().lower()
            if email not in emails:
                emails.append(email)
        return emails

    @staticmethod
    def _unique_role_ids(items: Iterable[UserRoleIn]) -> List[int]:
        role_ids = []
        for item in items:
            if item.roleid not in role_ids:
                role_ids.append(item.roleid)
        return role_ids

    @staticmethod
    def _to_dict(user: models.User) -> Dict[str, Any]:
        return {
            "userid": user.id,
            "username": user.username,
            "primaryemail": user.primaryemail,
            "useremails": [
                {"useremailid": e.id, "useremail": e.useremail} for e in user.useremails
            ],
            "roles": [
                {"roleid": link.role_id, "name": link.role.name if link.role else None}
                for link in user.roles
            ],
        }
