from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from usermodel.database import models
from usermodel.repositories.interfaces import IUserRepository

def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

class SqlalchemyUserRepository(IUserRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, user_model: models.User) -> models.User:
        self.db.add(user_model)
        self.db.flush()  # commit 전에 user.id 할당
        return user_model

    def find_by_id(self, user_id: int) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def find_by_username(self, username: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.username == username).first()

    def find_by_username_containing(self, substring: str, offset: int, limit: int) -> List[models.User]:
        pattern = f"%{_escape_like(substring)}%"
        return (
            self.db.query(models.User)
            .filter(models.User.username.like(pattern, escape="\\"))
            .order_by(models.User.username.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def list_all(self) -> List[models.User]:
        return self.db.query(models.User).order_by(models.User.username.asc()).all()

    def delete(self, user: models.User) -> bool:
        if user:
            self._delete_children(user, "useremails")
            self._delete_children(user, "roles")
            self.db.delete(user)
            self.db.flush()
            return True
        return False

    def replace_emails(self, user: models.User, emails: List[str]) -> None:
        self._delete_children(user, "useremails")
        for position, email in enumerate(emails):
            self.db.add(models.Useremail(user_id=user.id, useremail=email, position=position))
        self.db.flush()
        self.db.expire(user, ["useremails"])

    def replace_roles(self, user: models.User, role_ids: List[int]) -> None:
        self._delete_children(user, "roles")
        for role_id in role_ids:
            self.db.add(models.UserRoles(user_id=user.id, role_id=role_id))
        self.db.flush()
        self.db.expire(user, ["roles"])

    def find_user_role(self, user_id: int, role_id: int) -> Optional[models.UserRoles]:
        return self.db.query(models.UserRoles).filter(
            models.UserRoles.user_id == user_id,
            models.UserRoles.role_id == role_id
        ).first()

    def add_user_role(self, user_id: int, role_id: int) -> models.UserRoles:
        user_role = models.UserRoles(user_id=user_id, role_id=role_id)
        self.db.add(user_role)
        self.db.flush()
        return user_role

    def delete_user_role(self, user_role: models.UserRoles) -> None:
        self.db.delete(user_role)
        self.db.flush()

    def count_emails_per_user(self) -> List[Tuple[int, str, int]]:
        rows = (
            self.db.query(models.User.id, models.User.username, func.count(models.Useremail.id))
            .outerjoin(models.Useremail, models.Useremail.user_id == models.User.id)
            .group_by(models.User.id, models.User.username)
            .order_by(models.User.username.asc())
            .all()
        )
        return [(user_id, username, count) for user_id, username, count in rows]

    def _delete_children(self, user: models.User, collection: str):
        # 자식 행을 먼저 삭제하고 flush한 뒤, 부모의 컬렉션 캐시를 비웁니다.
        for child in list(getattr(user, collection)):
            self.db.delete(child)
        self.db.flush()
        self.db.expire(user, [collection])
