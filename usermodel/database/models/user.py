from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..database import Base

class User(Base):
    """
    사용자 애그리거트의 루트 엔티티입니다.
    이메일(Useremail)과 역할 연결(UserRoles) 컬렉션을 소유하며,
    두 컬렉션은 사용자와 함께 하나의 트랜잭션 단위로 생성/교체/삭제됩니다.
    """
    __tablename__ = "users"
    # 삭제된 ID를 재사용하지 않도록 SQLite AUTOINCREMENT를 사용합니다.
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, index=True)
    # 대소문자 구분 없는 조회를 위해 소문자로 정규화하여 저장합니다.
    username = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)

    # 자식 행의 삽입/삭제는 리포지토리가 명시적으로 수행합니다. (ORM cascade 미사용)
    useremails = relationship("Useremail", back_populates="user", order_by="Useremail.position")
    roles = relationship("UserRoles", back_populates="user", order_by="UserRoles.role_id")

    @property
    def primaryemail(self):
        """가장 먼저 등록된(position이 가장 작은) 이메일. 없으면 None."""
        return self.useremails[0].useremail if self.useremails else None
