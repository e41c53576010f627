from sqlalchemy import Column, Integer, String
from ..database import Base

class Role(Base):
    """
    사용자에게 부여할 수 있는 권한의 집합을 정의합니다.
    (예: 'admin', 'user', 'data').
    역할은 독립적으로 관리되며, 사용자 경로를 통해 생성되지 않습니다.
    """
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
