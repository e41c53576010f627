from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base

class UserRoles(Base):
    """
    사용자(User)와 역할(Role) 사이의 다대다(many-to-many) 관계를
    연결하는 연관 테이블(Association Table) 모델입니다.
    (user_id, role_id) 복합 기본키로 사용자-역할 쌍마다 한 행만 존재합니다.
    """
    __tablename__ = 'userroles'
    user_id = Column(Integer, ForeignKey('users.id'), primary_key=True)
    role_id = Column(Integer, ForeignKey('roles.id'), primary_key=True)

    user = relationship("User", back_populates="roles")
    role = relationship("Role")
