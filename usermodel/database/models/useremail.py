from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base

class Useremail(Base):
    """
    사용자에게 종속된 이메일 주소입니다.
    position은 등록 순서를 나타내며, position이 0인 이메일이 대표(primary) 이메일입니다.
    """
    __tablename__ = "useremails"
    __table_args__ = (
        UniqueConstraint("user_id", "useremail", name="uq_useremails_user_email"),
        # 교체된 이메일이 이전 ID를 돌려받지 않도록 합니다.
        {"sqlite_autoincrement": True},
    )
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    useremail = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="useremails")
