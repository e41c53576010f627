from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from usermodel.config import get_settings

settings = get_settings()

# connect_args는 SQLite에서만 필요합니다. (thread-safe 설정)
connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

# SQLAlchemy 엔진 생성
engine = create_engine(settings.database_url, connect_args=connect_args, pool_pre_ping=True)

# autocommit=False, autoflush=False로 설정하여, 트랜잭션 경계(Unit of Work)에서
# 명시적으로 commit을 호출해야 DB에 반영됩니다.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 모든 모델 클래스가 상속받을 Base 클래스
Base = declarative_base()
