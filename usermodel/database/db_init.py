import logging

from .database import engine, SessionLocal, Base
from .models import *
from usermodel.repositories.sqlalchemy.sqlalchemy_role_repository import SqlalchemyRoleRepository
from usermodel.repositories.sqlalchemy.sqlalchemy_user_repository import SqlalchemyUserRepository
from usermodel.repositories.sqlalchemy.sqlalchemy_unit_of_work import SqlalchemyUnitOfWork
from usermodel.schemas import UserCreate
from usermodel.services.user_service import UserService

logger = logging.getLogger(__name__)

DEFAULT_ROLES = ["admin", "user", "data"]

# (username, password, emails, roles) - 첫 번째 이메일이 대표 이메일이 됩니다.
DEFAULT_USERS = [
    ("admin", "password", ["admin@lambdaschool.com", "admin@email.com", "admin@mymail.com"], ["admin", "user", "data"]),
    ("cinnamon", "1234567", ["cinnamon@lambdaschool.com", "cinnamon@mymail.com", "hops@mymail.com", "bunny@email.com"], ["user", "data"]),
    ("barnbarn", "ILuvM4th!", ["barnbarn@lambdaschool.com", "barnbarn@email.com"], ["user"]),
    ("puttat", "password", ["puttat@school.lambda"], ["user"]),
    ("misskitty", "password", ["misskitty@school.lambda"], ["user"]),
]

def initialize_db(bind=None, session_factory=None):
    """
    DB 테이블을 생성하고, 사용자가 하나도 없으면 기본 역할과 사용자를 삽입합니다.
    사용자 데이터는 UserService를 통해 삽입하므로 정규화와 비밀번호 해시가 동일하게 적용됩니다.
    """
    bind = bind or engine
    session_factory = session_factory or SessionLocal

    # 모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    Base.metadata.create_all(bind=bind)
    logger.info("Tables created.")

    db = session_factory()
    try:
        # 기본 데이터가 이미 있는지 확인
        if db.query(User).first():
            logger.info("Seed data already present, skipping.")
            return

        role_repo = SqlalchemyRoleRepository(db)
        unit_of_work = SqlalchemyUnitOfWork(db)
        user_service = UserService(SqlalchemyUserRepository(db), role_repo, unit_of_work)

        # 역할과 사용자 전체를 하나의 트랜잭션으로 삽입합니다. 중간에 실패하면 아무것도 남지 않습니다.
        with unit_of_work.transaction():
            for name in DEFAULT_ROLES:
                if not role_repo.find_by_name(name):
                    role_repo.create(Role(name=name))

            role_ids = {role.name: role.id for role in role_repo.list_all()}
            for username, password, emails, roles in DEFAULT_USERS:
                user_service.create_user(UserCreate(
                    username=username,
                    password=password,
                    useremails=[{"useremail": email} for email in emails],
                    roles=[{"roleid": role_ids[name]} for name in roles],
                ))

        logger.info("Seeded %d roles and %d users.", len(DEFAULT_ROLES), len(DEFAULT_USERS))
    finally:
        db.close()

if __name__ == '__main__':
    from usermodel.logger import setup_logging
    setup_logging()
    initialize_db()
