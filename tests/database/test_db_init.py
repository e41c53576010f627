# tests/database/test_db_init.py
import pytest

from usermodel.database import models
from usermodel.database import db_init
from usermodel.database.db_init import initialize_db, DEFAULT_USERS
from usermodel.services.exceptions import UsernameExistsError

def test_initialize_db_seeds_roles_and_users(engine, session_factory):
    """빈 DB에 기본 역할과 사용자가 삽입되는지 테스트합니다."""
    # === Act ===
    initialize_db(bind=engine, session_factory=session_factory)

    # === Assert ===
    session = session_factory()
    try:
        assert sorted(r.name for r in session.query(models.Role).all()) == ["admin", "data", "user"]
        assert session.query(models.User).count() == len(DEFAULT_USERS)

        cinnamon = session.query(models.User).filter(models.User.username == "cinnamon").one()
        assert cinnamon.primaryemail == "cinnamon@lambdaschool.com"
        assert cinnamon.password != "1234567"
        assert [link.role.name for link in cinnamon.roles] == ["user", "data"]
    finally:
        session.close()

def test_initialize_db_is_idempotent(engine, session_factory):
    # === Act ===
    initialize_db(bind=engine, session_factory=session_factory)
    initialize_db(bind=engine, session_factory=session_factory)

    # === Assert ===
    session = session_factory()
    try:
        assert session.query(models.Role).count() == 3
        assert session.query(models.User).count() == len(DEFAULT_USERS)
    finally:
        session.close()

def test_initialize_db_failure_leaves_no_partial_seed(engine, session_factory, monkeypatch):
    """사용자 삽입 도중 실패하면 역할과 앞서 삽입한 사용자까지 모두 롤백되는지 테스트합니다."""
    # === Arrange ===
    # 시나리오: 두 번째 사용자가 첫 번째와 같은 이름이라 충돌
    monkeypatch.setattr(db_init, "DEFAULT_USERS", [
        ("first", "pw", ["first@x.com"], ["user"]),
        ("FIRST", "pw", [], ["user"]),
    ])

    # === Act ===
    with pytest.raises(UsernameExistsError):
        initialize_db(bind=engine, session_factory=session_factory)

    # === Assert ===
    session = session_factory()
    try:
        assert session.query(models.User).count() == 0
        assert session.query(models.Useremail).count() == 0
        assert session.query(models.Role).count() == 0
    finally:
        session.close()
