# tests/conftest.py
import io
import json
from collections import namedtuple
from wsgiref.util import setup_testing_defaults

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from usermodel.app import make_application
from usermodel.config import Settings
from usermodel.database import models
from usermodel.database.database import Base

# ===================================================================
#  인메모리 SQLite 기반 Fixture 설정
# ===================================================================

@pytest.fixture
def engine():
    """테스트마다 새 인메모리 SQLite 엔진을 만들고 테이블을 생성합니다."""
    # StaticPool: 여러 세션이 같은 인메모리 DB 연결을 공유하도록 합니다.
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def roles(session_factory):
    """admin(1), user(2), data(3) 역할을 미리 삽입하고 이름 -> ID 매핑을 반환합니다."""
    session = session_factory()
    try:
        session.add_all([
            models.Role(id=1, name="admin"),
            models.Role(id=2, name="user"),
            models.Role(id=3, name="data"),
        ])
        session.commit()
    finally:
        session.close()
    return {"admin": 1, "user": 2, "data": 3}

# ===================================================================
#  WSGI 테스트 클라이언트
# ===================================================================

Response = namedtuple("Response", ["status_code", "headers", "json"])

class WsgiClient:
    """WSGI 애플리케이션을 직접 호출하는 최소한의 테스트 클라이언트."""
    def __init__(self, app):
        self.app = app

    def request(self, method, path, body=None, query=""):
        raw = json.dumps(body).encode("utf-8") if body is not None else b""
        environ = {}
        setup_testing_defaults(environ)
        environ.update({
            "REQUEST_METHOD": method,
            "PATH_INFO": path,
            "QUERY_STRING": query,
            "CONTENT_TYPE": "application/json",
            "CONTENT_LENGTH": str(len(raw)),
            "wsgi.input": io.BytesIO(raw),
        })

        captured = {}
        def start_response(status, headers):
            captured["status"] = status
            captured["headers"] = dict(headers)

        payload = b"".join(self.app(environ, start_response))
        status_code = int(captured["status"].split(" ", 1)[0])
        return Response(status_code, captured["headers"], json.loads(payload) if payload else None)

    def get(self, path, query=""):
        return self.request("GET", path, query=query)

    def post(self, path, body=None):
        return self.request("POST", path, body)

    def put(self, path, body=None):
        return self.request("PUT", path, body)

    def patch(self, path, body=None):
        return self.request("PATCH", path, body)

    def delete(self, path):
        return self.request("DELETE", path)

@pytest.fixture
def client(session_factory, roles):
    settings = Settings(default_page_size=20, max_page_size=50)
    return WsgiClient(make_application(session_factory, settings))
