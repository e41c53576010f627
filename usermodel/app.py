# usermodel/app.py
from wsgiref.simple_server import make_server
from urllib.parse import parse_qs
import json
import logging
import sys
import re

from pydantic import ValidationError

# SQLAlchemy 및 의존성 임포트
from usermodel.config import get_settings
from usermodel.database.database import SessionLocal
from usermodel.repositories.sqlalchemy.sqlalchemy_user_repository import SqlalchemyUserRepository
from usermodel.repositories.sqlalchemy.sqlalchemy_role_repository import SqlalchemyRoleRepository
from usermodel.repositories.sqlalchemy.sqlalchemy_unit_of_work import SqlalchemyUnitOfWork
from usermodel.schemas import UserCreate, UserPatch
from usermodel.services.user_service import UserService
from usermodel.services.role_service import RoleService
from usermodel.services.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        return json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, json.JSONDecodeError):
        raise ValueError("Invalid or missing JSON body.")

def get_query_int(environ, name, default=None):
    values = parse_qs(environ.get("QUERY_STRING", "")).get(name)
    if not values:
        return default
    try:
        return int(values[0])
    except ValueError:
        raise ValueError(f"Query parameter '{name}' must be an integer.")

def handle_exception(e):
    if isinstance(e, NotFoundError):
        return "404 Not Found", json.dumps({"error": str(e)})
    if isinstance(e, ConflictError):
        return "409 Conflict", json.dumps({"error": str(e)})
    # pydantic의 ValidationError는 ValueError의 하위 클래스이므로 먼저 검사합니다.
    if isinstance(e, ValidationError):
        details = e.errors(include_url=False, include_context=False)
        return "400 Bad Request", json.dumps({"error": "Invalid request body.", "details": details})
    if isinstance(e, ValueError):
        return "400 Bad Request", json.dumps({"error": str(e)})

    logger.exception("Unhandled error while processing request")
    return "500 Internal Server Error", json.dumps({"error": "Internal Server Error"})

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

def make_application(session_factory=SessionLocal, settings=None):
    """
    요청마다 새 DB 세션과 리포지토리, 서비스를 구성하는 WSGI 애플리케이션을 만듭니다.

    Args:
        session_factory: 요청마다 호출되어 SQLAlchemy 세션을 반환하는 팩토리.
        settings: 페이지 크기 등 설정. 생략하면 환경 변수에서 읽습니다.
    """
    settings = settings or get_settings()

    def application(environ, start_response):
        db_session = session_factory()
        headers = []
        try:
            # 1. 의존성 생성 (Repositories -> Services)
            user_repo = SqlalchemyUserRepository(db_session)
            role_repo = SqlalchemyRoleRepository(db_session)
            unit_of_work = SqlalchemyUnitOfWork(db_session)

            user_service = UserService(
                user_repo, role_repo, unit_of_work,
                page_size=settings.default_page_size,
                max_page_size=settings.max_page_size,
            )
            role_service = RoleService(role_repo)

            # 2. 생성된 서비스 객체들을 environ을 통해 핸들러에 전달
            environ['services'] = {
                'user': user_service,
                'role': role_service,
            }

            # 3. 라우팅 및 핸들러 실행
            path = environ.get("PATH_INFO", "")
            method = environ.get("REQUEST_METHOD", "")

            handler, path_args = None, []
            for route_method, pattern, route_handler in ROUTES:
                if method == route_method and (match := re.match(pattern, path)):
                    handler, path_args = route_handler, match.groups()
                    break

            if handler:
                status, response_body, *extra = handler(environ, *path_args)
                if extra:
                    headers.extend(extra[0])
            else:
                status, response_body = '404 Not Found', json.dumps({'error': 'Not Found'})

        except Exception as e:
            status, response_body = handle_exception(e)
        finally:
            db_session.close()

        logger.info("%s %s -> %s", environ.get("REQUEST_METHOD", ""), environ.get("PATH_INFO", ""), status)
        start_response(status, [("Content-Type", "application/json")] + headers)
        return [response_body.encode("utf-8")]

    return application

# --------------------------------------------------------------------------
## 핸들러 함수
# --------------------------------------------------------------------------

def list_users_handler(environ, *args):
    users = environ['services']['user'].list_users()
    return '200 OK', json.dumps(users)

def get_user_handler(environ, user_id):
    user = environ['services']['user'].get_user(int(user_id))
    return '200 OK', json.dumps(user)

def get_user_by_name_handler(environ, username):
    user = environ['services']['user'].get_user_by_name(username)
    return '200 OK', json.dumps(user)

def get_users_like_name_handler(environ, substring):
    users = environ['services']['user'].find_users_by_name_containing(
        substring,
        page=get_query_int(environ, 'page', 0),
        size=get_query_int(environ, 'size'),
    )
    return '200 OK', json.dumps(users)

def create_user_handler(environ, *args):
    data = UserCreate.model_validate(get_request_data(environ))
    user = environ['services']['user'].create_user(data)
    location = f"/users/user/{user['userid']}"
    return '201 Created', json.dumps(user), [("Location", location)]

def replace_user_handler(environ, user_id):
    data = UserCreate.model_validate(get_request_data(environ))
    user = environ['services']['user'].replace_user(int(user_id), data)
    return '200 OK', json.dumps(user)

def update_user_handler(environ, user_id):
    changes = UserPatch.model_validate(get_request_data(environ))
    user = environ['services']['user'].update_user(int(user_id), changes)
    return '200 OK', json.dumps(user)

def delete_user_handler(environ, user_id):
    environ['services']['user'].delete_user(int(user_id))
    return '204 No Content', ''

def count_user_emails_handler(environ, *args):
    counts = environ['services']['user'].count_user_emails()
    return '200 OK', json.dumps(counts)

def add_user_role_handler(environ, user_id, role_id):
    environ['services']['user'].add_user_role(int(user_id), int(role_id))
    return '201 Created', ''

def remove_user_role_handler(environ, user_id, role_id):
    environ['services']['user'].remove_user_role(int(user_id), int(role_id))
    return '204 No Content', ''

def list_roles_handler(environ, *args):
    roles = environ['services']['role'].list_roles()
    return '200 OK', json.dumps(roles)

def get_role_handler(environ, role_id):
    role = environ['services']['role'].get_role(int(role_id))
    return '200 OK', json.dumps(role)

ROUTES = [
    ('GET', r'^/users/users$', list_users_handler),
    ('GET', r'^/users/user/email/count$', count_user_emails_handler),
    ('GET', r'^/users/user/([0-9]{1,18})$', get_user_handler),
    ('GET', r'^/users/user/name/like/([^/]+)$', get_users_like_name_handler),
    ('GET', r'^/users/user/name/([^/]+)$', get_user_by_name_handler),
    ('POST', r'^/users/user$', create_user_handler),
    ('PUT', r'^/users/user/([0-9]{1,18})$', replace_user_handler),
    ('PATCH', r'^/users/user/([0-9]{1,18})$', update_user_handler),
    ('DELETE', r'^/users/user/([0-9]{1,18})$', delete_user_handler),
    ('POST', r'^/users/user/([0-9]{1,18})/role/([0-9]{1,18})$', add_user_role_handler),
    ('DELETE', r'^/users/user/([0-9]{1,18})/role/([0-9]{1,18})$', remove_user_role_handler),
    ('GET', r'^/roles/roles$', list_roles_handler),
    ('GET', r'^/roles/role/([0-9]{1,18})$', get_role_handler),
]

application = make_application()

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

def main():
    from usermodel.database.db_init import initialize_db
    from usermodel.logger import setup_logging

    setup_logging()
    settings = get_settings()
    if settings.seed_data:
        initialize_db()

    try:
        with make_server(settings.host, settings.port, application) as httpd:
            logger.info("Serving usermodel on port %d...", settings.port)
            httpd.serve_forever()
    except Exception as e:
        logger.error("Error starting server: %s", e)
        sys.exit(1)

if __name__ == "__main__":
    main()
