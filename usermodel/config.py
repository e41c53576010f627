"""애플리케이션 설정 관리."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """환경 변수(USERMODEL_*) 또는 .env 파일에서 읽어오는 설정."""

    model_config = SettingsConfigDict(
        env_prefix="USERMODEL_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Database
    database_url: str = Field(default="sqlite:///usermodel.db")

    # Server
    host: str = Field(default="")
    port: int = Field(default=2019)

    # Logging
    log_level: str = Field(default="INFO")

    # Pagination
    default_page_size: int = Field(default=20, gt=0)
    max_page_size: int = Field(default=100, gt=0)

    # 서버 시작 시 테이블 생성 및 기본 데이터 삽입 여부
    seed_data: bool = Field(default=True)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """캐시된 설정 인스턴스를 반환합니다."""
    return Settings()
