"""사용자 요청 본문(JSON) 스키마."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class UseremailIn(BaseModel):
    """사용자 이메일 한 건."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    useremail: EmailStr = Field(..., max_length=255)


class UserRoleIn(BaseModel):
    """사용자에게 연결할 역할. 역할은 미리 존재해야 합니다."""

    model_config = ConfigDict(extra="ignore")

    roleid: int


class UserCreate(BaseModel):
    """
    완전한 사용자 표현 (POST, PUT).

    userid가 함께 전달되더라도 무시됩니다. 생성 시에는 저장소가 ID를 할당하고,
    전체 교체 시에는 경로의 ID가 우선합니다.
    """

    model_config = ConfigDict(extra="ignore")

    userid: Optional[int] = None
    username: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)
    useremails: List[UseremailIn] = Field(default_factory=list)
    roles: List[UserRoleIn] = Field(default_factory=list)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("username must not be blank")
        return value


class UserPatch(BaseModel):
    """
    부분 수정 요청 (PATCH).

    본문에 포함된 필드만 model_fields_set에 기록되므로, "보내지 않은 필드"와
    "값을 보낸 필드"를 명확히 구분할 수 있습니다. username/password에 null을
    보내는 것은 허용되지 않습니다.
    """

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, min_length=1)
    useremails: Optional[List[UseremailIn]] = None
    roles: Optional[List[UserRoleIn]] = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("username must not be blank")
        return value

    @model_validator(mode="after")
    def reject_null_scalars(self) -> "UserPatch":
        for name in ("username", "password"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self

    def is_set(self, name: str) -> bool:
        """해당 필드가 요청 본문에 포함되었는지 여부."""
        return name in self.model_fields_set
