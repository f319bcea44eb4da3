"""
방문자 관련 Pydantic 스키마 (API 요청/응답)
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class VisitorCreate(BaseModel):
    """
    방문자 체크인 요청
    - 클라이언트가 보낸 checkin_time 등 정의되지 않은 필드는 무시됩니다.
    - photo 는 base64 data URL (data:image/...;base64,...) 입니다.
    """
    name: str = ""
    phone: str = ""
    address: str = ""
    purpose: str = ""
    company: str = ""
    person_to_meet: str = Field("", alias="personToMeet")
    photo: Optional[str] = None

    @field_validator("name", "phone", "address", "purpose", "company", "person_to_meet", mode="before")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            v = str(v)
        return v.strip() if isinstance(v, str) else v

    class Config:
        populate_by_name = True


class VisitorResponse(BaseModel):
    """방문자 응답 (시간은 모두 정규화된 epoch seconds)"""
    id: str
    name: str
    phone: Optional[str] = ""
    address: Optional[str] = ""
    purpose: Optional[str] = ""
    company: Optional[str] = ""
    person_to_meet: Optional[str] = Field("", alias="personToMeet")
    photo: Optional[str] = None
    checkin_time: int
    checkout_time: Optional[int] = None
    created_by: Optional[str] = None

    class Config:
        populate_by_name = True


class VisitorPageResponse(BaseModel):
    """방문자 목록 응답 (페이지네이션)"""
    total: int
    page: int
    per_page: int
    items: list[VisitorResponse]


class CheckoutResponse(BaseModel):
    """체크아웃 응답"""
    id: str
    checkout_time: int
