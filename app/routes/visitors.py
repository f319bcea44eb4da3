"""
방문자 체크인/체크아웃 API 라우트
"""
from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile
from typing import List, Optional
from app.database import get_db
from app.dependencies import get_current_user, get_optional_user
from app.models.user import User
from app.schemas.visitor import VisitorCreate, VisitorResponse, VisitorPageResponse, CheckoutResponse
from app.services.export_service import export_csv
from app.services.photo_service import store_photo_bytes, store_photo_inline, resolve_photo_url
from app.services.visitor_service import VisitorService
from app.utils.exceptions import ValidationException, format_validation_errors

router = APIRouter(
    prefix="/visitors",
    tags=["Visitors"]
)

PHOTO_FILE_FIELDS = ("photoFile", "photo")


def _with_photo_url(visitor: VisitorResponse, request: Request) -> VisitorResponse:
    return visitor.model_copy(update={"photo": resolve_photo_url(visitor.photo, str(request.base_url))})


async def _read_checkin_body(request: Request) -> tuple[dict, Optional[UploadFile]]:
    """JSON 또는 multipart/form-data 본문을 필드 dict 와 업로드 파일로 분리"""
    content_type = request.headers.get("content-type", "").lower()
    upload = None

    if content_type.startswith(("multipart/", "application/x-www-form-urlencoded")):
        form = await request.form()
        payload = {}
        for key, value in form.items():
            if isinstance(value, UploadFile):
                if key in PHOTO_FILE_FIELDS and upload is None:
                    upload = value
                continue
            payload[key] = value
        return payload, upload

    try:
        payload = await request.json()
    except ValueError:
        raise ValidationException(detail="Request body must be JSON or multipart/form-data")
    if not isinstance(payload, dict):
        raise ValidationException(detail="Request body must be a JSON object")
    return payload, upload


@router.post("", response_model=VisitorResponse, status_code=status.HTTP_201_CREATED)
async def create_visitor(
        request: Request,
        db: Session = Depends(get_db),
        current_user: Optional[User] = Depends(get_optional_user)
):
    """
    방문자 체크인
    - JSON (photo: base64 data URL) 또는 multipart (photoFile: 파일) 지원
    - 클라이언트의 checkin_time 은 무시하고 서버 시각으로 기록
    - 로그인 토큰이 있으면 created_by 에 사용자 ID 기록
    """
    payload, upload = await _read_checkin_body(request)
    try:
        visitor_data = VisitorCreate.model_validate(payload)
    except ValidationError as exc:
        raise ValidationException(detail=format_validation_errors(exc.errors()))

    # 이름 검증이 끝난 뒤에만 사진을 저장
    VisitorService.validate_visitor(visitor_data)

    photo_reference = None
    if upload is not None:
        photo_reference = store_photo_bytes(await upload.read(), upload.filename, upload.content_type)
    elif visitor_data.photo:
        photo_reference = store_photo_inline(visitor_data.photo)

    visitor = VisitorService.check_in(
        db,
        visitor_data,
        photo_reference=photo_reference,
        actor_id=current_user.id if current_user else None,
    )
    return _with_photo_url(visitor, request)


@router.get("", response_model=List[VisitorResponse])
async def list_visitors(
        request: Request,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
        from_time: Optional[str] = Query(None, alias="from"),
        to_time: Optional[str] = Query(None, alias="to"),
        status: str = Query("all"),
        search: Optional[str] = Query(None)
):
    """
    방문자 목록 조회
    - from/to 범위 (epoch seconds, 기본 [0, 현재]) 안에 체크인한 방문자를 최신순으로 반환
    """
    visitors = VisitorService.list_visitors(db, from_time, to_time, status, search)
    return [_with_photo_url(v, request) for v in visitors]


@router.get("/page", response_model=VisitorPageResponse)
async def list_visitors_page(
        request: Request,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
        from_time: Optional[str] = Query(None, alias="from"),
        to_time: Optional[str] = Query(None, alias="to"),
        status: str = Query("all"),
        search: Optional[str] = Query(None),
        page: int = Query(1, ge=1),
        per_page: int = Query(20, ge=1, le=100)
):
    """방문자 목록 조회 (페이지네이션)"""
    visitors = VisitorService.list_visitors(db, from_time, to_time, status, search)
    items, total = VisitorService.paginate(visitors, page, per_page)
    return {
        "total": total,
        "page": page,
        "per_page": per_page,
        "items": [_with_photo_url(v, request) for v in items]
    }


@router.get("/export")
async def export_visitors(
        request: Request,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
        from_time: Optional[str] = Query(None, alias="from"),
        to_time: Optional[str] = Query(None, alias="to"),
        status: str = Query("all"),
        search: Optional[str] = Query(None)
):
    """방문자 목록 CSV 다운로드"""
    visitors = VisitorService.list_visitors(db, from_time, to_time, status, search)
    content = export_csv(_with_photo_url(v, request) for v in visitors)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="visitors.csv"'}
    )


@router.get("/{visitor_id}", response_model=VisitorResponse)
async def get_visitor(
        visitor_id: str,
        request: Request,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """방문자 상세 조회"""
    return _with_photo_url(VisitorService.get_visitor(db, visitor_id), request)


@router.post("/{visitor_id}/checkout", response_model=CheckoutResponse)
async def checkout_visitor(
        visitor_id: str,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """방문자 체크아웃 (이미 체크아웃된 경우 기존 시각 유지)"""
    visitor = VisitorService.check_out(db, visitor_id)
    return {"id": visitor.id, "checkout_time": visitor.checkout_time}
