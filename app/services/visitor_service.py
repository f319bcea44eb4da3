"""
방문자 관리 서비스
비즈니스 로직 계층

체크인(생성) -> 체크아웃(1회) 상태 전이와 조회를 담당한다.
반환되는 모든 방문자는 normalize_timestamp() 로 시간이 정규화된 VisitorResponse 이다.
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from app.models.visitor import Visitor
from app.schemas.visitor import VisitorCreate, VisitorResponse
from app.utils.exceptions import NotFoundException, ValidationException, StorageException
from app.utils.logger import get_logger
from app.utils.timestamps import normalize_timestamp, now_epoch, TimestampLike

logger = get_logger(__name__)

VISITOR_STATUSES = ("all", "in", "out")


class VisitorService:
    """방문자 관리 서비스"""

    @staticmethod
    def to_record(visitor: Visitor) -> VisitorResponse:
        """ORM 객체 -> 정규화된 응답 (ORM 객체 자체는 변경하지 않음)"""
        return VisitorResponse(
            id=visitor.id,
            name=visitor.name,
            phone=visitor.phone or "",
            address=visitor.address or "",
            purpose=visitor.purpose or "",
            company=visitor.company or "",
            person_to_meet=visitor.person_to_meet or "",
            photo=visitor.photo or None,
            checkin_time=normalize_timestamp(visitor.checkin_time) or 0,
            checkout_time=normalize_timestamp(visitor.checkout_time),
            created_by=visitor.created_by,
        )

    @staticmethod
    def validate_visitor(visitor_data: VisitorCreate) -> None:
        """체크인 입력 검증 (이름 필수)"""
        if not visitor_data.name or not visitor_data.name.strip():
            raise ValidationException(detail="name required")

    @staticmethod
    def check_in(
            db: Session,
            visitor_data: VisitorCreate,
            photo_reference: Optional[str] = None,
            actor_id: Optional[str] = None
    ) -> VisitorResponse:
        """
        방문자 체크인
        - checkin_time 은 항상 서버 현재 시각 (클라이언트 값은 무시)
        - checkout_time 은 NULL 로 시작
        """
        VisitorService.validate_visitor(visitor_data)

        visitor = Visitor(
            name=visitor_data.name.strip(),
            phone=visitor_data.phone,
            address=visitor_data.address,
            purpose=visitor_data.purpose,
            company=visitor_data.company,
            person_to_meet=visitor_data.person_to_meet,
            photo=photo_reference,
            checkin_time=now_epoch(),
            checkout_time=None,
            created_by=actor_id,
        )
        db.add(visitor)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"[CHECKIN] Failed to save visitor {visitor_data.name!r}: {exc}")
            raise StorageException(detail="Failed to save visitor") from exc
        db.refresh(visitor)

        logger.info(f"[CHECKIN] id={visitor.id} name={visitor.name} at={visitor.checkin_time}")
        return VisitorService.to_record(visitor)

    @staticmethod
    def get_visitor_by_id(db: Session, visitor_id: str) -> Visitor:
        """ID로 방문자 조회"""
        visitor = db.query(Visitor).filter(Visitor.id == visitor_id).first()
        if not visitor:
            raise NotFoundException(detail=f"Visitor with ID {visitor_id} not found")
        return visitor

    @staticmethod
    def get_visitor(db: Session, visitor_id: str) -> VisitorResponse:
        return VisitorService.to_record(VisitorService.get_visitor_by_id(db, visitor_id))

    @staticmethod
    def check_out(db: Session, visitor_id: str) -> VisitorResponse:
        """
        방문자 체크아웃
        - 이미 체크아웃된 방문자는 기존 checkout_time 을 유지 (덮어쓰지 않음)
        """
        visitor = VisitorService.get_visitor_by_id(db, visitor_id)

        if visitor.is_checked_out:
            logger.info(f"[CHECKOUT] id={visitor.id} already checked out at {visitor.checkout_time}")
            return VisitorService.to_record(visitor)

        visitor.checkout_time = now_epoch()
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"[CHECKOUT] Failed to check out {visitor_id}: {exc}")
            raise StorageException(detail="Failed to check out visitor") from exc
        db.refresh(visitor)

        logger.info(f"[CHECKOUT] id={visitor.id} at={visitor.checkout_time}")
        return VisitorService.to_record(visitor)

    @staticmethod
    def _bound(value: TimestampLike, default: int, label: str) -> int:
        if value is None or value == "":
            return default
        normalized = normalize_timestamp(value)
        if normalized is None:
            raise ValidationException(detail=f"Invalid '{label}' time bound: {value!r}")
        return normalized

    @staticmethod
    def all_records(db: Session) -> List[VisitorResponse]:
        """전체 방문자 (정규화, 정렬 없음)"""
        return [VisitorService.to_record(v) for v in db.query(Visitor).all()]

    @staticmethod
    def list_visitors(
            db: Session,
            from_time: TimestampLike = None,
            to_time: TimestampLike = None,
            status: str = "all",
            search: Optional[str] = None
    ) -> List[VisitorResponse]:
        """
        방문자 목록 조회
        - [from, to] 범위(기본 [0, 현재])에 정규화된 checkin_time 이 포함된 방문자
        - checkin_time 내림차순 (동일 시각은 저장 순서 유지)
        - status: all | in (체크아웃 전) | out (체크아웃 완료)
        - search: 이름/연락처/방문 목적 부분 일치 (대소문자 무시)
        """
        status = (status or "all").lower()
        if status not in VISITOR_STATUSES:
            raise ValidationException(detail=f"Invalid status {status!r}, expected one of {VISITOR_STATUSES}")

        lower = VisitorService._bound(from_time, 0, "from")
        upper = VisitorService._bound(to_time, now_epoch(), "to")
        keyword = (search or "").strip().lower()

        records = []
        for record in VisitorService.all_records(db):
            if not lower <= record.checkin_time <= upper:
                continue
            if status == "in" and record.checkout_time is not None:
                continue
            if status == "out" and record.checkout_time is None:
                continue
            if keyword and not any(
                    keyword in (value or "").lower()
                    for value in (record.name, record.phone, record.purpose)
            ):
                continue
            records.append(record)

        records.sort(key=lambda r: r.checkin_time, reverse=True)
        return records

    @staticmethod
    def paginate(records: List[VisitorResponse], page: int = 1, per_page: int = 20) -> tuple[List[VisitorResponse], int]:
        """목록 페이지 분할 (page 는 1부터)"""
        page = max(1, page)
        per_page = max(1, per_page)
        start = (page - 1) * per_page
        return records[start:start + per_page], len(records)
