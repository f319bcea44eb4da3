"""
방문자 목록 CSV 내보내기
- 목록 응답과 같은 필드, 같은 순서 (행 1개 = 방문자 1명)
"""
import csv
import io
from typing import Iterable
from app.schemas.visitor import VisitorResponse

EXPORT_COLUMNS = [
    field.alias or name for name, field in VisitorResponse.model_fields.items()
]


def export_csv(visitors: Iterable[VisitorResponse]) -> str:
    """방문자 목록을 CSV 문자열로 변환 (None 은 빈 칸)"""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for visitor in visitors:
        row = visitor.model_dump(by_alias=True)
        writer.writerow({key: "" if value is None else value for key, value in row.items()})
    return buffer.getvalue()
