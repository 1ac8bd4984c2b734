from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from decorapi.models.base import BaseModel


class User(BaseModel):
    """
    디바이스 단위 사용자 - 생성 쿼터 원장의 단일 소스

    device_id는 클라이언트가 만든 불투명 식별자이며 인증되지 않는다
    (최초 사용 시 신뢰). 행은 삭제되지 않는다.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("total_generated >= 0", name="ck_users_total_generated"),
    )

    device_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    # 보정(restore) 경합에서 일시적으로 음수가 될 수 있어 제약을 걸지 않는다
    generations_remaining: Mapped[int] = mapped_column(Integer, nullable=False)
    total_generated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self):
        return (
            f"<User(device_id={self.device_id}, remaining={self.generations_remaining}, "
            f"total={self.total_generated})>"
        )
