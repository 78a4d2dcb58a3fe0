import uuid

from sqlalchemy import Column, Date, DateTime, String
from app.db.database import Base


class Template(Base):
    """
    CRUD 보일러플레이트용 템플릿 테이블 (templates)
    """

    __tablename__ = "templates"

    # UUID v4 문자열 (DB 종류와 무관하게 String으로 보관)
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    birth_date = Column(Date, nullable=False)

    # created_at/updated_at은 crud에서 같은 시각으로 명시적으로 채움
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
