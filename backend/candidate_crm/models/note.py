"""
Note model - timestamped free-text annotation on a candidate
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from ..database import Base
from .candidate import utcnow, new_id


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(255), nullable=False, index=True)
    candidate_id = Column(
        String(36),
        ForeignKey("candidates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
