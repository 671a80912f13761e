from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship, validates

from curator.core.db import Base
from curator.models.contracts import LibraryType, Sentiment


class Recommendation(Base):
    __tablename__ = "recommendations"

    id = Column(Integer, primary_key=True)
    # Discord message id, or a synthetic "bulk-" id for imported URLs
    original_message_id = Column(String(64), nullable=False, unique=True)
    original_channel_id = Column(String(64), nullable=False)
    original_content = Column(Text, nullable=False, default="")
    recommender_id = Column(String(64), nullable=False)
    recommender_name = Column(String(200), nullable=False)
    url = Column(String(2048), nullable=False, index=True)

    # Classification
    title = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    content_type = Column(String(20), nullable=True, index=True)
    topics = Column(JSON, default=list, nullable=False)
    duration = Column(String(100), nullable=True)
    quality_score = Column(Integer, nullable=True)
    sentiment = Column(String(20), nullable=True)
    ai_summary = Column(Text, nullable=True)
    tldr = Column(Text, nullable=True)
    key_takeaways = Column(JSON, default=list, nullable=False)
    main_ideas = Column(JSON, default=list, nullable=False)
    thumbnail = Column(String(2048), nullable=True)
    library_type = Column(String(20), nullable=True, index=True)
    primary_tag = Column(String(100), nullable=True)
    secondary_tags = Column(JSON, default=list, nullable=False)

    # Publication
    forum_post_id = Column(String(64), nullable=True, unique=True)
    forum_thread_id = Column(String(64), nullable=True, unique=True)
    processed = Column(Boolean, default=False, nullable=False, index=True)
    processed_at = Column(DateTime, nullable=True)

    # Retry bookkeeping
    processing_error = Column(Text, nullable=True)
    processing_attempts = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    logs = relationship(
        "ProcessingLog",
        back_populates="recommendation",
        cascade="all, delete-orphan",
        order_by="ProcessingLog.id",
    )

    __table_args__ = (
        Index("idx_recommendations_processed_attempts", "processed", "processing_attempts"),
        Index("idx_recommendations_library_content_type", "library_type", "content_type"),
        Index("idx_recommendations_processed_at", "processed_at"),
    )

    @validates("quality_score")
    def validate_quality_score(self, key, value):
        if value is None:
            return value
        return max(1, min(10, int(value)))

    @validates("sentiment")
    def validate_sentiment(self, key, value):
        if value is None:
            return value
        return value if value in set(Sentiment) else Sentiment.NEUTRAL.value

    @validates("library_type")
    def validate_library_type(self, key, value):
        if value is not None and value not in set(LibraryType):
            raise ValueError(f"Unknown library type: {value}")
        return value

    def __repr__(self) -> str:
        return (
            f"<Recommendation id={self.id} message={self.original_message_id} "
            f"processed={self.processed}>"
        )


class ProcessingLog(Base):
    """Append-only audit trail of pipeline steps."""

    __tablename__ = "processing_logs"

    id = Column(Integer, primary_key=True)
    recommendation_id = Column(
        Integer, ForeignKey("recommendations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    operation = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False)
    message = Column(Text, nullable=True)
    log_metadata = Column("metadata", JSON, default=dict, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    recommendation = relationship("Recommendation", back_populates="logs")
