"""
Video metadata store backed by SQLAlchemy (SQLite by default).
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

metadata = sa.MetaData()

REFERENCE_COLUMNS = ("video_url", "thumbnail_url")

videos_table = sa.Table(
    "videos",
    metadata,
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("user_id", sa.String(64), nullable=False, index=True),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("description", sa.Text, nullable=False, default=""),
    sa.Column("thumbnail_url", sa.Text, nullable=True),
    sa.Column("video_url", sa.Text, nullable=True),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class VideoRecord:
    """A video's metadata. ``video_url``/``thumbnail_url`` hold store keys."""

    id: str
    user_id: str
    title: str
    description: str = ""
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def copy(self, **changes) -> "VideoRecord":
        return replace(self, **changes)


class VideoStore:
    """
    CRUD access to video records.

    Only the reference columns are mutable after creation, one at a time
    through ``set_reference``; id and owner are never rewritten.
    """

    def __init__(self, database_url: str):
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = sa.create_engine(database_url, connect_args=connect_args)

    def create_tables(self) -> None:
        metadata.create_all(self.engine)
        logger.info("Video tables ready")

    def ping(self) -> bool:
        """Check database connectivity."""
        try:
            with self.engine.connect() as conn:
                conn.execute(sa.text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def create_video(self, user_id: str, title: str, description: str = "") -> VideoRecord:
        record = VideoRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            description=description,
        )
        with self.engine.begin() as conn:
            conn.execute(
                videos_table.insert().values(
                    id=record.id,
                    user_id=record.user_id,
                    title=record.title,
                    description=record.description,
                    thumbnail_url=None,
                    video_url=None,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                )
            )
        logger.info(f"Created video {record.id} for user {user_id}")
        return record

    def get_video(self, video_id: str) -> Optional[VideoRecord]:
        with self.engine.connect() as conn:
            row = conn.execute(
                sa.select(videos_table).where(videos_table.c.id == video_id)
            ).mappings().first()
        return VideoRecord(**row) if row else None

    def get_videos_for_user(self, user_id: str) -> list[VideoRecord]:
        query = (
            sa.select(videos_table)
            .where(videos_table.c.user_id == user_id)
            .order_by(videos_table.c.created_at.desc())
        )
        with self.engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [VideoRecord(**row) for row in rows]

    def set_reference(
        self, video_id: str, column: str, value: Optional[str]
    ) -> tuple[Optional[str], Optional[VideoRecord]]:
        """
        Set a single reference column, leaving the rest of the row untouched.

        Concurrent writers of the other reference column are not overwritten
        with a stale value. The previous value is read in the same
        transaction.

        Args:
            video_id: Record to update
            column: ``video_url`` or ``thumbnail_url``
            value: New store key

        Returns:
            (previous value, updated record); the record is None if the row
            no longer exists
        """
        if column not in REFERENCE_COLUMNS:
            raise ValueError(f"Not a reference column: {column}")

        ref = videos_table.c[column]
        with self.engine.begin() as conn:
            previous = conn.execute(
                sa.select(ref).where(videos_table.c.id == video_id)
            ).scalar_one_or_none()
            conn.execute(
                videos_table.update()
                .where(videos_table.c.id == video_id)
                .values({column: value, "updated_at": _utcnow()})
            )
            row = conn.execute(
                sa.select(videos_table).where(videos_table.c.id == video_id)
            ).mappings().first()
        return previous, (VideoRecord(**row) if row else None)

    def set_video_url(self, video_id: str, key: str) -> tuple[Optional[str], Optional[VideoRecord]]:
        return self.set_reference(video_id, "video_url", key)

    def set_thumbnail_url(
        self, video_id: str, key: str
    ) -> tuple[Optional[str], Optional[VideoRecord]]:
        return self.set_reference(video_id, "thumbnail_url", key)

    def delete_video(self, video_id: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(videos_table.delete().where(videos_table.c.id == video_id))
        logger.info(f"Deleted video {video_id}")
