from __future__ import annotations

# impactsite/models/blog_post.py
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from impactsite.extensions import db

from .mixins import TimestampMixin, isoformat_utc


class BlogPost(TimestampMixin, db.Model):
    __tablename__ = "blog_posts"
    __table_args__ = (CheckConstraint("read_time >= 1", name="ck_blog_posts_read_time_pos"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    excerpt: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    read_time: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    published_at: Mapped[datetime] = mapped_column(db.DateTime, nullable=False, index=True)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "excerpt": self.excerpt,
            "content": self.content,
            "readTime": int(self.read_time),
            "publishedAt": isoformat_utc(self.published_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<BlogPost id={self.id} title={self.title!r}>"
