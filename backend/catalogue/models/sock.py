"""
Catalogue Service — Sock & Tag SQLAlchemy Models
==================================================

What:  ORM mapping of the `sock`, `tag` and `sock_tag` tables.
How:   Socks and tags are many-to-many through `sock_tag`; the tag list is
       loaded eagerly with a second SELECT ... IN (selectin) so rows are
       fully populated before the session closes.
Who:   Read by SockRepository; Alembic reads the metadata for migrations.

The service never writes to these tables. Rows are owned by whoever seeds
the catalogue database.
"""

from typing import List, Optional

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogue.database import Base


sock_tag = Table(
    "sock_tag",
    Base.metadata,
    Column("sock_id", String(40), ForeignKey("sock.sock_id"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tag.tag_id"), primary_key=True),
)


class Tag(Base):
    """A categorical label; its name is what clients see and filter on."""

    __tablename__ = "tag"

    tag_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag(tag_id={self.tag_id}, name='{self.name}')>"


class Sock(Base):
    """
    A catalogue item.

    Query Patterns:
        - Filtered page: WHERE sock_id IN (<tag match>) ORDER BY <field>, sock_id
          LIMIT :size OFFSET :offset
        - Single item:   WHERE sock_id = :id (primary key)
    """

    __tablename__ = "sock"

    sock_id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    description: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url_1: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    image_url_2: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    tags: Mapped[List[Tag]] = relationship(
        secondary=sock_tag,
        lazy="selectin",
        order_by=Tag.name,
    )

    @property
    def image_urls(self) -> List[str]:
        """Non-empty image columns, in column order."""
        return [url for url in (self.image_url_1, self.image_url_2) if url]

    def __repr__(self) -> str:
        return f"<Sock(sock_id='{self.sock_id}', name='{self.name}')>"
