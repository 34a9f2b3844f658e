"""
Catalogue Service — Sock Repository (Data Accessor)
=====================================================

What:  Filtered, ordered, paginated and counted reads against the relational
       store of socks and their tag associations.
How:   Each call opens its own AsyncSession from the injected factory, so one
       repository instance is safe to share across concurrent requests; the
       pooled engine behind the factory is the only shared resource.

Errors are not classified here. SQLAlchemy and driver exceptions propagate
unchanged and SQLCatalogueService turns them into the domain taxonomy.

Tag filter (AND semantics):
    SELECT sock.* FROM sock
    WHERE sock.sock_id IN (
        SELECT sock_tag.sock_id FROM sock_tag JOIN tag USING (tag_id)
        WHERE tag.name IN (:tags)
        GROUP BY sock_tag.sock_id
        HAVING COUNT(DISTINCT tag.name) = :n_tags
    )
"""

from typing import List, Optional, Sequence

from sqlalchemy import Select, distinct, func, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalogue.models.sock import Sock, Tag, sock_tag

# Public order names → mapped columns
ORDER_COLUMNS = {
    "id": Sock.sock_id,
    "name": Sock.name,
    "description": Sock.description,
    "price": Sock.price,
}


class SockRepository:
    """Read-only access to the `sock`/`tag`/`sock_tag` tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    def _filtered(stmt: Select, tags: Sequence[str]) -> Select:
        wanted = set(tags)
        if not wanted:
            return stmt
        matching = (
            select(sock_tag.c.sock_id)
            .join(Tag, Tag.tag_id == sock_tag.c.tag_id)
            .where(Tag.name.in_(wanted))
            .group_by(sock_tag.c.sock_id)
            .having(func.count(distinct(Tag.name)) == len(wanted))
        )
        return stmt.where(Sock.sock_id.in_(matching))

    async def list_socks(
        self,
        tags: Sequence[str],
        order: Optional[str],
        offset: int,
        limit: int,
    ) -> List[Sock]:
        """
        Return one page of socks carrying every tag in `tags`.

        Args:
            tags:   Tag names to match; empty means no filter
            order:  Key of ORDER_COLUMNS, or None for identifier order
            offset: Rows to skip (already derived from the page number)
            limit:  Maximum rows to return

        Rows are ordered ascending on `order`, ties broken by sock_id.
        """
        stmt = self._filtered(select(Sock), tags)
        if order is not None and order != "id":
            stmt = stmt.order_by(ORDER_COLUMNS[order], Sock.sock_id)
        else:
            stmt = stmt.order_by(Sock.sock_id)
        stmt = stmt.offset(offset).limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_socks(self, tags: Sequence[str]) -> int:
        stmt = self._filtered(select(func.count(Sock.sock_id)), tags)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def get_sock(self, sock_id: str) -> Optional[Sock]:
        """Primary key lookup; None when absent."""
        async with self._session_factory() as session:
            result = await session.execute(select(Sock).where(Sock.sock_id == sock_id))
            return result.scalar_one_or_none()

    async def distinct_tags(self) -> List[str]:
        """Distinct names of tags attached to at least one sock."""
        stmt = (
            select(Tag.name)
            .join(sock_tag, sock_tag.c.tag_id == Tag.tag_id)
            .distinct()
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def ping(self) -> bool:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True
