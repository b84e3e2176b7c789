"""Persistence for menu items.

These helpers never commit: the tree service owns the transaction so a
read-validate-write sequence is applied as one unit.
"""
from typing import Iterable, List
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.menu.menu_item import MenuItem


async def find_by_id(db: AsyncSession, item_id: str):
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    return result.scalar_one_or_none()


async def find_by_ids(db: AsyncSession, item_ids: Iterable[str]) -> List[MenuItem]:
    """Return the items that exist; callers compare counts to spot missing ids."""
    ids = list(item_ids)
    if not ids:
        return []
    result = await db.execute(select(MenuItem).where(MenuItem.id.in_(ids)))
    return list(result.scalars().all())


async def find_by_workspace(db: AsyncSession, workspace_id: str) -> List[MenuItem]:
    # populate_existing refreshes items already in the session, so a tree read
    # taken after the workspace lock reflects committed state.
    result = await db.execute(
        select(MenuItem)
        .where(MenuItem.workspace_id == workspace_id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def create(db: AsyncSession, item: MenuItem):
    db.add(item)
    await db.flush()
    return item


async def create_many(db: AsyncSession, items: List[MenuItem]):
    db.add_all(items)
    await db.flush()
    return items


async def delete_by_id(db: AsyncSession, item_id: str) -> int:
    result = await db.execute(delete(MenuItem).where(MenuItem.id == item_id))
    return result.rowcount


async def delete_all_by_workspace(db: AsyncSession, workspace_id: str) -> int:
    result = await db.execute(delete(MenuItem).where(MenuItem.workspace_id == workspace_id))
    return result.rowcount
