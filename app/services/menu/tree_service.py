"""
Menu Tree Service

Create, move, bulk patch and rebuild menu items of a workspace while keeping
each workspace tree well formed. Every public mutation is one transaction:
items are loaded, validated and written in the same session and committed
once. On a validation failure the session is rolled back and nothing is
written.
"""
from typing import Iterable, List, Optional
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import menu_item as menu_item_crud
from app.crud import workspace as workspace_crud
from app.models.menu.menu_item import MenuItem
from app.schemas.menu_item import (
    MenuItemCreate,
    MenuItemPatch,
    MenuItemStructureNode,
    MenuItemUpdate,
    WorkspaceMenuItemStructureUpload,
)
from app.services.menu.errors import (
    CrossWorkspaceParent,
    EmptyStructure,
    MenuItemError,
    NotFound,
    ParentNotFound,
    WorkspaceNotFound,
)
from app.services.menu.tree_projection import MenuTreeNode, flatten, to_forest
from app.services.menu.tree_validator import (
    MenuTreeIndex,
    check_acyclic,
    resolve_parent,
    validate_reparent,
)

log = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = {"key", "disabled", "position", "external"}


class MenuTreeService:
    """Tree mutations and reads for menu items"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- reads ----------

    async def get_item(self, item_id: str) -> MenuItem:
        item = await menu_item_crud.find_by_id(self.db, item_id)
        if item is None:
            raise NotFound()
        return item

    async def list_items(self, workspace_id: str) -> List[MenuItem]:
        return flatten(await menu_item_crud.find_by_workspace(self.db, workspace_id))

    async def get_tree(self, workspace_id: str) -> List[MenuTreeNode]:
        return to_forest(await menu_item_crud.find_by_workspace(self.db, workspace_id))

    # ---------- single item ----------

    async def create_item(self, workspace_id: str, payload: MenuItemCreate) -> MenuItem:
        workspace = await self._require_workspace(workspace_id)

        # A new item has no descendants, so only existence and workspace are checked.
        if payload.parent_item_id is not None:
            parent = await menu_item_crud.find_by_id(self.db, payload.parent_item_id)
            if parent is None:
                raise await self._reject(ParentNotFound(payload.parent_item_id))
            if parent.workspace_id != workspace.id:
                raise await self._reject(CrossWorkspaceParent(parent.id, workspace.id))

        item = MenuItem(
            id=str(uuid.uuid4()),
            workspace_id=workspace.id,
            workspace_name=workspace.name,
            **payload.model_dump(),
        )
        await menu_item_crud.create(self.db, item)
        await self.db.commit()
        await self.db.refresh(item)

        log.info("menu item created: workspace=%s item=%s parent=%s",
                 workspace.id, item.id, item.parent_item_id)
        return item

    async def update_item(self, item_id: str, payload: MenuItemUpdate) -> MenuItem:
        item = await menu_item_crud.find_by_id(self.db, item_id)
        if item is None:
            raise NotFound([item_id])

        await workspace_crud.lock(self.db, item.workspace_id)
        index = await self._load_index([item.workspace_id], [payload.parent_item_id])

        try:
            validate_reparent(item, payload.parent_item_id, index)
        except MenuItemError as exc:
            await self._reject(exc)
            raise

        self._apply(item, payload)
        await self.db.commit()
        await self.db.refresh(item)

        log.info("menu item updated: workspace=%s item=%s parent=%s",
                 item.workspace_id, item.id, item.parent_item_id)
        return item

    async def delete_item(self, item_id: str) -> bool:
        # Children are neither removed nor moved; they read back as roots.
        deleted = await menu_item_crud.delete_by_id(self.db, item_id)
        await self.db.commit()
        log.info("menu item deleted: item=%s found=%s", item_id, bool(deleted))
        return bool(deleted)

    # ---------- bulk ----------

    async def patch_items(self, payloads: Iterable[MenuItemPatch]) -> List[MenuItem]:
        """Apply several updates as one all-or-nothing batch.

        Duplicate ids collapse to the last payload. Every member is validated
        before any of them is written, and the outcome does not depend on the
        order of the payloads.
        """
        by_id = {payload.id: payload for payload in payloads}

        items = await menu_item_crud.find_by_ids(self.db, by_id.keys())
        if not items:
            raise NotFound(by_id.keys())
        if len(items) != len(by_id):
            raise NotFound(set(by_id) - {item.id for item in items})

        workspace_ids = sorted({item.workspace_id for item in items})
        for workspace_id in workspace_ids:
            await workspace_crud.lock(self.db, workspace_id)
        index = await self._load_index(
            workspace_ids, [payload.parent_item_id for payload in by_id.values()]
        )

        # Membership checks run against the tree as it was before the batch;
        # the cycle check runs once every move is in place. Members are taken
        # in id order so the same batch always reports the same error.
        ordered = sorted(items, key=lambda item: item.id)
        try:
            for item in ordered:
                resolve_parent(item, by_id[item.id].parent_item_id, index)
            moved = [
                item for item in ordered
                if index.parent_of(item.id) != by_id[item.id].parent_item_id
            ]
            for item in moved:
                index.move(item.id, by_id[item.id].parent_item_id)
            for item in moved:
                check_acyclic(item.id, index)
        except MenuItemError as exc:
            await self._reject(exc)
            raise

        for item in items:
            self._apply(item, by_id[item.id])
        await self.db.commit()
        for item in items:
            await self.db.refresh(item)

        log.info("menu items patched: workspaces=%s count=%s", workspace_ids, len(items))
        return items

    async def replace_structure(
        self, workspace_id: str, structure: WorkspaceMenuItemStructureUpload
    ) -> List[MenuItem]:
        """Delete every item of the workspace and rebuild it from the nested payload.

        Parent links come from the nesting alone, so the result cannot contain
        a cycle and every item belongs to the target workspace.
        """
        workspace = await self._require_workspace(workspace_id, lock=True)
        if not structure.menu_items:
            raise await self._reject(EmptyStructure())

        items: List[MenuItem] = []
        self._build_items(structure.menu_items, workspace, None, items)

        removed = await menu_item_crud.delete_all_by_workspace(self.db, workspace.id)
        await menu_item_crud.create_many(self.db, items)
        await self.db.commit()

        log.info("menu structure replaced: workspace=%s removed=%s created=%s",
                 workspace.id, removed, len(items))
        return items

    async def delete_all_for_workspace(self, workspace_id: str) -> int:
        removed = await menu_item_crud.delete_all_by_workspace(self.db, workspace_id)
        await self.db.commit()
        log.info("menu items deleted: workspace=%s count=%s", workspace_id, removed)
        return removed

    # ---------- helpers ----------

    async def _require_workspace(self, workspace_id: str, lock: bool = False):
        if lock:
            workspace = await workspace_crud.lock(self.db, workspace_id)
        else:
            workspace = await workspace_crud.find_by_id(self.db, workspace_id)
        if workspace is None:
            raise await self._reject(WorkspaceNotFound(workspace_id))
        return workspace

    async def _load_index(
        self, workspace_ids: Iterable[str], parent_ids: Iterable[Optional[str]]
    ) -> MenuTreeIndex:
        index = MenuTreeIndex()
        for workspace_id in workspace_ids:
            for item in await menu_item_crud.find_by_workspace(self.db, workspace_id):
                index.add(item)

        # Requested parents outside these workspaces still need a lookup so the
        # validator can report them as cross-workspace rather than missing.
        outside = {pid for pid in parent_ids if pid is not None and pid not in index}
        for parent in await menu_item_crud.find_by_ids(self.db, outside):
            index.add(parent)
        return index

    async def _reject(self, exc: MenuItemError) -> MenuItemError:
        await self.db.rollback()
        log.warning("menu item change rejected: %s (%s)", exc.error_code, exc.detail)
        return exc

    @staticmethod
    def _apply(item: MenuItem, payload: MenuItemUpdate):
        item.parent_item_id = payload.parent_item_id
        changes = payload.model_dump(exclude_unset=True, exclude={"id", "parent_item_id"})
        for key, value in changes.items():
            if value is None and key in NON_NULLABLE_FIELDS:
                continue
            setattr(item, key, value)

    @classmethod
    def _build_items(
        cls,
        nodes: List[MenuItemStructureNode],
        workspace,
        parent_item_id: Optional[str],
        result: List[MenuItem],
    ):
        for node in nodes:
            item = MenuItem(
                id=str(uuid.uuid4()),
                workspace_id=workspace.id,
                workspace_name=workspace.name,
                parent_item_id=parent_item_id,
                **node.model_dump(exclude={"children"}),
            )
            result.append(item)
            cls._build_items(node.children, workspace, item.id, result)
