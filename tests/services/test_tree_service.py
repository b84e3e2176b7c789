"""Tests for tree_service.py: menu tree mutations against a real session."""

import pytest
from sqlalchemy.future import select

from app.models import MenuItem, Workspace
from app.schemas.menu_item import (
    MenuItemCreate,
    MenuItemPatch,
    MenuItemUpdate,
    WorkspaceMenuItemStructureUpload,
)
from app.services.menu import (
    CrossWorkspaceParent,
    CycleDetected,
    EmptyStructure,
    MenuTreeService,
    NotFound,
    ParentNotFound,
    SelfParent,
    WorkspaceNotFound,
)


# ── Helpers ────────────────────────────────────────────────────────────


async def _parent_map(session_factory, workspace_id: str) -> dict:
    """Committed {id: parent_item_id} for a workspace, read in a fresh session."""
    async with session_factory() as session:
        result = await session.execute(
            select(MenuItem.id, MenuItem.parent_item_id).where(MenuItem.workspace_id == workspace_id)
        )
        return dict(result.all())


async def _create(service: MenuTreeService, workspace_id: str, key: str, parent: str | None = None, **extra) -> str:
    item = await service.create_item(
        workspace_id, MenuItemCreate(key=key, name=key.upper(), parent_item_id=parent, **extra)
    )
    return item.id


async def _seed(session_factory, workspace_id: str, parents: dict):
    """Insert items with fixed ids, given as {id: parent_item_id}."""
    async with session_factory() as session:
        for item_id, parent in parents.items():
            session.add(
                MenuItem(
                    id=item_id,
                    workspace_id=workspace_id,
                    workspace_name="W",
                    parent_item_id=parent,
                    key=item_id,
                )
            )
        await session.commit()


def _forest_shape(roots) -> dict:
    out = {}
    stack = list(roots)
    while stack:
        node = stack.pop()
        out[node.item.key] = [child.item.key for child in node.children]
        stack.extend(node.children)
    return out


@pytest.fixture
def service(db) -> MenuTreeService:
    return MenuTreeService(db)


# ── Create ─────────────────────────────────────────────────────────────


class TestCreateItem:
    @pytest.mark.asyncio
    async def test_root_and_child(self, service, workspace_id):
        root_id = await _create(service, workspace_id, "a")
        child = await service.create_item(workspace_id, MenuItemCreate(key="b", parent_item_id=root_id))
        assert child.parent_item_id == root_id
        assert child.workspace_id == workspace_id
        assert child.workspace_name == "W"
        assert child.disabled is False
        assert child.position == 0

    @pytest.mark.asyncio
    async def test_workspace_name_is_not_resynced(self, service, session_factory, workspace_id):
        item_id = await _create(service, workspace_id, "a")
        async with session_factory() as session:
            workspace = await session.get(Workspace, workspace_id)
            workspace.name = "Renamed"
            await session.commit()
        async with session_factory() as session:
            item = await session.get(MenuItem, item_id)
            assert item.workspace_name == "W"

    @pytest.mark.asyncio
    async def test_unknown_workspace(self, service):
        with pytest.raises(WorkspaceNotFound):
            await service.create_item("nope", MenuItemCreate(key="a"))

    @pytest.mark.asyncio
    async def test_unknown_parent(self, service, session_factory, workspace_id):
        with pytest.raises(ParentNotFound):
            await service.create_item(workspace_id, MenuItemCreate(key="a", parent_item_id="nope"))
        assert await _parent_map(session_factory, workspace_id) == {}

    @pytest.mark.asyncio
    async def test_parent_in_other_workspace(self, service, session_factory, workspace_id, other_workspace_id):
        foreign_id = await _create(service, other_workspace_id, "foreign")
        with pytest.raises(CrossWorkspaceParent):
            await service.create_item(workspace_id, MenuItemCreate(key="a", parent_item_id=foreign_id))
        assert await _parent_map(session_factory, workspace_id) == {}


# ── Single update ──────────────────────────────────────────────────────


class TestUpdateItem:
    @pytest.mark.asyncio
    async def test_cycle_scenario(self, service, session_factory, workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b", a)
        c = await _create(service, workspace_id, "c", b)
        before = await _parent_map(session_factory, workspace_id)

        with pytest.raises(CycleDetected):
            await service.update_item(a, MenuItemUpdate(parent_item_id=c))
        assert await _parent_map(session_factory, workspace_id) == before

        moved = await service.update_item(b, MenuItemUpdate(parent_item_id=None))
        assert moved.parent_item_id is None

        roots = await service.get_tree(workspace_id)
        assert sorted(node.item.key for node in roots) == ["a", "b"]
        assert _forest_shape(roots) == {"a": [], "b": ["c"], "c": []}

    @pytest.mark.asyncio
    async def test_reparent_under_non_descendant(self, service, workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b")
        await service.update_item(a, MenuItemUpdate(parent_item_id=b))
        roots = await service.get_tree(workspace_id)
        assert _forest_shape(roots) == {"b": ["a"], "a": []}

    @pytest.mark.asyncio
    async def test_self_parent_leaves_parent_unchanged(self, service, session_factory, workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b", a)
        with pytest.raises(SelfParent):
            await service.update_item(b, MenuItemUpdate(parent_item_id=b))
        assert (await _parent_map(session_factory, workspace_id))[b] == a

    @pytest.mark.asyncio
    async def test_cross_workspace_parent(self, service, workspace_id, other_workspace_id):
        a = await _create(service, workspace_id, "a")
        p = await _create(service, other_workspace_id, "p")
        with pytest.raises(CrossWorkspaceParent):
            await service.update_item(a, MenuItemUpdate(parent_item_id=p))

    @pytest.mark.asyncio
    async def test_missing_parent(self, service, workspace_id):
        a = await _create(service, workspace_id, "a")
        with pytest.raises(ParentNotFound):
            await service.update_item(a, MenuItemUpdate(parent_item_id="nope"))

    @pytest.mark.asyncio
    async def test_missing_item(self, service):
        with pytest.raises(NotFound):
            await service.update_item("nope", MenuItemUpdate())

    @pytest.mark.asyncio
    async def test_applies_set_fields_only(self, service, workspace_id):
        a = await _create(service, workspace_id, "a", url="/a", position=4)
        updated = await service.update_item(a, MenuItemUpdate(name="Renamed", disabled=True, position=None))
        assert updated.name == "Renamed"
        assert updated.disabled is True
        assert updated.url == "/a"
        assert updated.position == 4
        assert updated.key == "a"

    @pytest.mark.asyncio
    async def test_null_key_keeps_key(self, service, workspace_id):
        a = await _create(service, workspace_id, "a")
        updated = await service.update_item(a, MenuItemUpdate(key=None, name="Renamed"))
        assert updated.key == "a"
        assert updated.name == "Renamed"


# ── Patch many ─────────────────────────────────────────────────────────


class TestPatchItems:
    @pytest.mark.asyncio
    async def test_applies_whole_batch(self, service, session_factory, workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b")
        c = await _create(service, workspace_id, "c")

        items = await service.patch_items(
            [
                MenuItemPatch(id=b, parent_item_id=a, position=1),
                MenuItemPatch(id=c, parent_item_id=a, position=0),
            ]
        )
        assert {item.id for item in items} == {b, c}
        assert await _parent_map(session_factory, workspace_id) == {a: None, b: a, c: a}

        roots = await service.get_tree(workspace_id)
        assert _forest_shape(roots)["a"] == ["c", "b"]

    @pytest.mark.asyncio
    async def test_one_failure_commits_nothing(self, service, session_factory, workspace_id):
        ids = [await _create(service, workspace_id, key) for key in ("i1", "i2", "i3", "i4", "i5")]
        target = await _create(service, workspace_id, "target")
        before = await _parent_map(session_factory, workspace_id)

        payloads = [MenuItemPatch(id=item_id, parent_item_id=target, name="changed") for item_id in ids]
        payloads[2] = MenuItemPatch(id=ids[2], parent_item_id=ids[2], name="changed")

        with pytest.raises(SelfParent):
            await service.patch_items(payloads)

        assert await _parent_map(session_factory, workspace_id) == before
        async with session_factory() as session:
            result = await session.execute(select(MenuItem.name).where(MenuItem.id.in_(ids)))
            assert "changed" not in set(result.scalars().all())

    @pytest.mark.asyncio
    async def test_batch_cannot_build_a_cycle_jointly(self, service, session_factory, workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b")
        with pytest.raises(CycleDetected):
            await service.patch_items(
                [MenuItemPatch(id=a, parent_item_id=b), MenuItemPatch(id=b, parent_item_id=a)]
            )
        assert await _parent_map(session_factory, workspace_id) == {a: None, b: None}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("x, y", [("a", "b"), ("b", "a")])
    async def test_swap_is_accepted_whatever_the_ids(self, service, session_factory, workspace_id, x, y):
        # y starts under x; moving x under y is fine because y leaves in the same batch
        await _seed(session_factory, workspace_id, {x: None, y: x})
        for payloads in (
            [MenuItemPatch(id=x, parent_item_id=y), MenuItemPatch(id=y, parent_item_id=None)],
            [MenuItemPatch(id=y, parent_item_id=None), MenuItemPatch(id=x, parent_item_id=y)],
        ):
            await service.patch_items(payloads)
            assert await _parent_map(session_factory, workspace_id) == {x: y, y: None}
            await service.patch_items(
                [MenuItemPatch(id=x, parent_item_id=None), MenuItemPatch(id=y, parent_item_id=x)]
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("x, y", [("a", "b"), ("b", "a")])
    async def test_joint_cycle_rejected_whatever_the_ids(self, service, session_factory, workspace_id, x, y):
        await _seed(session_factory, workspace_id, {x: None, y: None, "c": None})
        with pytest.raises(CycleDetected):
            await service.patch_items(
                [
                    MenuItemPatch(id=x, parent_item_id=y),
                    MenuItemPatch(id=y, parent_item_id="c"),
                    MenuItemPatch(id="c", parent_item_id=x),
                ]
            )
        assert await _parent_map(session_factory, workspace_id) == {x: None, y: None, "c": None}

    @pytest.mark.asyncio
    async def test_null_key_keeps_key(self, service, session_factory, workspace_id):
        await _seed(session_factory, workspace_id, {"a": None})
        items = await service.patch_items([MenuItemPatch(id="a", key=None, name="A")])
        assert items[0].key == "a"
        assert items[0].name == "A"

    @pytest.mark.asyncio
    async def test_unknown_ids(self, service, workspace_id):
        a = await _create(service, workspace_id, "a")
        with pytest.raises(NotFound) as exc_info:
            await service.patch_items([MenuItemPatch(id=a), MenuItemPatch(id="ghost")])
        assert exc_info.value.missing_ids == ["ghost"]

    @pytest.mark.asyncio
    async def test_nothing_found(self, service):
        with pytest.raises(NotFound):
            await service.patch_items([MenuItemPatch(id="ghost")])

    @pytest.mark.asyncio
    async def test_duplicate_ids_last_wins(self, service, session_factory, workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b")
        c = await _create(service, workspace_id, "c")
        await service.patch_items(
            [MenuItemPatch(id=c, parent_item_id=a), MenuItemPatch(id=c, parent_item_id=b)]
        )
        assert (await _parent_map(session_factory, workspace_id))[c] == b


# ── Structure replace ──────────────────────────────────────────────────


STRUCTURE = {
    "menu_items": [
        {
            "key": "l1a",
            "children": [
                {"key": "l2a", "children": [{"key": "l3a"}, {"key": "l3b"}]},
                {"key": "l2b"},
            ],
        },
        {"key": "l1b", "children": [{"key": "l2c"}]},
    ]
}


class TestReplaceStructure:
    @pytest.mark.asyncio
    async def test_rebuilds_from_nesting(self, service, session_factory, workspace_id):
        old = await _create(service, workspace_id, "old")

        items = await service.replace_structure(
            workspace_id, WorkspaceMenuItemStructureUpload.model_validate(STRUCTURE)
        )
        assert len(items) == 7

        async with session_factory() as session:
            result = await session.execute(select(MenuItem).where(MenuItem.workspace_id == workspace_id))
            stored = result.scalars().all()

        assert len(stored) == 7
        assert old not in {item.id for item in stored}
        by_id = {item.id: item for item in stored}
        parent_key = {
            item.key: (by_id[item.parent_item_id].key if item.parent_item_id else None)
            for item in stored
        }
        assert parent_key == {
            "l1a": None,
            "l2a": "l1a",
            "l3a": "l2a",
            "l3b": "l2a",
            "l2b": "l1a",
            "l1b": None,
            "l2c": "l1b",
        }
        assert {item.workspace_name for item in stored} == {"W"}

    @pytest.mark.asyncio
    async def test_other_workspaces_untouched(self, service, session_factory, workspace_id, other_workspace_id):
        keep = await _create(service, other_workspace_id, "keep")
        await service.replace_structure(
            workspace_id, WorkspaceMenuItemStructureUpload.model_validate(STRUCTURE)
        )
        assert await _parent_map(session_factory, other_workspace_id) == {keep: None}

    @pytest.mark.asyncio
    async def test_empty_structure(self, service, session_factory, workspace_id):
        a = await _create(service, workspace_id, "a")
        for payload in ({"menu_items": []}, {}):
            with pytest.raises(EmptyStructure):
                await service.replace_structure(
                    workspace_id, WorkspaceMenuItemStructureUpload.model_validate(payload)
                )
        assert await _parent_map(session_factory, workspace_id) == {a: None}

    @pytest.mark.asyncio
    async def test_unknown_workspace(self, service):
        with pytest.raises(WorkspaceNotFound):
            await service.replace_structure(
                "nope", WorkspaceMenuItemStructureUpload.model_validate(STRUCTURE)
            )


# ── Deletes and reads ──────────────────────────────────────────────────


class TestDeletes:
    @pytest.mark.asyncio
    async def test_delete_item_orphans_children(self, service, workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b", a)
        await _create(service, workspace_id, "c", b)

        assert await service.delete_item(a) is True
        roots = await service.get_tree(workspace_id)
        assert [node.item.key for node in roots] == ["b"]
        assert _forest_shape(roots) == {"b": ["c"], "c": []}

    @pytest.mark.asyncio
    async def test_delete_missing_item(self, service):
        assert await service.delete_item("nope") is False

    @pytest.mark.asyncio
    async def test_delete_all_for_workspace(self, service, session_factory, workspace_id, other_workspace_id):
        a = await _create(service, workspace_id, "a")
        await _create(service, workspace_id, "b", a)
        keep = await _create(service, other_workspace_id, "keep")

        assert await service.delete_all_for_workspace(workspace_id) == 2
        assert await _parent_map(session_factory, workspace_id) == {}
        assert await _parent_map(session_factory, other_workspace_id) == {keep: None}


class TestReads:
    @pytest.mark.asyncio
    async def test_get_item(self, service, workspace_id):
        a = await _create(service, workspace_id, "a")
        assert (await service.get_item(a)).key == "a"
        with pytest.raises(NotFound):
            await service.get_item("nope")

    @pytest.mark.asyncio
    async def test_list_items(self, service, workspace_id, other_workspace_id):
        a = await _create(service, workspace_id, "a")
        b = await _create(service, workspace_id, "b", a)
        await _create(service, other_workspace_id, "x")
        assert {item.id for item in await service.list_items(workspace_id)} == {a, b}
