# scripts/manage_menus.py

import asyncio
import argparse
import sys
from sqlalchemy.future import select
from app.db import async_session
from app.models.workspace import Workspace
from app.schemas.menu_item import WorkspaceMenuItemStructureUpload
from app.services.menu import MenuTreeService, MenuItemError, iter_forest

# 🎯 MENU TO SEED
SAMPLE_STRUCTURE = {
    "menu_items": [
        {
            "key": "home", "name": "Home", "url": "/", "position": 0,
        },
        {
            "key": "admin", "name": "Administration", "position": 1,
            "children": [
                {"key": "admin.users", "name": "Users", "url": "/admin/users", "position": 0},
                {
                    "key": "admin.settings", "name": "Settings", "position": 1,
                    "children": [
                        {"key": "admin.settings.general", "name": "General", "url": "/admin/settings"},
                    ],
                },
            ],
        },
    ]
}

if sys.platform.startswith('win') and sys.version_info < (3, 10):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


async def _get_or_create_workspace(session, name):
    result = await session.execute(select(Workspace).where(Workspace.name == name))
    workspace = result.scalar_one_or_none()
    if not workspace:
        workspace = Workspace(name=name)
        session.add(workspace)
        await session.commit()
        print(f"🏢 Created workspace: {workspace.name}")
    return workspace


async def seed_menu(workspace_name):
    async with async_session() as session:
        workspace = await _get_or_create_workspace(session, workspace_name)
        structure = WorkspaceMenuItemStructureUpload.model_validate(SAMPLE_STRUCTURE)
        items = await MenuTreeService(session).replace_structure(workspace.id, structure)
        print(f"✅ Seeded {len(items)} menu items for '{workspace.name}'.\n")


async def show_menu(workspace_name):
    async with async_session() as session:
        result = await session.execute(select(Workspace).where(Workspace.name == workspace_name))
        workspace = result.scalar_one_or_none()
        if not workspace:
            print(f"⚠️  No workspace found with name: {workspace_name}")
            return

        service = MenuTreeService(session)
        roots = await service.get_tree(workspace.id)
        depth = {}
        for item in iter_forest(roots):
            depth[item.id] = depth.get(item.parent_item_id, -1) + 1
            print(f"{'  ' * depth[item.id]}- {item.name or item.key} ({item.id})")


async def delete_menu(workspace_name):
    async with async_session() as session:
        result = await session.execute(select(Workspace).where(Workspace.name == workspace_name))
        workspace = result.scalar_one_or_none()
        if not workspace:
            print(f"⚠️  No workspace found with name: {workspace_name}")
            return
        removed = await MenuTreeService(session).delete_all_for_workspace(workspace.id)
        print(f"🗑️  Deleted {removed} menu items from '{workspace.name}'")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage workspace menus")
    parser.add_argument("--seed", action="store_true", help="Replace the menu with the sample structure")
    parser.add_argument("--show", action="store_true", help="Print the menu tree")
    parser.add_argument("--delete", action="store_true", help="Delete every menu item of the workspace")
    parser.add_argument("--workspace", type=str, default="Default", help="Workspace name")

    args = parser.parse_args()

    try:
        if args.seed:
            asyncio.run(seed_menu(args.workspace))
        elif args.show:
            asyncio.run(show_menu(args.workspace))
        elif args.delete:
            asyncio.run(delete_menu(args.workspace))
        else:
            print("❗ Usage:")
            print("  python -m scripts.manage_menus --seed --workspace Default")
            print("  python -m scripts.manage_menus --show --workspace Default")
            print("  python -m scripts.manage_menus --delete --workspace Default")
    except MenuItemError as exc:
        print(f"❌ {exc.error_code}: {exc.detail}")
        sys.exit(1)
