"""create_workspace_menu_tables

Revision ID: 20261019_workspace_menu
Revises:
Create Date: 2026-10-19

Creates workspaces and menu_items. menu_items.parent_item_id is an indexed
plain column (no foreign key) so deleting a parent leaves its children in place.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_workspace_menu'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'workspaces',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        'menu_items',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('workspace_id', sa.String(), sa.ForeignKey('workspaces.id'), nullable=False),
        sa.Column('workspace_name', sa.String(), nullable=False),
        sa.Column('parent_item_id', sa.String(), nullable=True),
        sa.Column('key', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('url', sa.String(), nullable=True),
        sa.Column('application_id', sa.String(), nullable=True),
        sa.Column('disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('permission', sa.String(), nullable=True),
        sa.Column('badge', sa.String(), nullable=True),
        sa.Column('scope', sa.String(), nullable=True),
        sa.Column('external', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('i18n', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_index('idx_menu_items_workspace', 'menu_items', ['workspace_id'])
    op.create_index('idx_menu_items_parent', 'menu_items', ['parent_item_id'])


def downgrade():
    op.drop_index('idx_menu_items_parent', table_name='menu_items')
    op.drop_index('idx_menu_items_workspace', table_name='menu_items')
    op.drop_table('menu_items')
    op.drop_table('workspaces')
