"""Add clerk_id to users.

Revision ID: 0002_add_clerk_id
Revises: 0001_create_users
Create Date: 2025-01-05

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic
revision = "0002_add_clerk_id"
down_revision: str | None = "0001_create_users"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("users", sa.Column("clerk_id", sa.String(255), nullable=True))
    op.create_unique_constraint("users_clerk_id_key", "users", ["clerk_id"])
    op.create_index("users_clerk_id_index", "users", ["clerk_id"])


def downgrade() -> None:
    op.drop_index("users_clerk_id_index", table_name="users")
    op.drop_constraint("users_clerk_id_key", "users", type_="unique")
    op.drop_column("users", "clerk_id")
