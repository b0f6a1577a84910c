"""Create users table.

Revision ID: 0001_create_users
Revises:
Create Date: 2025-01-05

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic
revision = "0001_create_users"
down_revision: str | None = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    op.create_index("users_email_index", "users", ["email"])


def downgrade() -> None:
    op.drop_index("users_email_index", table_name="users")
    op.drop_table("users")
