# File: /alembic/versions/0001_initial_schema.py | Version: 1.0 | Title: Users, spaces and work item types
"""initial schema"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)

    op.create_table(
        "space",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.String(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_space_owner_id"), "space", ["owner_id"], unique=False)

    op.create_table(
        "work_item_type",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("space_id", sa.String(), sa.ForeignKey("space.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=255), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "extended_type_id", sa.String(), sa.ForeignKey("work_item_type.id"), nullable=True
        ),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("space_id", "name", name="uq_work_item_type_space_name"),
    )
    op.create_index(
        op.f("ix_work_item_type_space_id"), "work_item_type", ["space_id"], unique=False
    )
    # list ordering
    op.create_index(
        "ix_work_item_type_space_created", "work_item_type", ["space_id", "created_at"], unique=False
    )


def downgrade():
    op.drop_index("ix_work_item_type_space_created", table_name="work_item_type")
    op.drop_index(op.f("ix_work_item_type_space_id"), table_name="work_item_type")
    op.drop_table("work_item_type")
    op.drop_index(op.f("ix_space_owner_id"), table_name="space")
    op.drop_table("space")
    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_table("user")
