# File: /alembic/versions/20261017_initial_schema.py | Version: 1.0 | Title: Initial schema (users, tables, fields, records, cells, views)
"""initial schema"""

from alembic import op
import sqlalchemy as sa

revision = "initial_20261017"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "data_table",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_data_table_owner_id", "data_table", ["owner_id"])

    op.create_table(
        "field",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("table_id", sa.String(), sa.ForeignKey("data_table.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("field_type", sa.String(20), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.UniqueConstraint("table_id", "name", name="uq_table_field_name"),
    )
    op.create_index("ix_field_table_id", "field", ["table_id"])

    op.create_table(
        "record",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("table_id", sa.String(), sa.ForeignKey("data_table.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_record_table_id", "record", ["table_id"])
    op.create_index("ix_record_table_created_id", "record", ["table_id", "created_at", "id"])

    op.create_table(
        "cell_value",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("record_id", sa.String(), sa.ForeignKey("record.id"), nullable=False),
        sa.Column("field_id", sa.String(), sa.ForeignKey("field.id"), nullable=False),
        sa.Column("value_type", sa.String(10), nullable=False),
        sa.Column("text_value", sa.Text(), nullable=True),
        sa.Column("number_value", sa.Float(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("record_id", "field_id", name="uq_cell_record_field"),
    )
    op.create_index("ix_cell_value_record_id", "cell_value", ["record_id"])
    op.create_index("ix_cell_value_field_id", "cell_value", ["field_id"])

    op.create_table(
        "views",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("table_id", sa.String(), sa.ForeignKey("data_table.id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_default", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("hidden_field_ids", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_views_table", "views", ["table_id", "is_default"])

    op.create_table(
        "view_filter",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("view_id", sa.String(), sa.ForeignKey("views.id"), nullable=False),
        sa.Column("field_id", sa.String(), sa.ForeignKey("field.id"), nullable=False),
        sa.Column("operator", sa.String(20), nullable=False),
        sa.Column("value", sa.String(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_view_filter_view_id", "view_filter", ["view_id"])
    op.create_index("ix_view_filter_field_id", "view_filter", ["field_id"])

    op.create_table(
        "view_sort",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("view_id", sa.String(), sa.ForeignKey("views.id"), nullable=False),
        sa.Column("field_id", sa.String(), sa.ForeignKey("field.id"), nullable=False),
        sa.Column("direction", sa.String(4), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_view_sort_view_id", "view_sort", ["view_id"])
    op.create_index("ix_view_sort_field_id", "view_sort", ["field_id"])


def downgrade():
    op.drop_table("view_sort")
    op.drop_table("view_filter")
    op.drop_index("ix_views_table", table_name="views")
    op.drop_table("views")
    op.drop_table("cell_value")
    op.drop_index("ix_record_table_created_id", table_name="record")
    op.drop_table("record")
    op.drop_table("field")
    op.drop_table("data_table")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
