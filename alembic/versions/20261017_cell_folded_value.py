# File: /alembic/versions/20261017_cell_folded_value.py | Version: 1.0 | Title: Casefolded cell text for contains matching
"""cell_value.folded_value"""

from alembic import op
import sqlalchemy as sa

revision = "cell_folded_20261017"
down_revision = "initial_20261017"
branch_labels = None
depends_on = None


def upgrade():
    op.add_column("cell_value", sa.Column("folded_value", sa.Text(), nullable=True))

    # SQL LOWER() is ASCII-only on SQLite; backfill with Python casefold
    conn = op.get_bind()
    cells = sa.table(
        "cell_value",
        sa.column("id", sa.String()),
        sa.column("text_value", sa.Text()),
        sa.column("folded_value", sa.Text()),
    )
    rows = conn.execute(sa.select(cells.c.id, cells.c.text_value).where(cells.c.text_value.isnot(None))).all()
    for cell_id, text in rows:
        conn.execute(cells.update().where(cells.c.id == cell_id).values(folded_value=text.casefold()))


def downgrade():
    op.drop_column("cell_value", "folded_value")
