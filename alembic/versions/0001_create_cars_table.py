"""create cars table

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "cars",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("make", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=200), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("price_per_day", sa.Numeric(10, 2), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("mileage", sa.String(length=100)),
        sa.Column("transmission", sa.String(length=100)),
        sa.Column("fuel_type", sa.String(length=100)),
        sa.Column("description", sa.Text()),
        sa.Column("user_id", sa.String(length=64)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_cars_user_id", "cars", ["user_id"])
    op.create_index("ix_cars_created_at", "cars", ["created_at"])


def downgrade():
    op.drop_index("ix_cars_created_at", table_name="cars")
    op.drop_index("ix_cars_user_id", table_name="cars")
    op.drop_table("cars")
