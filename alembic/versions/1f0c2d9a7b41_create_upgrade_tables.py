"""create upgrade tables

Revision ID: 1f0c2d9a7b41
Revises:
Create Date: 2026-10-12 19:04:51.218734

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "1f0c2d9a7b41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "defense_upgrades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("structure_type", sa.String(length=64), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("build_resource", sa.String(length=16), nullable=False),
        sa.Column("build_cost", sa.Integer(), nullable=False),
        sa.Column("build_time_seconds", sa.Integer(), nullable=False),
        sa.Column("unlocks_at_town_hall", sa.Integer(), nullable=False),
        sa.Column("max_per_town_hall", sa.Integer(), nullable=False),
        sa.UniqueConstraint("structure_type", "level", name="uq_defense_upgrades_type_level"),
    )
    op.create_index("ix_defense_upgrades_structure_type", "defense_upgrades", ["structure_type"])
    op.create_index("ix_defense_upgrades_unlocks_at_town_hall", "defense_upgrades", ["unlocks_at_town_hall"])

    op.create_table(
        "user_economy",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("gold_amount", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("elixir_amount", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("has_gold_pass", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("builders_count", sa.Integer(), nullable=False, server_default=sa.text("4")),
        sa.Column("last_seen_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_user_economy_user_id", "user_economy", ["user_id"], unique=True)

    op.create_table(
        "user_upgrades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("catalog_entry_id", sa.Integer(), sa.ForeignKey("defense_upgrades.id"), nullable=False),
        sa.Column("instance_name", sa.String(length=80), nullable=False),
        sa.Column("target_level", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=24), nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("finishes_at", sa.DateTime(), nullable=False),
        sa.Column("cost_resource", sa.String(length=16), nullable=False),
        sa.Column("cost_paid", sa.Integer(), nullable=False),
        sa.UniqueConstraint("user_id", "instance_name", name="uq_user_upgrades_user_instance"),
    )
    op.create_index("ix_user_upgrades_user_id", "user_upgrades", ["user_id"])
    op.create_index("ix_user_upgrades_catalog_entry_id", "user_upgrades", ["catalog_entry_id"])
    op.create_index("ix_user_upgrades_status", "user_upgrades", ["status"])
    op.create_index("ix_user_upgrades_finishes_at", "user_upgrades", ["finishes_at"])

    op.create_table(
        "user_base_data",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=80), nullable=False),
        sa.Column("structure_type", sa.String(length=64), nullable=False),
        sa.Column("instance_index", sa.Integer(), nullable=False),
        sa.Column("current_level", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_user_base_data_user_name"),
    )
    op.create_index("ix_user_base_data_user_id", "user_base_data", ["user_id"])
    op.create_index("ix_user_base_data_structure_type", "user_base_data", ["structure_type"])


def downgrade() -> None:
    op.drop_table("user_base_data")
    op.drop_table("user_upgrades")
    op.drop_table("user_economy")
    op.drop_table("defense_upgrades")
