"""seed starter catalog

Revision ID: 6b3e58c2d0f7
Revises: 1f0c2d9a7b41
Create Date: 2026-10-12 21:37:14.538913

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "6b3e58c2d0f7"
down_revision: Union[str, Sequence[str], None] = "1f0c2d9a7b41"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Idempotent seed for SQLite: if rows already exist, do nothing.
    op.execute(
        """
        INSERT OR IGNORE INTO defense_upgrades
          (structure_type, level, build_resource, build_cost, build_time_seconds, unlocks_at_town_hall, max_per_town_hall)
        VALUES
          ('Town Hall',         2, 'gold',     1000,     10, 1, 1),
          ('Town Hall',         3, 'gold',     4000,   1800, 2, 1),
          ('Town Hall',         4, 'gold',    25000,  10800, 3, 1),
          ('Cannon',            1, 'gold',      250,     10, 1, 2),
          ('Cannon',            2, 'gold',     1000,     60, 1, 2),
          ('Cannon',            3, 'gold',     4000,    900, 2, 2),
          ('Archer Tower',      1, 'gold',     1000,     60, 2, 1),
          ('Archer Tower',      2, 'gold',     2000,    900, 2, 1),
          ('Archer Tower',      3, 'gold',     5000,   2700, 3, 1),
          ('Gold Mine',         1, 'elixir',    150,     10, 1, 2),
          ('Gold Mine',         2, 'elixir',    300,     60, 1, 2),
          ('Gold Mine',         3, 'elixir',    700,    900, 2, 2),
          ('Elixir Collector',  1, 'gold',      150,     10, 1, 2),
          ('Elixir Collector',  2, 'gold',      300,     60, 1, 2),
          ('Elixir Collector',  3, 'gold',      700,    900, 2, 2);
        """
    )


def downgrade() -> None:
    op.execute(
        "DELETE FROM defense_upgrades WHERE structure_type IN "
        "('Town Hall','Cannon','Archer Tower','Gold Mine','Elixir Collector')"
    )
