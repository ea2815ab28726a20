"""Create identity and family tables

Revision ID: 3a9c1e7d2b40
Revises:
Create Date: 2026-10-19 10:12:03.518204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a9c1e7d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLite only auto-increments "INTEGER PRIMARY KEY"
BIGINT_PK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    """Upgrade schema."""
    # 1. families (creator FK is added after individuals exists)
    op.create_table(
        'families',
        sa.Column('id', BIGINT_PK, primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False, unique=True),
        sa.Column('creator_id', BIGINT_PK, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # 2. individuals (paciente)
    op.create_table(
        'individuals',
        sa.Column('id', BIGINT_PK, primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('sex', sa.String(length=1), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('prior_diagnosis', sa.Text(), nullable=True),
        sa.Column('genetic_panel', sa.Text(), nullable=True),
        sa.Column(
            'family_id', BIGINT_PK,
            sa.ForeignKey('families.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("sex in ('M','F') or sex is null", name='ck_individuals_sex'),
    )
    op.create_index('ix_individuals_email', 'individuals', ['email'], unique=True)
    op.create_index('idx_individuals_family', 'individuals', ['family_id'])

    # 3. professionals (profissional)
    op.create_table(
        'professionals',
        sa.Column('id', BIGINT_PK, primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_professionals_email', 'professionals', ['email'], unique=True)

    # 4. families.creator_id -> individuals.id (SQLite cannot ALTER constraints)
    if op.get_bind().dialect.name != 'sqlite':
        op.create_foreign_key(
            'fk_families_creator_id',
            'families',
            'individuals',
            ['creator_id'],
            ['id'],
            ondelete='SET NULL'
        )


def downgrade() -> None:
    """Downgrade schema."""
    if op.get_bind().dialect.name != 'sqlite':
        op.drop_constraint('fk_families_creator_id', 'families', type_='foreignkey')
    op.drop_index('ix_professionals_email', table_name='professionals')
    op.drop_table('professionals')
    op.drop_index('idx_individuals_family', table_name='individuals')
    op.drop_index('ix_individuals_email', table_name='individuals')
    op.drop_table('individuals')
    op.drop_table('families')
