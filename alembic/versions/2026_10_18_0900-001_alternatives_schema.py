"""Exercise catalog, equipment, AI usage and alternatives cache tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create alternatives pipeline tables."""
    op.create_table('exercises', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('category', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('muscle_groups', sa.JSON(), nullable=False),
        sa.Column('equipment', sa.JSON(), nullable=False),
        sa.Column('movement_pattern', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('difficulty', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_exercises_organization_id'), 'exercises', ['organization_id'], unique=False)
    op.create_index(op.f('ix_exercises_movement_pattern'), 'exercises', ['movement_pattern'], unique=False)

    op.create_table('organization_equipment', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('available_equipment', sa.JSON(), nullable=False),
        sa.Column('unavailable_equipment', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_organization_equipment_organization_id'), 'organization_equipment',
                    ['organization_id'], unique=True)

    op.create_table('organization_ai_usage', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('ai_plan', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False, server_default='free'),
        sa.Column('ai_enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('monthly_token_limit', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('monthly_alternatives_limit', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_requests_per_user_daily', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('requests_per_user_monthly', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('extra_requests_per_user', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('alert_threshold_percent', sa.Integer(), nullable=False, server_default='80'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_organization_ai_usage_organization_id'), 'organization_ai_usage',
                    ['organization_id'], unique=True)

    op.create_table('usage_counters',
        sa.Column('counter_id', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('organization_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('period', sqlmodel.sql.sqltypes.AutoString(length=10), nullable=False),
        sa.Column('value', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('counter_id'))
    op.create_index(op.f('ix_usage_counters_organization_id'), 'usage_counters', ['organization_id'], unique=False)

    op.create_table('ai_usage_log', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('feature', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=True),
        sa.Column('tokens_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('was_cached', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('ranking', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('response_time_ms', sa.Integer(), nullable=True),
        sa.Column('alternatives_count', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_ai_usage_log_organization_id'), 'ai_usage_log', ['organization_id'], unique=False)
    op.create_index(op.f('ix_ai_usage_log_created_at'), 'ai_usage_log', ['created_at'], unique=False)

    op.create_table('alternatives_cache',
        sa.Column('cache_key', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('organization_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('tokens_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('hit_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_hit_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('cache_key'))
    op.create_index(op.f('ix_alternatives_cache_organization_id'), 'alternatives_cache',
                    ['organization_id'], unique=False)
    op.create_index(op.f('ix_alternatives_cache_exercise_id'), 'alternatives_cache', ['exercise_id'], unique=False)
    op.create_index(op.f('ix_alternatives_cache_expires_at'), 'alternatives_cache', ['expires_at'], unique=False)


def downgrade() -> None:
    """Drop alternatives pipeline tables."""
    op.drop_index(op.f('ix_alternatives_cache_expires_at'), table_name='alternatives_cache')
    op.drop_index(op.f('ix_alternatives_cache_exercise_id'), table_name='alternatives_cache')
    op.drop_index(op.f('ix_alternatives_cache_organization_id'), table_name='alternatives_cache')
    op.drop_table('alternatives_cache')
    op.drop_index(op.f('ix_ai_usage_log_created_at'), table_name='ai_usage_log')
    op.drop_index(op.f('ix_ai_usage_log_organization_id'), table_name='ai_usage_log')
    op.drop_table('ai_usage_log')
    op.drop_index(op.f('ix_usage_counters_organization_id'), table_name='usage_counters')
    op.drop_table('usage_counters')
    op.drop_index(op.f('ix_organization_ai_usage_organization_id'), table_name='organization_ai_usage')
    op.drop_table('organization_ai_usage')
    op.drop_index(op.f('ix_organization_equipment_organization_id'), table_name='organization_equipment')
    op.drop_table('organization_equipment')
    op.drop_index(op.f('ix_exercises_movement_pattern'), table_name='exercises')
    op.drop_index(op.f('ix_exercises_organization_id'), table_name='exercises')
    op.drop_table('exercises')
