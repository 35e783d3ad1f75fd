"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates research_sessions, deliberation_messages and simulated_trades.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'research_sessions',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=36), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('thesis', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('strategy', sqlmodel.sql.sqltypes.AutoString(length=32), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=32), nullable=False),
        sa.Column('research_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_research_sessions_user_id'), 'research_sessions', ['user_id'])
    op.create_index(op.f('ix_research_sessions_status'), 'research_sessions', ['status'])
    op.create_index(op.f('ix_research_sessions_created_at'), 'research_sessions', ['created_at'])

    op.create_table(
        'deliberation_messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sqlmodel.sql.sqltypes.AutoString(length=36), nullable=False),
        sa.Column('role', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('agent_name', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('content', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['research_sessions.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_deliberation_messages_session_id'), 'deliberation_messages', ['session_id'])
    op.create_index(op.f('ix_deliberation_messages_created_at'), 'deliberation_messages', ['created_at'])

    op.create_table(
        'simulated_trades',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=36), nullable=False),
        sa.Column('session_id', sqlmodel.sql.sqltypes.AutoString(length=36), nullable=False),
        sa.Column('symbol', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('side', sqlmodel.sql.sqltypes.AutoString(length=4), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('order_type', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('limit_price', sa.Float(), nullable=True),
        sa.Column('stop_price', sa.Float(), nullable=True),
        sa.Column('broker_order_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('broker_client_order_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('filled_price', sa.Float(), nullable=True),
        sa.Column('filled_quantity', sa.Float(), nullable=True),
        sa.Column('filled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('current_price', sa.Float(), nullable=True),
        sa.Column('unrealized_pnl', sa.Float(), nullable=True),
        sa.Column('realized_pnl', sa.Float(), nullable=False),
        sa.Column('investment_thesis', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('cancel_requested_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('broker_cancel_confirmed', sa.Boolean(), nullable=False),
        sa.Column('broker_cancel_error', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['research_sessions.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_simulated_trades_session_id'), 'simulated_trades', ['session_id'])
    op.create_index(op.f('ix_simulated_trades_symbol'), 'simulated_trades', ['symbol'])
    op.create_index(op.f('ix_simulated_trades_status'), 'simulated_trades', ['status'])
    op.create_index(op.f('ix_simulated_trades_broker_order_id'), 'simulated_trades', ['broker_order_id'])
    op.create_index(op.f('ix_simulated_trades_cancel_requested_at'), 'simulated_trades', ['cancel_requested_at'])
    op.create_index(op.f('ix_simulated_trades_created_at'), 'simulated_trades', ['created_at'])


def downgrade() -> None:
    op.drop_table('simulated_trades')
    op.drop_table('deliberation_messages')
    op.drop_table('research_sessions')
