"""create_signal_tables

Revision ID: 5a1c0f2e9b3d
Revises:
Create Date: 2026-10-18 09:12:41.508113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5a1c0f2e9b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'signals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session', sa.String(length=20), nullable=False, comment='Session band at confirmation: OVERNIGHT/MORNING/AFTERNOON/OUTSIDE'),
        sa.Column('time_stamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Creation time (UTC)'),
        sa.Column('pair', sa.String(length=100), nullable=False, comment='Pair label with flag glyphs'),
        sa.Column('direction', sa.String(length=20), nullable=False, comment='Direction label, e.g. 🟩 BUY'),
        sa.Column('result', sa.String(length=100), nullable=True, comment='Stored outcome text, NULL while open'),
        sa.Column('initial_time', sa.String(length=5), nullable=False, comment='Entry time HH:MM'),
        sa.Column('telegram_id', sa.BigInteger(), nullable=False, comment='Channel the signal was posted to'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_signals_channel_time', 'signals', ['telegram_id', 'time_stamp'], unique=False)
    op.create_index('idx_signals_channel_session', 'signals', ['telegram_id', 'session'], unique=False)

    op.create_table(
        'crons',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, server_default='', comment='Human readable name'),
        sa.Column('cron_id', sa.String(length=100), nullable=False, comment='session_end, day_end or a cron_posts.message_id'),
        sa.Column('schedule', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]', comment='Crontab expressions'),
        sa.Column('timezone', sa.String(length=64), nullable=False, server_default='UTC', comment='IANA timezone'),
        sa.Column('telegram_id', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_crons_telegram_id'), 'crons', ['telegram_id'], unique=False)

    op.create_table(
        'cron_posts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('message_id', sa.String(length=100), nullable=False, comment='Matches crons.cron_id'),
        sa.Column('text', sa.Text(), nullable=True, comment='HTML text or caption'),
        sa.Column('image', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('video', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reply_markup', postgresql.JSONB(astext_type=sa.Text()), nullable=True, comment='Telegram markup, {"inline_keyboard": [[{text, url}]]}'),
        sa.Column('telegram_id', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_cron_posts_telegram_id'), 'cron_posts', ['telegram_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_cron_posts_telegram_id'), table_name='cron_posts')
    op.drop_table('cron_posts')
    op.drop_index(op.f('ix_crons_telegram_id'), table_name='crons')
    op.drop_table('crons')
    op.drop_index('idx_signals_channel_session', table_name='signals')
    op.drop_index('idx_signals_channel_time', table_name='signals')
    op.drop_table('signals')
