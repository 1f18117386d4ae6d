"""initial schema

Revision ID: 001
Revises:
Create Date: 2025-07-01 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

voucher_type = sa.Enum(
    'percentage', 'fixed_amount', 'buy_one_get_one', 'free_item', 'combo_deal',
    name='voucher_type',
)
voucher_status = sa.Enum('active', 'inactive', 'expired', 'used_up', name='voucher_status')
discount_scope = sa.Enum(
    'all_movies', 'specific_movie', 'specific_genre', 'weekend_only', 'weekday_only',
    'premium_screens', 'concessions',
    name='discount_scope',
)


def upgrade() -> None:
    # Create movies table
    op.create_table(
        'movies',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('director', sa.String(length=100), nullable=True),
        sa.Column('genre', ARRAY(sa.String()), nullable=True),
        sa.Column('rating', sa.Numeric(precision=3, scale=1), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('release_date', sa.Date(), nullable=True),
        sa.Column('poster_url', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('duration > 0', name='ck_movies_duration_positive'),
    )
    op.create_index(op.f('ix_movies_title'), 'movies', ['title'], unique=False)

    # Create rooms table
    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('room_type', sa.String(length=10), nullable=True),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.CheckConstraint('capacity >= 0', name='ck_rooms_capacity_non_negative'),
    )

    # Create showtime_sessions table
    op.create_table(
        'showtime_sessions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', 'date', name='uq_session_name_date'),
    )
    op.create_index(op.f('ix_showtime_sessions_date'), 'showtime_sessions', ['date'], unique=False)

    # Create showtime_slots table
    op.create_table(
        'showtime_slots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('movie_id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('base_price', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('booked_seats', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_seats', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['showtime_sessions.id']),
        sa.ForeignKeyConstraint(['movie_id'], ['movies.id']),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('booked_seats >= 0', name='ck_slots_booked_non_negative'),
        sa.CheckConstraint('booked_seats <= total_seats', name='ck_slots_booked_within_total'),
        sa.CheckConstraint('end_time > start_time', name='ck_slots_end_after_start'),
    )
    op.create_index(op.f('ix_showtime_slots_session_id'), 'showtime_slots', ['session_id'], unique=False)
    op.create_index(op.f('ix_showtime_slots_movie_id'), 'showtime_slots', ['movie_id'], unique=False)
    op.create_index(op.f('ix_showtime_slots_room_id'), 'showtime_slots', ['room_id'], unique=False)
    op.create_index(op.f('ix_showtime_slots_start_time'), 'showtime_slots', ['start_time'], unique=False)
    op.create_index(
        'uq_slot_session_room_start',
        'showtime_slots',
        ['session_id', 'room_id', 'start_time'],
        unique=True,
        postgresql_where=sa.text('is_active'),
    )

    # Create vouchers table
    op.create_table(
        'vouchers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('voucher_type', voucher_type, nullable=False),
        sa.Column('status', voucher_status, nullable=False, server_default='active'),
        sa.Column('discount_scope', discount_scope, nullable=False, server_default='all_movies'),
        sa.Column('discount_value', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('discount_percent', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('max_discount_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('min_order_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('applicable_movie_id', sa.Integer(), nullable=True),
        sa.Column('applicable_genres', JSONB(), nullable=True),
        sa.Column('applicable_screen_types', JSONB(), nullable=True),
        sa.Column('applicable_days_of_week', JSONB(), nullable=True),
        sa.Column('applicable_time_from', sa.String(length=5), nullable=True),
        sa.Column('applicable_time_to', sa.String(length=5), nullable=True),
        sa.Column('valid_from', sa.DateTime(timezone=True), nullable=False),
        sa.Column('valid_until', sa.DateTime(timezone=True), nullable=False),
        sa.Column('max_usage', sa.Integer(), nullable=True),
        sa.Column('current_usage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_usage_per_user', sa.Integer(), nullable=True),
        sa.Column('is_first_time_user_only', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_stackable', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('requires_code', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('auto_apply', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_by', sa.String(length=200), nullable=True),
        sa.Column('terms_and_conditions', sa.String(length=500), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['applicable_movie_id'], ['movies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('current_usage >= 0', name='ck_vouchers_usage_non_negative'),
        sa.CheckConstraint(
            'max_usage IS NULL OR current_usage <= max_usage',
            name='ck_vouchers_usage_within_max',
        ),
    )
    op.create_index(op.f('ix_vouchers_code'), 'vouchers', ['code'], unique=True)
    op.create_index(op.f('ix_vouchers_status'), 'vouchers', ['status'], unique=False)
    op.create_index(op.f('ix_vouchers_valid_until'), 'vouchers', ['valid_until'], unique=False)
    op.create_index(op.f('ix_vouchers_applicable_movie_id'), 'vouchers', ['applicable_movie_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_vouchers_applicable_movie_id'), table_name='vouchers')
    op.drop_index(op.f('ix_vouchers_valid_until'), table_name='vouchers')
    op.drop_index(op.f('ix_vouchers_status'), table_name='vouchers')
    op.drop_index(op.f('ix_vouchers_code'), table_name='vouchers')
    op.drop_table('vouchers')

    op.drop_index('uq_slot_session_room_start', table_name='showtime_slots')
    op.drop_index(op.f('ix_showtime_slots_start_time'), table_name='showtime_slots')
    op.drop_index(op.f('ix_showtime_slots_room_id'), table_name='showtime_slots')
    op.drop_index(op.f('ix_showtime_slots_movie_id'), table_name='showtime_slots')
    op.drop_index(op.f('ix_showtime_slots_session_id'), table_name='showtime_slots')
    op.drop_table('showtime_slots')

    op.drop_index(op.f('ix_showtime_sessions_date'), table_name='showtime_sessions')
    op.drop_table('showtime_sessions')

    op.drop_table('rooms')

    op.drop_index(op.f('ix_movies_title'), table_name='movies')
    op.drop_table('movies')

    discount_scope.drop(op.get_bind(), checkfirst=True)
    voucher_status.drop(op.get_bind(), checkfirst=True)
    voucher_type.drop(op.get_bind(), checkfirst=True)
