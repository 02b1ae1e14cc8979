"""create initial schema for stations, users, observations and summaries

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2026-10-19 08:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def _text_columns(names, length=20, nullable=True):
    return [sa.Column(name, sa.String(length=length), nullable=nullable) for name in names]


def upgrade() -> None:
    # Create stations table
    op.create_table(
        'stations',
        *_base_columns(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('station_code', sa.String(length=50), nullable=False),
        sa.Column('security_code', sa.String(length=100), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_stations_id'), 'stations', ['id'], unique=False)
    op.create_index(op.f('ix_stations_name'), 'stations', ['name'], unique=False)
    op.create_index(op.f('ix_stations_station_code'), 'stations', ['station_code'], unique=True)

    # Create users table
    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('station_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.CheckConstraint("role IN ('super_admin', 'station_admin', 'observer')", name='check_user_role'),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_station_id'), 'users', ['station_id'], unique=False)

    # Create user_sessions table
    op.create_table(
        'user_sessions',
        *_base_columns(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=128), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_sessions_id'), 'user_sessions', ['id'], unique=False)
    op.create_index(op.f('ix_user_sessions_user_id'), 'user_sessions', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_sessions_token'), 'user_sessions', ['token'], unique=True)
    op.create_index(op.f('ix_user_sessions_expires_at'), 'user_sessions', ['expires_at'], unique=False)

    # Create observing_times table
    op.create_table(
        'observing_times',
        *_base_columns(),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('utc_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('local_time', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('station_id', 'utc_time', name='uq_observing_time_station_utc')
    )
    op.create_index(op.f('ix_observing_times_id'), 'observing_times', ['id'], unique=False)
    op.create_index(op.f('ix_observing_times_station_id'), 'observing_times', ['station_id'], unique=False)
    op.create_index(op.f('ix_observing_times_utc_time'), 'observing_times', ['utc_time'], unique=False)

    # Create meteorological_entries table (first card)
    op.create_table(
        'meteorological_entries',
        *_base_columns(),
        sa.Column('observing_time_id', sa.Integer(), nullable=False),
        sa.Column('data_type', sa.String(length=10), nullable=True),
        *_text_columns([
            'sub_indicator', 'altered_thermometer', 'bar_as_read', 'corrected_for_index',
            'height_difference', 'correction_for_temp', 'station_level_pressure',
            'sea_level_reduction', 'corrected_sea_level_pressure', 'afternoon_reading',
            'pressure_change_24h', 'dry_bulb_as_read', 'wet_bulb_as_read', 'max_min_temp_as_read',
            'dry_bulb_corrected', 'wet_bulb_corrected', 'max_min_temp_corrected',
            'dew_point_temperature', 'relative_humidity',
        ]),
        sa.Column('squall_confirmed', sa.String(length=10), nullable=True),
        *_text_columns(['squall_force', 'squall_direction', 'squall_time', 'horizontal_visibility']),
        sa.Column('misc_meteors', sa.String(length=100), nullable=True),
        *_text_columns(['past_weather_w1', 'past_weather_w2', 'present_weather_ww', 'c2_indicator'], length=10),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['observing_time_id'], ['observing_times.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_meteorological_entries_id'), 'meteorological_entries', ['id'], unique=False)
    op.create_index(
        op.f('ix_meteorological_entries_observing_time_id'), 'meteorological_entries', ['observing_time_id'], unique=False
    )

    # Create weather_observations table (second card)
    op.create_table(
        'weather_observations',
        *_base_columns(),
        sa.Column('observing_time_id', sa.Integer(), nullable=False),
        sa.Column('observer_initial', sa.String(length=20), nullable=True),
        sa.Column('card_indicator', sa.String(length=5), nullable=True),
        *_text_columns([
            f'{level}_cloud_{attr}'
            for level in ('low', 'medium', 'high')
            for attr in ('form', 'height', 'amount', 'direction')
        ]),
        sa.Column('total_cloud_amount', sa.String(length=20), nullable=True),
        *_text_columns([
            f'layer{index}_{attr}'
            for index in range(1, 5)
            for attr in ('form', 'height', 'amount')
        ]),
        sa.Column('rainfall_time_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rainfall_time_end', sa.DateTime(timezone=True), nullable=True),
        *_text_columns(['rainfall_since_previous', 'rainfall_during_previous', 'rainfall_last_24_hours']),
        sa.Column('is_intermittent_rain', sa.Boolean(), nullable=True),
        *_text_columns(['wind_first_anemometer', 'wind_second_anemometer', 'wind_speed', 'wind_direction']),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['observing_time_id'], ['observing_times.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_weather_observations_id'), 'weather_observations', ['id'], unique=False)
    op.create_index(
        op.f('ix_weather_observations_observing_time_id'), 'weather_observations', ['observing_time_id'], unique=False
    )

    # Create daily_summaries table
    op.create_table(
        'daily_summaries',
        *_base_columns(),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('observing_time_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('data_type', sa.String(length=10), nullable=False),
        *_text_columns([
            'av_station_pressure', 'av_sea_level_pressure', 'av_dry_bulb_temperature',
            'av_wet_bulb_temperature', 'max_temperature', 'min_temperature', 'total_precipitation',
            'av_dew_point_temperature', 'av_relative_humidity', 'wind_speed', 'wind_direction_code',
            'max_wind_speed', 'max_wind_direction', 'av_total_cloud', 'lowest_visibility',
            'total_rain_duration',
        ]),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['observing_time_id'], ['observing_times.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_daily_summaries_id'), 'daily_summaries', ['id'], unique=False)
    op.create_index(op.f('ix_daily_summaries_station_id'), 'daily_summaries', ['station_id'], unique=False)
    op.create_index(op.f('ix_daily_summaries_date'), 'daily_summaries', ['date'], unique=False)
    op.create_index('idx_daily_summary_station_date', 'daily_summaries', ['station_id', 'date'], unique=False)

    # Create sunshine_records table
    op.create_table(
        'sunshine_records',
        *_base_columns(),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('hours', sa.JSON(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('station_id', 'date', name='uq_sunshine_station_date')
    )
    op.create_index(op.f('ix_sunshine_records_id'), 'sunshine_records', ['id'], unique=False)
    op.create_index(op.f('ix_sunshine_records_station_id'), 'sunshine_records', ['station_id'], unique=False)
    op.create_index(op.f('ix_sunshine_records_date'), 'sunshine_records', ['date'], unique=False)

    # Create soil_moisture_records table
    op.create_table(
        'soil_moisture_records',
        *_base_columns(),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('depth', sa.Integer(), nullable=False),
        *[sa.Column(name, sa.Float(), nullable=True) for name in ('w1', 'w2', 'w3', 'ws', 'ds', 'sm')],
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_soil_moisture_records_id'), 'soil_moisture_records', ['id'], unique=False)
    op.create_index(op.f('ix_soil_moisture_records_station_id'), 'soil_moisture_records', ['station_id'], unique=False)
    op.create_index(op.f('ix_soil_moisture_records_date'), 'soil_moisture_records', ['date'], unique=False)

    # Create audit_logs table
    op.create_table(
        'audit_logs',
        *_base_columns(),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('station_id', sa.Integer(), nullable=True),
        sa.Column('actor_email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('module', sa.String(length=50), nullable=False),
        sa.Column('action_text', sa.String(length=500), nullable=False),
        sa.Column('target_id', sa.String(length=50), nullable=True),
        sa.Column('target_email', sa.String(length=255), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_audit_logs_id'), 'audit_logs', ['id'], unique=False)
    op.create_index(op.f('ix_audit_logs_user_id'), 'audit_logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_audit_logs_station_id'), 'audit_logs', ['station_id'], unique=False)
    op.create_index(op.f('ix_audit_logs_module'), 'audit_logs', ['module'], unique=False)


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('soil_moisture_records')
    op.drop_table('sunshine_records')
    op.drop_table('daily_summaries')
    op.drop_table('weather_observations')
    op.drop_table('meteorological_entries')
    op.drop_table('observing_times')
    op.drop_table('user_sessions')
    op.drop_table('users')
    op.drop_table('stations')
