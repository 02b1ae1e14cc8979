"""add synoptic codes and agroclimatological records

Revision ID: 8b2e4d6f0a31
Revises: 3f1c2a9d7b10
Create Date: 2026-10-19 14:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2e4d6f0a31'
down_revision: Union[str, None] = '3f1c2a9d7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SYNOPTIC_GROUPS = (
    'c1', 'iliii', 'irixhvv', 'nddff', 's1nttt', 's2ntdtdtd', 'p3ppp4pppp', 'rrrtr6', 'ww_w1w2',
    'nh_cl_cm_ch', 's2ntntntn_inininin', 'd56_dl_dm_dh', 'cd57_da_ec', 'avg_total_cloud', 'c2', 'gg',
    'p24_group_58_59', 'r24_group_6_7', 'ns_ch_hs', 'dqqqt90', 'fqfqfq91',
)

AGRO_MEASUREMENTS = (
    'solar_radiation', 'sunshine_hours',
    'air_temp_dry_05m', 'air_temp_wet_05m', 'air_temp_dry_12m', 'air_temp_wet_12m',
    'air_temp_dry_22m', 'air_temp_wet_22m',
    'min_temp', 'max_temp', 'mean_temp', 'grass_min_temp',
    'soil_temp_5cm', 'soil_temp_10cm', 'soil_temp_20cm', 'soil_temp_30cm', 'soil_temp_50cm',
    'soil_moisture_0_20cm', 'soil_moisture_20_50cm',
    'pan_water_evap', 'relative_humidity', 'evaporation', 'dew_point', 'wind_speed', 'duration', 'rainfall',
)


def _base_columns():
    return [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    # Create synoptic_codes table
    op.create_table(
        'synoptic_codes',
        *_base_columns(),
        sa.Column('observing_time_id', sa.Integer(), nullable=False),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('data_type', sa.String(length=10), nullable=False),
        *[sa.Column(name, sa.String(length=255), nullable=True) for name in SYNOPTIC_GROUPS],
        sa.Column('weather_remark', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['observing_time_id'], ['observing_times.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('observing_time_id', name='uq_synoptic_code_observing_time')
    )
    op.create_index(op.f('ix_synoptic_codes_id'), 'synoptic_codes', ['id'], unique=False)
    op.create_index(op.f('ix_synoptic_codes_observing_time_id'), 'synoptic_codes', ['observing_time_id'], unique=False)
    op.create_index(op.f('ix_synoptic_codes_station_id'), 'synoptic_codes', ['station_id'], unique=False)

    # Create agroclimatological_records table
    op.create_table(
        'agroclimatological_records',
        *_base_columns(),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('utc_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('elevation', sa.Float(), nullable=False),
        *[sa.Column(name, sa.Float(), nullable=True) for name in AGRO_MEASUREMENTS],
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('station_id', 'date', name='uq_agroclimatological_station_date')
    )
    op.create_index(op.f('ix_agroclimatological_records_id'), 'agroclimatological_records', ['id'], unique=False)
    op.create_index(
        op.f('ix_agroclimatological_records_station_id'), 'agroclimatological_records', ['station_id'], unique=False
    )
    op.create_index(op.f('ix_agroclimatological_records_date'), 'agroclimatological_records', ['date'], unique=False)


def downgrade() -> None:
    op.drop_table('agroclimatological_records')
    op.drop_table('synoptic_codes')
