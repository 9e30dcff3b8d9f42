"""Store audit timestamps with their timezone

Revision ID: 002_timezone_aware_timestamps
Revises: 001_initial_schema
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '002_timezone_aware_timestamps'
down_revision = '001_initial_schema'

# Existing naive values were written in UTC
TIMESTAMP_COLUMNS = {
    'tenants': ('created_at',),
    'users': ('email_confirmed_at', 'created_at', 'updated_at', 'last_sign_in_at'),
    'profiles': ('created_at', 'updated_at'),
    'clients': ('created_at', 'updated_at'),
    'catalog_items': ('created_at', 'updated_at'),
    'invoices': ('created_at', 'updated_at'),
}


def upgrade():
    for table, columns in TIMESTAMP_COLUMNS.items():
        for column in columns:
            op.alter_column(
                table,
                column,
                type_=sa.DateTime(timezone=True),
                existing_type=sa.DateTime(),
                postgresql_using=f"{column} AT TIME ZONE 'UTC'",
            )


def downgrade():
    for table, columns in TIMESTAMP_COLUMNS.items():
        for column in columns:
            op.alter_column(
                table,
                column,
                type_=sa.DateTime(),
                existing_type=sa.DateTime(timezone=True),
                postgresql_using=f"{column} AT TIME ZONE 'UTC'",
            )
