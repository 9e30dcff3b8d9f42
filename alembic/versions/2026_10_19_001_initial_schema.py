"""Initial schema: tenants, principals, profiles, clients, catalog and invoices

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '001_initial_schema'
down_revision = None

INVOICE_STATUS = postgresql.ENUM('DRAFT', 'SENT', 'PAID', 'OVERDUE', name='invoicestatus', create_type=False)
CATALOG_ITEM_TYPE = postgresql.ENUM('PRODUCT', 'SERVICE', name='catalogitemtype', create_type=False)


def upgrade():
    INVOICE_STATUS.create(op.get_bind(), checkfirst=True)
    CATALOG_ITEM_TYPE.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'tenants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index('ix_tenants_name', 'tenants', ['name'])

    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('company', sa.String(255), nullable=True),
        sa.Column('email_confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('last_sign_in_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('company', sa.String(255), nullable=True),
        sa.Column('tagline', sa.String(255), nullable=True),
        sa.Column('logo_url', sa.String(1000), nullable=True),
        sa.Column('manager_name', sa.String(255), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('city', sa.String(255), nullable=True),
        sa.Column('state', sa.String(255), nullable=True),
        sa.Column('national_id', sa.String(100), nullable=True),
        sa.Column('rccm', sa.String(100), nullable=True),
        sa.Column('nif', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_profiles_tenant_id', 'profiles', ['tenant_id'])

    op.create_table(
        'clients',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('contact_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.String(1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_clients_tenant_id', 'clients', ['tenant_id'])
    op.create_index('ix_clients_created_at', 'clients', ['created_at'])

    op.create_table(
        'catalog_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.String(2000), nullable=True),
        sa.Column('item_type', CATALOG_ITEM_TYPE, nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(10), nullable=False, server_default='USD'),
        sa.Column('sku', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('tenant_id', 'sku', name='catalog_items_tenant_sku_key'),
    )
    op.create_index('ix_catalog_items_tenant_id', 'catalog_items', ['tenant_id'])
    op.create_index('ix_catalog_items_item_type', 'catalog_items', ['item_type'])
    op.create_index('ix_catalog_items_is_active', 'catalog_items', ['is_active'])
    op.create_index('ix_catalog_items_created_at', 'catalog_items', ['created_at'])

    op.create_table(
        'invoices',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('invoice_number', sa.String(50), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('status', INVOICE_STATUS, nullable=False),
        sa.Column('notes', sa.String(5000), nullable=True),
        sa.Column('currency', sa.String(10), nullable=False, server_default='USD'),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('subtotal_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_invoices_tenant_id', 'invoices', ['tenant_id'])
    op.create_index('ix_invoices_client_id', 'invoices', ['client_id'])
    op.create_index('ix_invoices_invoice_number', 'invoices', ['invoice_number'])
    op.create_index('ix_invoices_issue_date', 'invoices', ['issue_date'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])


def downgrade():
    op.drop_table('invoices')
    op.drop_table('catalog_items')
    op.drop_table('clients')
    op.drop_table('profiles')
    op.drop_index('ix_users_email', 'users')
    op.drop_table('users')
    op.drop_table('tenants')

    CATALOG_ITEM_TYPE.drop(op.get_bind(), checkfirst=True)
    INVOICE_STATUS.drop(op.get_bind(), checkfirst=True)
