"""Add countries, vat_categories and country_vat_rates tables

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2025-11-13 13:01:34.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('countries',
        sa.Column('id', sa.String(length=2), nullable=False),
        sa.Column('alpha3', sa.String(length=3), nullable=True),
        sa.Column('name_en', sa.String(length=100), nullable=False),
        sa.Column('name_local', sa.String(length=100), nullable=True),
        sa.Column('is_eu_member', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_eea_member', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('standard_vat_rate', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('currency_code', sa.String(length=3), nullable=True),
        sa.Column('region', sa.String(length=50), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('alpha3')
    )
    op.create_index(op.f('ix_countries_name_en'), 'countries', ['name_en'], unique=False)
    op.create_index(op.f('ix_countries_is_eu_member'), 'countries', ['is_eu_member'], unique=False)
    op.create_index(op.f('ix_countries_active'), 'countries', ['active'], unique=False)

    op.create_table('vat_categories',
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name_en', sa.String(length=200), nullable=False),
        sa.Column('name_bg', sa.String(length=200), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('annex_iii_category', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('code')
    )

    op.create_table('country_vat_rates',
        sa.Column('rate_id', sa.Uuid(), nullable=False),
        sa.Column('country_id', sa.String(length=2), nullable=False),
        sa.Column('category_code', sa.String(length=50), nullable=False),
        sa.Column('vat_rate', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('rate_type', sa.String(length=20), nullable=False),
        sa.Column('effective_from', sa.Date(), nullable=False),
        sa.Column('effective_until', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['country_id'], ['countries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_code'], ['vat_categories.code'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('rate_id'),
        sa.UniqueConstraint('country_id', 'category_code', 'effective_from', name='uq_country_vat_rates_start')
    )
    op.create_index(op.f('ix_country_vat_rates_country_id'), 'country_vat_rates', ['country_id'], unique=False)
    op.create_index(op.f('ix_country_vat_rates_category_code'), 'country_vat_rates', ['category_code'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_country_vat_rates_category_code'), table_name='country_vat_rates')
    op.drop_index(op.f('ix_country_vat_rates_country_id'), table_name='country_vat_rates')
    op.drop_table('country_vat_rates')
    op.drop_table('vat_categories')
    op.drop_index(op.f('ix_countries_active'), table_name='countries')
    op.drop_index(op.f('ix_countries_is_eu_member'), table_name='countries')
    op.drop_index(op.f('ix_countries_name_en'), table_name='countries')
    op.drop_table('countries')
