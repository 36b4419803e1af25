"""Create dashboard tables

Revision ID: 5b1d0e7a9c21
Revises: 
Create Date: 2026-09-28 11:02:14.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5b1d0e7a9c21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def social_columns():
    return [
        sa.Column('facebook_url', sa.VARCHAR(), nullable=True),
        sa.Column('instagram_url', sa.VARCHAR(), nullable=True),
        sa.Column('pinterest_url', sa.VARCHAR(), nullable=True),
        sa.Column('tiktok_url', sa.VARCHAR(), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
    sa.Column('id', sa.VARCHAR(), nullable=False),
    sa.Column('email', sa.VARCHAR(), nullable=False),
    sa.Column('password', sa.VARCHAR(), nullable=False),
    sa.Column('name', sa.VARCHAR(), nullable=True),
    sa.Column('is_admin', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('prod_access', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('store_access', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('prod_and_store_access', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('email')
    )

    op.create_table('upload_history',
    sa.Column('id', sa.VARCHAR(), nullable=False),
    sa.Column('file_type', sa.VARCHAR(), nullable=False),
    sa.Column('rows_processed', sa.INTEGER(), nullable=False),
    sa.Column('total_rows', sa.INTEGER(), nullable=True),
    sa.Column('status', sa.Enum('success', 'partial', 'failed', name='uploadstatus', native_enum=False), nullable=False),
    sa.Column('error_message', sa.TEXT(), nullable=True),
    sa.Column('uploaded_by', sa.VARCHAR(), nullable=True),
    sa.Column('uploaded_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_upload_history_uploaded_at', 'upload_history', ['uploaded_at'], unique=False)

    op.create_table('category_nodes',
    sa.Column('id', sa.INTEGER(), autoincrement=True, nullable=False),
    sa.Column('name', sa.VARCHAR(), nullable=False),
    sa.Column('parent_id', sa.INTEGER(), nullable=True),
    sa.Column('parent_key', sa.INTEGER(), nullable=False, server_default='0'),
    sa.Column('level', sa.INTEGER(), nullable=False, server_default='0'),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['parent_id'], ['category_nodes.id']),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('name', 'parent_key', 'level', name='uq_category_nodes_name_parent_level')
    )
    op.create_index('ix_category_nodes_parent_id', 'category_nodes', ['parent_id'], unique=False)

    op.create_table('products',
    sa.Column('id', sa.INTEGER(), autoincrement=True, nullable=False),
    sa.Column('time_added', sa.DateTime(), nullable=False),
    sa.Column('time_scraped', sa.DateTime(), nullable=True),
    sa.Column('cid', sa.VARCHAR(), nullable=True),
    sa.Column('pjson', sa.TEXT(), nullable=True),
    sa.Column('productj', sa.TEXT(), nullable=True),
    sa.Column('breadcrumbj', sa.TEXT(), nullable=True),
    sa.Column('category_name', sa.VARCHAR(), nullable=True),
    sa.Column('category_tree', sa.TEXT(), nullable=True),
    sa.Column('category_url', sa.VARCHAR(), nullable=True),
    sa.Column('category_node_id', sa.INTEGER(), nullable=True),
    sa.Column('product_url', sa.VARCHAR(), nullable=True),
    sa.Column('product_id', sa.VARCHAR(), nullable=True),
    sa.Column('product_id_new', sa.VARCHAR(), nullable=True),
    sa.Column('product_title', sa.TEXT(), nullable=True),
    sa.Column('brand', sa.VARCHAR(), nullable=True),
    sa.Column('image', sa.VARCHAR(), nullable=True),
    sa.Column('last_24_hours', sa.INTEGER(), nullable=True),
    sa.Column('number_in_basket', sa.INTEGER(), nullable=True),
    sa.Column('product_reviews', sa.INTEGER(), nullable=True),
    sa.Column('ratingvalue', sa.Float(), nullable=True),
    sa.Column('date_of_latest_review', sa.DateTime(), nullable=True),
    sa.Column('date_listed', sa.DateTime(), nullable=True),
    sa.Column('number_of_favourties', sa.INTEGER(), nullable=True),
    sa.Column('related_searches', sa.TEXT(), nullable=True),
    sa.Column('star_seller', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('ad', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('digital_download', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('price_usd', sa.Float(), nullable=True),
    sa.Column('sale_price_usd', sa.Float(), nullable=True),
    sa.Column('store_reviews', sa.INTEGER(), nullable=True),
    sa.Column('store_name', sa.VARCHAR(), nullable=True),
    sa.Column('store_url', sa.VARCHAR(), nullable=True),
    sa.Column('store_country', sa.VARCHAR(), nullable=True),
    sa.Column('on_etsy_since', sa.DateTime(), nullable=True),
    sa.Column('store_sales', sa.INTEGER(), nullable=True),
    sa.Column('store_admirers', sa.INTEGER(), nullable=True),
    sa.Column('number_of_store_products', sa.INTEGER(), nullable=True),
    *social_columns(),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_products_time_added', 'products', ['time_added'], unique=False)
    op.create_index('ix_products_time_scraped', 'products', ['time_scraped'], unique=False)
    op.create_index('ix_products_category_name', 'products', ['category_name'], unique=False)
    op.create_index('ix_products_brand', 'products', ['brand'], unique=False)
    op.create_index('ix_products_store_name', 'products', ['store_name'], unique=False)
    op.create_index('ix_products_store_country', 'products', ['store_country'], unique=False)
    op.create_index('ix_products_product_id_time_added', 'products', ['product_id', 'time_added'], unique=False)

    op.create_table('stores',
    sa.Column('id', sa.INTEGER(), autoincrement=True, nullable=False),
    sa.Column('time_added', sa.DateTime(), nullable=False),
    sa.Column('store_id', sa.VARCHAR(), nullable=True),
    sa.Column('store_name', sa.VARCHAR(), nullable=True),
    sa.Column('store_url', sa.VARCHAR(), nullable=True),
    sa.Column('store_sub_title', sa.TEXT(), nullable=True),
    sa.Column('welcome_to_our_shop_text', sa.TEXT(), nullable=True),
    sa.Column('store_logo_url', sa.VARCHAR(), nullable=True),
    sa.Column('store_description', sa.TEXT(), nullable=True),
    sa.Column('most_recent_product_urls', postgresql.ARRAY(sa.VARCHAR()), nullable=True),
    sa.Column('store_country', sa.VARCHAR(), nullable=True),
    sa.Column('star_seller', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('store_last_updated', sa.DateTime(), nullable=True),
    sa.Column('store_reviews', sa.INTEGER(), nullable=True),
    sa.Column('store_review_score', sa.Float(), nullable=True),
    sa.Column('on_etsy_since', sa.DateTime(), nullable=True),
    sa.Column('store_sales', sa.INTEGER(), nullable=True),
    sa.Column('store_admirers', sa.INTEGER(), nullable=True),
    sa.Column('number_of_store_products', sa.INTEGER(), nullable=True),
    sa.Column('looking_for_more_urls', postgresql.ARRAY(sa.VARCHAR()), nullable=True),
    *social_columns(),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_stores_time_added', 'stores', ['time_added'], unique=False)
    op.create_index('ix_stores_store_country', 'stores', ['store_country'], unique=False)
    op.create_index('ix_stores_store_name_time_added', 'stores', ['store_name', 'time_added'], unique=False)

    op.create_table('categories',
    sa.Column('id', sa.INTEGER(), autoincrement=True, nullable=False),
    sa.Column('time_added', sa.DateTime(), nullable=False),
    sa.Column('product_id', sa.VARCHAR(), nullable=True),
    sa.Column('search_url', sa.VARCHAR(), nullable=True),
    sa.Column('category_tree', postgresql.ARRAY(sa.VARCHAR()), nullable=True),
    sa.Column('category_node_id', sa.INTEGER(), nullable=True),
    sa.Column('product_url', sa.VARCHAR(), nullable=True),
    sa.Column('product_name', sa.VARCHAR(), nullable=True),
    sa.Column('is_ad', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('star_seller', sa.BOOLEAN(), nullable=False, server_default=sa.false()),
    sa.Column('store_reviews_number', sa.INTEGER(), nullable=True),
    sa.Column('store_reviews_score', sa.Float(), nullable=True),
    sa.Column('store_name', sa.VARCHAR(), nullable=True),
    sa.Column('store_url', sa.VARCHAR(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_categories_time_added', 'categories', ['time_added'], unique=False)
    op.create_index('ix_categories_product_id', 'categories', ['product_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_categories_product_id', table_name='categories')
    op.drop_index('ix_categories_time_added', table_name='categories')
    op.drop_table('categories')
    op.drop_index('ix_stores_store_name_time_added', table_name='stores')
    op.drop_index('ix_stores_store_country', table_name='stores')
    op.drop_index('ix_stores_time_added', table_name='stores')
    op.drop_table('stores')
    for name in ('product_id_time_added', 'store_country', 'store_name', 'brand', 'category_name', 'time_scraped', 'time_added'):
        op.drop_index(f'ix_products_{name}', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_category_nodes_parent_id', table_name='category_nodes')
    op.drop_table('category_nodes')
    op.drop_index('ix_upload_history_uploaded_at', table_name='upload_history')
    op.drop_table('upload_history')
    op.drop_table('users')
