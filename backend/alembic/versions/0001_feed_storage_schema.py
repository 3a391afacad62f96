"""Create feed storage tables

Revision ID: feed_storage_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'feed_storage_schema'
down_revision = None
branch_labels = None
depends_on = None


entry_status = sa.Enum('unread', 'read', 'removed', name='entry_status')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(255), nullable=False, unique=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('timezone', sa.String(64), nullable=False, server_default='UTC'),
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.UniqueConstraint('user_id', 'title', name='uq_categories_user_title'),
    )
    op.create_index('ix_categories_user_id', 'categories', ['user_id'])

    op.create_table(
        'feeds',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category_id', sa.BigInteger(), sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False),
        sa.Column('feed_url', sa.Text(), nullable=False),
        sa.Column('site_url', sa.Text(), nullable=False, server_default=''),
        sa.Column('title', sa.Text(), nullable=False, server_default=''),
        sa.Column('etag_header', sa.Text(), nullable=False, server_default=''),
        sa.Column('last_modified_header', sa.Text(), nullable=False, server_default=''),
        sa.Column('checked_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('next_check_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('parsing_error_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('parsing_error_msg', sa.Text(), nullable=False, server_default=''),
        sa.Column('scraper_rules', sa.Text(), nullable=False, server_default=''),
        sa.Column('rewrite_rules', sa.Text(), nullable=False, server_default=''),
        sa.Column('crawler', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('user_agent', sa.Text(), nullable=False, server_default=''),
        sa.Column('username', sa.Text(), nullable=False, server_default=''),
        sa.Column('password', sa.Text(), nullable=False, server_default=''),
        sa.Column('ignore_http_cache', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('fetch_via_proxy', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('user_id', 'feed_url', name='uq_feeds_user_feed_url'),
    )
    op.create_index('ix_feeds_user_id', 'feeds', ['user_id'])
    op.create_index('ix_feeds_category_id', 'feeds', ['category_id'])

    op.create_table(
        'icons',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('hash', sa.String(255), nullable=False, unique=True),
        sa.Column('mime_type', sa.String(255), nullable=False),
        sa.Column('content', sa.LargeBinary(), nullable=False),
    )

    op.create_table(
        'feed_icons',
        sa.Column('feed_id', sa.BigInteger(), sa.ForeignKey('feeds.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('icon_id', sa.BigInteger(), sa.ForeignKey('icons.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'entries',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('feed_id', sa.BigInteger(), sa.ForeignKey('feeds.id', ondelete='CASCADE'), nullable=False),
        sa.Column('hash', sa.String(255), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('title', sa.Text(), nullable=False, server_default=''),
        sa.Column('url', sa.Text(), nullable=False, server_default=''),
        sa.Column('comments_url', sa.Text(), nullable=False, server_default=''),
        sa.Column('author', sa.Text(), nullable=False, server_default=''),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('reading_time', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', entry_status, nullable=False, server_default='unread'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('changed_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('feed_id', 'hash', name='uq_entries_feed_hash'),
    )
    op.create_index('ix_entries_user_status', 'entries', ['user_id', 'status'])
    op.create_index('ix_entries_feed_published_at', 'entries', ['feed_id', 'published_at'])


def downgrade() -> None:
    op.drop_index('ix_entries_feed_published_at', table_name='entries')
    op.drop_index('ix_entries_user_status', table_name='entries')
    op.drop_table('entries')
    entry_status.drop(op.get_bind(), checkfirst=True)
    op.drop_table('feed_icons')
    op.drop_table('icons')
    op.drop_index('ix_feeds_category_id', table_name='feeds')
    op.drop_index('ix_feeds_user_id', table_name='feeds')
    op.drop_table('feeds')
    op.drop_index('ix_categories_user_id', table_name='categories')
    op.drop_table('categories')
    op.drop_table('users')
