"""Create users, subscriptions, notifications, announcements and site_settings

Revision ID: a1c3e5f7b9d1
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a1c3e5f7b9d1'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('user', 'admin', name='user_role')
subscription_plan = sa.Enum('basic', 'advanced', 'pro', 'admin-granted', name='subscription_plan')
subscription_status = sa.Enum(
    'initiated', 'pending_manual_verification', 'active', 'cancelled', 'expired', 'failed',
    name='subscription_status',
)
payment_method = sa.Enum('UPI', 'ADMIN', name='payment_method')
notification_type = sa.Enum(
    'success', 'error', 'warning', 'info', 'system', 'guide_update', 'announcement',
    'subscription', 'account_verification',
    name='notification_type',
)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_premium', sa.Boolean(), nullable=False),
        sa.Column('subscription_id', sa.Uuid(), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        sa.Column('email_verification_token', sa.String(64), nullable=True),
        sa.Column('email_verification_expires', sa.DateTime(), nullable=True),
        sa.Column('last_verification_email_sent', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_email_verification_token', 'users', ['email_verification_token'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('plan', subscription_plan, nullable=False),
        sa.Column('status', subscription_status, nullable=False),
        sa.Column('payment_method', payment_method, nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('reference_code', sa.String(255), nullable=True),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('last_payment_date', sa.DateTime(), nullable=True),
        sa.Column('screenshot_url', sa.String(512), nullable=True),
        sa.Column('screenshot_key', sa.String(512), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('verified_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_subscriptions_id', 'subscriptions', ['id'])
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'])
    op.create_index('ix_subscriptions_status', 'subscriptions', ['status'])
    op.create_index('ix_subscriptions_reference_code', 'subscriptions', ['reference_code'], unique=True)
    op.create_index('ix_subscriptions_transaction_id', 'subscriptions', ['transaction_id'])
    op.create_index('ix_subscriptions_created_at', 'subscriptions', ['created_at'])

    op.create_foreign_key(
        'fk_users_subscription_id', 'users', 'subscriptions',
        ['subscription_id'], ['id'], ondelete='SET NULL',
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('link', sa.String(512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_read', 'notifications', ['read'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    op.create_table(
        'announcements',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('link', sa.String(512), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_announcements_id', 'announcements', ['id'])
    op.create_index('ix_announcements_is_active', 'announcements', ['is_active'])
    op.create_index('ix_announcements_created_at', 'announcements', ['created_at'])

    op.create_table(
        'site_settings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('updated_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_site_settings_id', 'site_settings', ['id'])
    op.create_index('ix_site_settings_name', 'site_settings', ['name'], unique=True)
    op.create_index('ix_site_settings_created_at', 'site_settings', ['created_at'])


def downgrade() -> None:
    op.drop_table('site_settings')
    op.drop_table('announcements')
    op.drop_table('notifications')
    op.drop_constraint('fk_users_subscription_id', 'users', type_='foreignkey')
    op.drop_table('subscriptions')
    op.drop_table('users')
    for enum in (notification_type, payment_method, subscription_status, subscription_plan, user_role):
        enum.drop(op.get_bind(), checkfirst=True)
