"""create gateway schema with admin config, user keys, usages and providers

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2026-10-19 09:12:41.318204+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create admin_config table
    op.create_table(
        'admin_config',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('singleton', sa.Integer(), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment='Bcrypt hash of the admin password'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('singleton')
    )
    op.create_index(op.f('ix_admin_config_id'), 'admin_config', ['id'], unique=False)

    # Create user_keys table
    op.create_table(
        'user_keys',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False, comment='Human readable owner name'),
        sa.Column('key_id', sa.String(length=64), nullable=False, comment='SHA-256 lookup hash of the key'),
        sa.Column('key', sa.String(length=255), nullable=False, comment='Bcrypt hash of the key'),
        sa.Column('plain_key', sa.String(length=255), nullable=True, comment='Recoverable key, only for admin-supplied keys'),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True, comment='Timestamp of last generation'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_keys_id'), 'user_keys', ['id'], unique=False)
    op.create_index(op.f('ix_user_keys_key_id'), 'user_keys', ['key_id'], unique=True)
    op.create_index('idx_user_key_active', 'user_keys', ['is_active'], unique=False)

    # Create user_usages table
    op.create_table(
        'user_usages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('model_name', sa.String(length=200), nullable=False),
        sa.Column('count', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user_keys.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'model_name', name='uq_user_usage_user_model')
    )
    op.create_index(op.f('ix_user_usages_id'), 'user_usages', ['id'], unique=False)
    op.create_index(op.f('ix_user_usages_user_id'), 'user_usages', ['user_id'], unique=False)

    # Create api_providers table
    op.create_table(
        'api_providers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, comment='Routing key exposed to users as modelKey'),
        sa.Column('display_name', sa.String(length=200), nullable=False),
        sa.Column('model_id', sa.String(length=200), nullable=False, comment='Upstream model identifier'),
        sa.Column('base_url', sa.String(length=500), nullable=False),
        sa.Column('api_key', sa.String(length=500), nullable=False, comment='Upstream API key (only ever shown masked to users)'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_api_providers_id'), 'api_providers', ['id'], unique=False)
    op.create_index(op.f('ix_api_providers_name'), 'api_providers', ['name'], unique=False)
    op.create_index('idx_api_provider_active_name', 'api_providers', ['is_active', 'name'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_api_provider_active_name', table_name='api_providers')
    op.drop_index(op.f('ix_api_providers_name'), table_name='api_providers')
    op.drop_index(op.f('ix_api_providers_id'), table_name='api_providers')
    op.drop_table('api_providers')

    op.drop_index(op.f('ix_user_usages_user_id'), table_name='user_usages')
    op.drop_index(op.f('ix_user_usages_id'), table_name='user_usages')
    op.drop_table('user_usages')

    op.drop_index('idx_user_key_active', table_name='user_keys')
    op.drop_index(op.f('ix_user_keys_key_id'), table_name='user_keys')
    op.drop_index(op.f('ix_user_keys_id'), table_name='user_keys')
    op.drop_table('user_keys')

    op.drop_index(op.f('ix_admin_config_id'), table_name='admin_config')
    op.drop_table('admin_config')
