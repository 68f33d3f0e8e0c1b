"""create users, credentials and devices

Revision ID: 7f3b2c1d9a10
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3b2c1d9a10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('activated', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_table(
        'user_credentials',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=254), nullable=True),
        sa.Column(
            'provider',
            sa.Enum('LOCAL', 'GOOGLE', 'FACEBOOK', name='auth_provider', native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_user_credentials_user_id_users', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_user_credentials'),
        sa.UniqueConstraint('email', 'provider', name='uq_user_credentials_email_provider'),
    )
    op.create_index('ix_user_credentials_email', 'user_credentials', ['email'])
    op.create_index('ix_user_credentials_user_id', 'user_credentials', ['user_id'])
    op.create_table(
        'devices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('credentials_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('signature', sa.String(length=255), server_default='', nullable=False),
        sa.Column('access_token', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_devices_user_id_users', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['credentials_id'], ['user_credentials.id'],
            name='fk_devices_credentials_id_user_credentials', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_devices'),
        sa.UniqueConstraint('user_id', 'name', name='uq_devices_user_id_name'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_devices_user_id', 'devices', ['user_id'])


def downgrade():
    op.drop_index('ix_devices_user_id', table_name='devices')
    op.drop_table('devices')
    op.drop_index('ix_user_credentials_user_id', table_name='user_credentials')
    op.drop_index('ix_user_credentials_email', table_name='user_credentials')
    op.drop_table('user_credentials')
    op.drop_table('users')
