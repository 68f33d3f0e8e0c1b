"""add security code to user credentials

Revision ID: b41e6d2a8c55
Revises: 7f3b2c1d9a10
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = 'b41e6d2a8c55'
down_revision = '7f3b2c1d9a10'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('user_credentials') as batch_op:
        batch_op.add_column(sa.Column('security_code_hash', sa.String(length=64), nullable=True))
        batch_op.add_column(
            sa.Column('security_code_expires_at', sa.DateTime(timezone=True), nullable=True)
        )
        batch_op.add_column(
            sa.Column('security_code_window_start', sa.DateTime(timezone=True), nullable=True)
        )
        batch_op.add_column(
            sa.Column('security_code_requests', sa.Integer(), server_default='0', nullable=False)
        )


def downgrade():
    with op.batch_alter_table('user_credentials') as batch_op:
        batch_op.drop_column('security_code_requests')
        batch_op.drop_column('security_code_window_start')
        batch_op.drop_column('security_code_expires_at')
        batch_op.drop_column('security_code_hash')
