"""Create roles, branches, admins and invitation_codes tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 10:12:31.408211

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema by creating the admin onboarding tables.

    Uniqueness of student ID, email and invitation code lives in the
    database, where it holds even for concurrent onboarding requests.
    """
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False, unique=True),
        sa.Column('access_level', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_roles_id', 'roles', ['id'])

    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
    )
    op.create_index('ix_branches_id', 'branches', ['id'])

    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.String(length=20), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=60), nullable=False),
        sa.Column('phone', sa.String(length=16), nullable=False),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=True),
        sa.Column('graduation_year', sa.Integer(), nullable=False),
        sa.Column('invitation_code', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('student_id', name='uq_admins_student_id'),
        sa.UniqueConstraint('email', name='uq_admins_email'),
    )
    op.create_index('ix_admins_id', 'admins', ['id'])
    op.create_index('ix_admins_student_id', 'admins', ['student_id'])
    op.create_index('ix_admins_email', 'admins', ['email'])

    op.create_table(
        'invitation_codes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_used', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('used_by_admin_id', sa.Integer(), sa.ForeignKey('admins.id'), nullable=True, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_invitation_codes_id', 'invitation_codes', ['id'])
    op.create_index('ix_invitation_codes_code', 'invitation_codes', ['code'], unique=True)


def downgrade() -> None:
    """Downgrade schema by dropping the admin onboarding tables."""
    op.drop_table('invitation_codes')
    op.drop_table('admins')
    op.drop_table('branches')
    op.drop_table('roles')
