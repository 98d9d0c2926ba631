"""create_compliance_tables

Revision ID: 3f9c2a7d1b40
Revises:
Create Date: 2026-01-28 12:00:37.101982

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('organisations',
        sa.Column('organisation_id', sa.String(length=36), nullable=False),
        sa.Column('legal_name', sa.String(length=255), nullable=False),
        sa.Column('trading_name', sa.String(length=255), nullable=True),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('organisation_id')
    )
    op.create_table('roles',
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('role_id'),
        sa.UniqueConstraint('code')
    )
    op.create_table('users',
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('organisation_id', sa.String(length=36), nullable=True,
                  comment='Home organisation; null for platform-level users'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.role_id']),
        sa.ForeignKeyConstraint(['organisation_id'], ['organisations.organisation_id'],
                                ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('user_id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_users_organisation_id', 'users', ['organisation_id'], unique=False)

    op.create_table('employees',
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('organisation_id', sa.String(length=36), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['organisation_id'], ['organisations.organisation_id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('employee_id'),
        sa.UniqueConstraint('organisation_id', 'email', name='uq_employee_org_email')
    )
    op.create_index('ix_employees_organisation_id', 'employees', ['organisation_id'], unique=False)

    op.create_table('employee_certifications',
        sa.Column('certification_id', sa.String(length=36), nullable=False),
        sa.Column('organisation_id', sa.String(length=36), nullable=False),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('document_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('valid', 'compliant', 'expiring', 'expired', 'pending', 'rejected')",
            name='check_certification_status_valid'
        ),
        sa.ForeignKeyConstraint(['organisation_id'], ['organisations.organisation_id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.employee_id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('certification_id')
    )
    op.create_index('ix_employee_certifications_employee_id', 'employee_certifications',
                    ['employee_id'], unique=False)

    op.create_table('compliance_overrides',
        sa.Column('override_id', sa.String(length=36), nullable=False),
        sa.Column('organisation_id', sa.String(length=36), nullable=False),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('override_by_user_id', sa.String(length=36), nullable=False),
        sa.Column('override_by_name', sa.String(length=255), nullable=False),
        sa.Column('override_by_email', sa.String(length=255), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('blocked_certifications', sa.JSON(), nullable=False,
                  comment='Blocking reasons outstanding when the override was granted'),
        sa.Column('context_type', sa.String(length=20), nullable=False),
        sa.Column('context_id', sa.String(length=36), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(), nullable=True),
        sa.Column('revoked_by_user_id', sa.String(length=36), nullable=True),
        sa.CheckConstraint(
            "context_type IN ('shift', 'client', 'service', 'general')",
            name='check_override_context_type_valid'
        ),
        sa.ForeignKeyConstraint(['organisation_id'], ['organisations.organisation_id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.employee_id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['override_by_user_id'], ['users.user_id']),
        sa.ForeignKeyConstraint(['revoked_by_user_id'], ['users.user_id']),
        sa.PrimaryKeyConstraint('override_id')
    )
    op.create_index('ix_compliance_overrides_employee_active', 'compliance_overrides',
                    ['employee_id', 'is_active'], unique=False)
    op.create_index('ix_compliance_overrides_expires_at', 'compliance_overrides',
                    ['expires_at'], unique=False)

    op.create_table('audit_logs',
        sa.Column('log_id', sa.Integer(), nullable=False),
        sa.Column('organisation_id', sa.String(length=36), nullable=True),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.String(length=36), nullable=False),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('changes', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id']),
        sa.PrimaryKeyConstraint('log_id')
    )
    op.create_index('ix_audit_logs_log_id', 'audit_logs', ['log_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_audit_logs_log_id', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('ix_compliance_overrides_expires_at', table_name='compliance_overrides')
    op.drop_index('ix_compliance_overrides_employee_active', table_name='compliance_overrides')
    op.drop_table('compliance_overrides')
    op.drop_index('ix_employee_certifications_employee_id', table_name='employee_certifications')
    op.drop_table('employee_certifications')
    op.drop_index('ix_employees_organisation_id', table_name='employees')
    op.drop_table('employees')
    op.drop_index('ix_users_organisation_id', table_name='users')
    op.drop_table('users')
    op.drop_table('roles')
    op.drop_table('organisations')
