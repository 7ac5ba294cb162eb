"""initial_schema

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-09-14 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('student', 'junior_admin', 'admin', name='user_role')
stall_status = sa.Enum('pending', 'approved', 'rejected', name='stall_status')
certificate_type = sa.Enum('leader', 'member', 'participation', name='certificate_type')


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('role', user_role, nullable=False, server_default='student'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)

    op.create_table(
        'events',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('registration_open', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by', sa.String(36), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('start_date <= end_date', name='ck_events_date_range'),
    )

    op.create_table(
        'stalls',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_id', sa.String(36), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leader_id', sa.String(36), sa.ForeignKey('profiles.id'), nullable=False),
        sa.Column('members', sa.JSON(), nullable=False),
        sa.Column('status', stall_status, nullable=False, server_default='pending'),
        sa.Column('stall_number', sa.Integer(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=False),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('event_id', 'stall_number', name='uq_stalls_event_number'),
    )
    op.create_index('ix_stalls_event_id', 'stalls', ['event_id'])
    op.create_index('ix_stalls_leader_id', 'stalls', ['leader_id'])
    op.create_index('ix_stalls_status', 'stalls', ['status'])

    op.create_table(
        'certificates',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('type', certificate_type, nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id'), nullable=False),
        sa.Column('stall_id', sa.String(36), sa.ForeignKey('stalls.id', ondelete='SET NULL'), nullable=True),
        sa.Column('event_id', sa.String(36), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('certificate_url', sa.String(500), nullable=True),
        sa.Column('blockchain_hash', sa.String(255), nullable=True),
        sa.UniqueConstraint('stall_id', 'user_id', 'type', name='uq_certificates_stall_user_type'),
    )
    op.create_index('ix_certificates_user_id', 'certificates', ['user_id'])
    op.create_index('ix_certificates_stall_id', 'certificates', ['stall_id'])
    op.create_index('ix_certificates_event_id', 'certificates', ['event_id'])

    op.create_table(
        'forms',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('questions', sa.JSON(), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('admin_id', sa.String(36), sa.ForeignKey('profiles.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'form_responses',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('form_id', sa.String(36), sa.ForeignKey('forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('responses', sa.JSON(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_form_responses_form_id', 'form_responses', ['form_id'])

    op.create_table(
        'contact_submissions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'gallery',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('image_url', sa.String(500), nullable=False),
        sa.Column('caption', sa.Text(), nullable=True),
        sa.Column('event_id', sa.String(36), sa.ForeignKey('events.id', ondelete='SET NULL'), nullable=True),
        sa.Column('uploaded_by', sa.String(36), sa.ForeignKey('profiles.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('gallery')
    op.drop_table('contact_submissions')
    op.drop_index('ix_form_responses_form_id', table_name='form_responses')
    op.drop_table('form_responses')
    op.drop_table('forms')
    op.drop_index('ix_certificates_event_id', table_name='certificates')
    op.drop_index('ix_certificates_stall_id', table_name='certificates')
    op.drop_index('ix_certificates_user_id', table_name='certificates')
    op.drop_table('certificates')
    op.drop_index('ix_stalls_status', table_name='stalls')
    op.drop_index('ix_stalls_leader_id', table_name='stalls')
    op.drop_index('ix_stalls_event_id', table_name='stalls')
    op.drop_table('stalls')
    op.drop_table('events')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_table('profiles')

    bind = op.get_bind()
    certificate_type.drop(bind, checkfirst=True)
    stall_status.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)
