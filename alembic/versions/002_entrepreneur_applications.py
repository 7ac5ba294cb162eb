"""entrepreneur_applications

Revision ID: 002_entrepreneur_applications
Revises: 001_initial_schema
Create Date: 2026-10-19 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_entrepreneur_applications'
down_revision = '001_initial_schema'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'entrepreneur_applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('department', sa.String(255), nullable=False),
        sa.Column('year', sa.String(50), nullable=False),
        sa.Column('idea_title', sa.String(255), nullable=False),
        sa.Column('idea_summary', sa.Text(), nullable=False),
        sa.Column('problem_solution', sa.Text(), nullable=False),
        sa.Column('validation', sa.Text(), nullable=False),
        sa.Column('expected_support', sa.Text(), nullable=False),
        sa.Column('prior_experience', sa.Text(), nullable=False),
        sa.Column('availability_hours', sa.String(100), nullable=False),
        sa.Column('why_join', sa.Text(), nullable=False),
        sa.Column('has_prototype', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('prototype_details', sa.Text(), nullable=True),
        sa.Column('portfolio_url', sa.String(500), nullable=False),
        sa.Column('resume_url', sa.String(500), nullable=False),
        sa.Column('pitch_deck_url', sa.String(500), nullable=False),
        sa.Column('prototype_url', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='registered'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_entrepreneur_applications_email', 'entrepreneur_applications', ['email'])


def downgrade() -> None:
    op.drop_index('ix_entrepreneur_applications_email', table_name='entrepreneur_applications')
    op.drop_table('entrepreneur_applications')
