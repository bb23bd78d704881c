"""Initial tables - v1.0

Revision ID: 001_initial_tables
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the progression engine tables."""

    # ===== 1. COMPANIES =====
    op.create_table(
        'companies',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('current_program_key', sa.String(50), nullable=False),
        sa.Column('hub_id', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_companies_current_program_key', 'companies', ['current_program_key'])

    # ===== 2. PROGRAMS =====
    op.create_table(
        'programs',
        sa.Column('key', sa.String(50), primary_key=True),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('stage_order', sa.Integer(), nullable=False),
        sa.Column('config', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ===== 3. EVALUATION TEMPLATES =====
    op.create_table(
        'evaluation_templates',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('total_weight', sa.Float(), nullable=False),
        sa.Column('criteria', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ===== 4. EVALUATIONS =====
    op.create_table(
        'evaluations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('company_id', sa.String(36), nullable=False),
        sa.Column('mentor_id', sa.String(36), nullable=False),
        sa.Column('program_key', sa.String(50), nullable=False),
        sa.Column('mode', sa.String(20), nullable=False),
        sa.Column('mercado_score', sa.Float(), nullable=True),
        sa.Column('perfil_empreendedor_score', sa.Float(), nullable=True),
        sa.Column('tecnologia_qualidade_score', sa.Float(), nullable=True),
        sa.Column('gestao_score', sa.Float(), nullable=True),
        sa.Column('financeiro_score', sa.Float(), nullable=True),
        sa.Column('template_id', sa.String(36), nullable=True),
        sa.Column('criteria_scores', sa.JSON(), nullable=True),
        sa.Column('weighted_score', sa.Float(), nullable=False),
        sa.Column('gate_value', sa.String(30), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('evaluation_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_valid', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_evaluations_mentor_id', 'evaluations', ['mentor_id'])
    op.create_index(
        'ix_evaluations_company_program_valid',
        'evaluations',
        ['company_id', 'program_key', 'is_valid'],
    )

    # ===== 5. DELIVERABLES =====
    op.create_table(
        'deliverables',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('company_id', sa.String(36), nullable=False),
        sa.Column('program_key', sa.String(50), nullable=False),
        sa.Column('deliverable_key', sa.String(100), nullable=False),
        sa.Column('deliverable_label', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('approval_required', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('company_id', 'program_key', 'deliverable_key'),
    )
    op.create_index('ix_deliverables_company_id', 'deliverables', ['company_id'])

    # ===== 6. PARTNERSHIPS =====
    op.create_table(
        'mentor_company_partnerships',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('mentor_id', sa.String(36), nullable=False),
        sa.Column('company_id', sa.String(36), nullable=False),
        sa.Column('partnership_type', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_mentor_company_partnerships_mentor_id', 'mentor_company_partnerships', ['mentor_id'])
    op.create_index('ix_mentor_company_partnerships_company_id', 'mentor_company_partnerships', ['company_id'])

    # ===== 7. CONFLICT AUDIT LOGS (append-only) =====
    op.create_table(
        'conflict_audit_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('mentor_id', sa.String(36), nullable=False),
        sa.Column('company_id', sa.String(36), nullable=False),
        sa.Column('action_type', sa.String(30), nullable=False),
        sa.Column('severity', sa.String(20), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_conflict_audit_logs_mentor_id', 'conflict_audit_logs', ['mentor_id'])
    op.create_index('ix_conflict_audit_logs_company_id', 'conflict_audit_logs', ['company_id'])

    # ===== 8. CONFLICT NOTIFICATIONS (append-only) =====
    op.create_table(
        'conflict_notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('notification_type', sa.String(30), nullable=False),
        sa.Column('mentor_id', sa.String(36), nullable=False),
        sa.Column('company_id', sa.String(36), nullable=False),
        sa.Column('severity', sa.String(20), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('action_required', sa.Boolean(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ===== 9. PROGRESSION EVENTS =====
    op.create_table(
        'progression_events',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('company_id', sa.String(36), nullable=False),
        sa.Column('from_stage', sa.String(50), nullable=False),
        sa.Column('to_stage', sa.String(50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_progression_events_company_id', 'progression_events', ['company_id'])


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_table('progression_events')
    op.drop_table('conflict_notifications')
    op.drop_table('conflict_audit_logs')
    op.drop_table('mentor_company_partnerships')
    op.drop_table('deliverables')
    op.drop_table('evaluations')
    op.drop_table('evaluation_templates')
    op.drop_table('programs')
    op.drop_table('companies')
