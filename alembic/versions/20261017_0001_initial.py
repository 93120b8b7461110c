"""initial okr schema

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

revision = '20261017_0001'
down_revision = None
branch_labels = None
depends_on = None

MEASURABLE_TYPES = ('increase_to', 'decrease_to', 'achieve_or_not', 'should_stay_above', 'should_stay_below')
UNITS = ('number', 'percentage', 'currency')


def upgrade():
    op.create_table(
        'cycles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', sa.Enum('planning', 'active', 'completed', name='cyclestatusenum'),
                  nullable=False, server_default='planning'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'objectives',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner', sa.String(), nullable=True),
        sa.Column('status', sa.Enum('not_started', 'in_progress', 'paused', 'canceled', name='objectivestatusenum'),
                  nullable=False, server_default='not_started'),
        sa.Column('cycle_id', sa.String(), sa.ForeignKey('cycles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('parent_id', sa.String(), sa.ForeignKey('objectives.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_objectives_cycle_id', 'objectives', ['cycle_id'])

    op.create_table(
        'key_results',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('objective_id', sa.String(), sa.ForeignKey('objectives.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('key_result_type', sa.Enum(*MEASURABLE_TYPES, name='measurabletype'),
                  nullable=False, server_default='increase_to'),
        sa.Column('base_value', sa.Float(), nullable=True),
        sa.Column('current_value', sa.Float(), nullable=True, server_default='0'),
        sa.Column('target_value', sa.Float(), nullable=False),
        sa.Column('unit', sa.Enum(*UNITS, name='unitenum'), nullable=False, server_default='number'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_key_results_objective_id', 'key_results', ['objective_id'])

    op.create_table(
        'check_ins',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('key_result_id', sa.String(), sa.ForeignKey('key_results.id', ondelete='CASCADE'), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_check_ins_kr_created', 'check_ins', ['key_result_id', 'created_at'])

    op.create_table(
        'initiatives',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('key_result_id', sa.String(), sa.ForeignKey('key_results.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('draft', 'in_progress', 'completed', 'canceled', name='initiativestatusenum'),
                  nullable=False, server_default='draft'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_initiatives_key_result_id', 'initiatives', ['key_result_id'])

    op.create_table(
        'success_metrics',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('initiative_id', sa.String(), sa.ForeignKey('initiatives.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', sa.Enum(*MEASURABLE_TYPES, name='measurabletype'),
                  nullable=False, server_default='increase_to'),
        sa.Column('base_value', sa.Float(), nullable=True),
        sa.Column('current_value', sa.Float(), nullable=True, server_default='0'),
        sa.Column('target_value', sa.Float(), nullable=False),
        sa.Column('unit', sa.Enum(*UNITS, name='unitenum'), nullable=False, server_default='number'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_success_metrics_initiative_id', 'success_metrics', ['initiative_id'])

    op.create_table(
        'success_metric_updates',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('metric_id', sa.String(), sa.ForeignKey('success_metrics.id', ondelete='CASCADE'), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_success_metric_updates_metric_id', 'success_metric_updates', ['metric_id'])


def downgrade():
    op.drop_index('ix_success_metric_updates_metric_id', table_name='success_metric_updates')
    op.drop_table('success_metric_updates')
    op.drop_index('ix_success_metrics_initiative_id', table_name='success_metrics')
    op.drop_table('success_metrics')
    op.drop_index('ix_initiatives_key_result_id', table_name='initiatives')
    op.drop_table('initiatives')
    op.drop_index('ix_check_ins_kr_created', table_name='check_ins')
    op.drop_table('check_ins')
    op.drop_index('ix_key_results_objective_id', table_name='key_results')
    op.drop_table('key_results')
    op.drop_index('ix_objectives_cycle_id', table_name='objectives')
    op.drop_table('objectives')
    op.drop_table('cycles')
