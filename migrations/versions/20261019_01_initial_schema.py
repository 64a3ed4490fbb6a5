"""initial simulation schema

Revision ID: initial_schema_20261019
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'initial_schema_20261019'
down_revision = None
branch_labels = None
depends_on = None

UUID = postgresql.UUID(as_uuid=True)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'game_sessions',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('max_rounds', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        # FK to rounds is added once that table exists
        sa.Column('current_round_id', UUID, nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'rounds',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('game_session_id', UUID, sa.ForeignKey('game_sessions.id'), nullable=False),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('type', sa.Enum('individual', 'group', 'mix', name='roundtype'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('time_limit', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('game_session_id', 'round_number', name='uq_rounds_session_number'),
    )
    op.create_index('ix_rounds_game_session_id', 'rounds', ['game_session_id'])
    op.create_foreign_key(
        'fk_game_sessions_current_round_id',
        'game_sessions',
        'rounds',
        ['current_round_id'],
        ['id'],
        ondelete='SET NULL',
    )

    op.create_table(
        'teams',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('game_session_id', UUID, sa.ForeignKey('game_sessions.id', ondelete='SET NULL'), nullable=True),
        sa.Column('total_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'users',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', sa.Enum('admin', 'student', name='role'), nullable=False),
        sa.Column('team_id', UUID, sa.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_group_leader', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('individual_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_team_id', 'users', ['team_id'])

    op.create_table(
        'case_files',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('filename', sa.String(), nullable=False),
        sa.Column('original_name', sa.String(), nullable=False),
        sa.Column('filepath', sa.String(), nullable=False),
        sa.Column('filesize', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('mime_type', sa.String(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('uploaded_by', UUID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'question_categories',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=16), nullable=False, server_default='#3B82F6'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'question_tags',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=16), nullable=False, server_default='#10B981'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )

    op.create_table(
        'questions',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('round_id', UUID, sa.ForeignKey('rounds.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('case_file_url', sa.String(), nullable=True),
        sa.Column('case_file_id', UUID, sa.ForeignKey('case_files.id', ondelete='SET NULL'), nullable=True),
        sa.Column('category_id', UUID, sa.ForeignKey('question_categories.id'), nullable=True),
        sa.Column(
            'question_type',
            sa.Enum('multiple_choice', 'multi_select', name='questiontype'),
            nullable=False,
        ),
        sa.Column('min_reasoning_words', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_questions_round_id', 'questions', ['round_id'])

    op.create_table(
        'question_options',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('question_id', UUID, sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_correct', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_question_options_question_id', 'question_options', ['question_id'])

    op.create_table(
        'question_tag_links',
        sa.Column('question_id', UUID, sa.ForeignKey('questions.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', UUID, sa.ForeignKey('question_tags.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'submissions',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('user_id', UUID, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('question_id', UUID, sa.ForeignKey('questions.id'), nullable=False),
        sa.Column('round_id', UUID, sa.ForeignKey('rounds.id'), nullable=False),
        sa.Column('team_id', UUID, sa.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True),
        sa.Column('selected_options', sa.JSON(), nullable=False),
        sa.Column('reasoning', sa.Text(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_group_submission', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_individual_phase', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_submissions_user_id', 'submissions', ['user_id'])
    op.create_index('ix_submissions_question_id', 'submissions', ['question_id'])
    op.create_index('ix_submissions_round_id', 'submissions', ['round_id'])
    op.create_index('ix_submissions_submitted_at', 'submissions', ['submitted_at'])

    op.create_table(
        'bulk_operations',
        sa.Column('id', UUID, primary_key=True),
        sa.Column(
            'type',
            sa.Enum('import_users', 'export_users', name='bulkoperationtype'),
            nullable=False,
        ),
        sa.Column(
            'status',
            sa.Enum('pending', 'processing', 'completed', 'failed', name='bulkoperationstatus'),
            nullable=False,
        ),
        sa.Column('total_items', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('processed_items', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('failed_items', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('filename', sa.String(length=255), nullable=True),
        sa.Column('initiated_by', UUID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('result_data', sa.JSON(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('bulk_operations')
    op.drop_table('submissions')
    op.drop_table('question_tag_links')
    op.drop_table('question_options')
    op.drop_table('questions')
    op.drop_table('question_tags')
    op.drop_table('question_categories')
    op.drop_table('case_files')
    op.drop_table('users')
    op.drop_table('teams')
    op.drop_constraint('fk_game_sessions_current_round_id', 'game_sessions', type_='foreignkey')
    op.drop_table('rounds')
    op.drop_table('game_sessions')
    for enum_name in ('bulkoperationstatus', 'bulkoperationtype', 'questiontype', 'role', 'roundtype'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
