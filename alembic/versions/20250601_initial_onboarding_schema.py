"""Initial onboarding and skill assessment schema

Revision ID: 20250601_initial_onboarding_schema
Revises:
Create Date: 2025-06-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20250601_initial_onboarding_schema'
down_revision = None
branch_labels = None
depends_on = None

assistant_gender = sa.Enum('feminine', 'masculine', 'androgynous', name='assistantgender')
assistant_persona = sa.Enum('calm', 'kind', 'direct', name='assistantpersona')
skill_level = sa.Enum('beginner', 'intermediate', 'advanced', name='skilllevel')


def upgrade() -> None:
    op.create_table(
        'assistants',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('gender', assistant_gender, nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('tagline', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_assistants_id', 'assistants', ['id'])
    op.create_index('ix_assistants_slug', 'assistants', ['slug'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('clerk_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),

        # Assistant preferences and placement
        sa.Column('assistant_id', sa.String(length=25), nullable=True),
        sa.Column('assistant_persona', assistant_persona, nullable=True),
        sa.Column('skill_level', skill_level, nullable=True),

        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['assistant_id'], ['assistants.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_clerk_id', 'users', ['clerk_id'], unique=True)

    op.create_table(
        'onboarding_progress',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),
        sa.Column('current_step', sa.String(length=32), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_onboarding_progress_id', 'onboarding_progress', ['id'])
    op.create_index('ix_onboarding_progress_user_id', 'onboarding_progress', ['user_id'], unique=True)

    op.create_table(
        'quizzes',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('topic', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quizzes_id', 'quizzes', ['id'])
    op.create_index('ix_quizzes_topic', 'quizzes', ['topic'])

    op.create_table(
        'quiz_questions',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('quiz_id', sa.String(length=25), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quiz_questions_id', 'quiz_questions', ['id'])
    op.create_index('ix_quiz_questions_quiz_id', 'quiz_questions', ['quiz_id'])

    op.create_table(
        'quiz_options',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('question_id', sa.String(length=25), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['question_id'], ['quiz_questions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quiz_options_id', 'quiz_options', ['id'])
    op.create_index('ix_quiz_options_question_id', 'quiz_options', ['question_id'])

    op.create_table(
        'quiz_attempts',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),
        sa.Column('quiz_id', sa.String(length=25), nullable=False),
        sa.Column('attempt_number', sa.Integer(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quiz_attempts_id', 'quiz_attempts', ['id'])
    op.create_index('ix_quiz_attempts_user_id', 'quiz_attempts', ['user_id'])
    op.create_index('ix_quiz_attempts_quiz_id', 'quiz_attempts', ['quiz_id'])

    op.create_table(
        'quiz_attempt_answers',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('attempt_id', sa.String(length=25), nullable=False),
        sa.Column('question_id', sa.String(length=25), nullable=False),
        sa.Column('selected_option_id', sa.String(length=25), nullable=False),
        sa.ForeignKeyConstraint(['attempt_id'], ['quiz_attempts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quiz_attempt_answers_id', 'quiz_attempt_answers', ['id'])
    op.create_index('ix_quiz_attempt_answers_attempt_id', 'quiz_attempt_answers', ['attempt_id'])

    op.create_table(
        'activity_events',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('points_delta', sa.Integer(), nullable=False),
        sa.Column('quiz_id', sa.String(length=25), nullable=True),
        sa.Column('quiz_attempt_id', sa.String(length=25), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id']),
        sa.ForeignKeyConstraint(['quiz_attempt_id'], ['quiz_attempts.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activity_events_id', 'activity_events', ['id'])
    op.create_index('ix_activity_events_user_id', 'activity_events', ['user_id'])


def downgrade() -> None:
    op.drop_table('activity_events')
    op.drop_table('quiz_attempt_answers')
    op.drop_table('quiz_attempts')
    op.drop_table('quiz_options')
    op.drop_table('quiz_questions')
    op.drop_table('quizzes')
    op.drop_table('onboarding_progress')
    op.drop_table('users')
    op.drop_table('assistants')

    skill_level.drop(op.get_bind(), checkfirst=True)
    assistant_persona.drop(op.get_bind(), checkfirst=True)
    assistant_gender.drop(op.get_bind(), checkfirst=True)
