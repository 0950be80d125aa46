"""create quiz_result table

Revision ID: 3a7c91d0b2f4
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c91d0b2f4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    # create_all() at startup may already have built the table
    if 'quiz_result' in set(insp.get_table_names()):
        return
    op.create_table(
        'quiz_result',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('player_name', sa.String(length=20), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('correct_answers', sa.Integer(), nullable=False),
        sa.Column('total_questions', sa.Integer(), nullable=False),
        sa.Column('time_taken', sa.Integer(), nullable=False),
        sa.Column('answers', sa.Text(), nullable=False),
        sa.Column('completion_time', sa.DateTime(), nullable=False),
        sa.Column('source_address', sa.String(length=64), nullable=True),
    )
    op.create_index('ix_quiz_result_completion_time', 'quiz_result', ['completion_time'])
    op.create_index('ix_quiz_result_score_completion', 'quiz_result', ['score', 'completion_time'])


def downgrade():
    op.drop_index('ix_quiz_result_score_completion', table_name='quiz_result')
    op.drop_index('ix_quiz_result_completion_time', table_name='quiz_result')
    op.drop_table('quiz_result')
