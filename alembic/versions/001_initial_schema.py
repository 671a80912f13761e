"""Initial schema: recommendations and processing logs

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table('recommendations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('original_message_id', sa.String(length=64), nullable=False),
        sa.Column('original_channel_id', sa.String(length=64), nullable=False),
        sa.Column('original_content', sa.Text(), nullable=False, server_default=''),
        sa.Column('recommender_id', sa.String(length=64), nullable=False),
        sa.Column('recommender_name', sa.String(length=200), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('content_type', sa.String(length=20), nullable=True),
        sa.Column('topics', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('duration', sa.String(length=100), nullable=True),
        sa.Column('quality_score', sa.Integer(), nullable=True),
        sa.Column('sentiment', sa.String(length=20), nullable=True),
        sa.Column('ai_summary', sa.Text(), nullable=True),
        sa.Column('tldr', sa.Text(), nullable=True),
        sa.Column('key_takeaways', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('main_ideas', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('thumbnail', sa.String(length=2048), nullable=True),
        sa.Column('library_type', sa.String(length=20), nullable=True),
        sa.Column('primary_tag', sa.String(length=100), nullable=True),
        sa.Column('secondary_tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('forum_post_id', sa.String(length=64), nullable=True),
        sa.Column('forum_thread_id', sa.String(length=64), nullable=True),
        sa.Column('processed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('processing_error', sa.Text(), nullable=True),
        sa.Column('processing_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('original_message_id'),
        sa.UniqueConstraint('forum_post_id'),
        sa.UniqueConstraint('forum_thread_id')
    )

    op.create_index(op.f('ix_recommendations_url'), 'recommendations', ['url'], unique=False)
    op.create_index(op.f('ix_recommendations_content_type'), 'recommendations', ['content_type'], unique=False)
    op.create_index(op.f('ix_recommendations_library_type'), 'recommendations', ['library_type'], unique=False)
    op.create_index(op.f('ix_recommendations_processed'), 'recommendations', ['processed'], unique=False)
    op.create_index('idx_recommendations_processed_attempts', 'recommendations', ['processed', 'processing_attempts'], unique=False)
    op.create_index('idx_recommendations_library_content_type', 'recommendations', ['library_type', 'content_type'], unique=False)
    op.create_index('idx_recommendations_processed_at', 'recommendations', ['processed_at'], unique=False)

    op.create_table('processing_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recommendation_id', sa.Integer(), nullable=False),
        sa.Column('operation', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['recommendation_id'], ['recommendations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_processing_logs_recommendation_id'), 'processing_logs', ['recommendation_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_processing_logs_recommendation_id'), table_name='processing_logs')
    op.drop_table('processing_logs')

    op.drop_index('idx_recommendations_processed_at', table_name='recommendations')
    op.drop_index('idx_recommendations_library_content_type', table_name='recommendations')
    op.drop_index('idx_recommendations_processed_attempts', table_name='recommendations')
    op.drop_index(op.f('ix_recommendations_processed'), table_name='recommendations')
    op.drop_index(op.f('ix_recommendations_library_type'), table_name='recommendations')
    op.drop_index(op.f('ix_recommendations_content_type'), table_name='recommendations')
    op.drop_index(op.f('ix_recommendations_url'), table_name='recommendations')
    op.drop_table('recommendations')
