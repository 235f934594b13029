"""create users, documents, ai_interactions and feedback tables

Revision ID: 3a9f1c2e7b10
Revises:
Create Date: 2025-01-14
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic
revision = '3a9f1c2e7b10'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('analyst', 'sme', 'manager', 'admin', name='userrole')
document_type = sa.Enum('regulation', 'contract', 'policy', 'control', 'disclosure', name='documenttype')
processing_status = sa.Enum('pending', 'processing', 'completed', 'failed', name='processingstatus')
feature_type = sa.Enum(
    'regulatory-qa', 'summarization', 'comparison', 'contract-review',
    'policy-drafting', 'control-design', 'alignment-gap',
    name='featuretype',
)
review_status = sa.Enum('pending', 'accurate', 'inaccurate', 'needs-review', name='reviewstatus')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'documents',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', document_type, nullable=False),
        sa.Column('jurisdiction', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('uploaded_by_id', sa.String(36), nullable=False),
        sa.Column('upload_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processing_status', processing_status, nullable=False),
        sa.Column('file_url', sa.String(), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('content_type', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['uploaded_by_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_documents_type'), 'documents', ['type'], unique=False)
    op.create_index(op.f('ix_documents_uploaded_by_id'), 'documents', ['uploaded_by_id'], unique=False)

    op.create_table(
        'ai_interactions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('feature_type', feature_type, nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('document_id', sa.String(36), nullable=True),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('context', sa.JSON(), nullable=False),
        sa.Column('response', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('review_status', review_status, nullable=False),
        sa.Column('reviewer_id', sa.String(36), nullable=True),
        sa.Column('reviewer_feedback', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('source_citations', sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['document_id'], ['documents.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ai_interactions_feature_type'), 'ai_interactions', ['feature_type'], unique=False)
    op.create_index(op.f('ix_ai_interactions_user_id'), 'ai_interactions', ['user_id'], unique=False)
    op.create_index(op.f('ix_ai_interactions_review_status'), 'ai_interactions', ['review_status'], unique=False)

    op.create_table(
        'feedback',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('interaction_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('improvement_suggestions', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['interaction_id'], ['ai_interactions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_feedback_interaction_id'), 'feedback', ['interaction_id'], unique=False)


def downgrade() -> None:
    op.drop_table('feedback')
    op.drop_table('ai_interactions')
    op.drop_table('documents')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (review_status, feature_type, processing_status, document_type, user_role):
        enum_type.drop(bind, checkfirst=True)
