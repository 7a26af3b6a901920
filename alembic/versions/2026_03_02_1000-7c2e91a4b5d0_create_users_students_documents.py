"""create_users_students_documents

Revision ID: 7c2e91a4b5d0
Revises:
Create Date: 2026-03-02 10:00:12.418305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c2e91a4b5d0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('user_id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), server_default='user', nullable=False),
        sa.Column('avatar_storage_kind', sa.String(length=10), nullable=True),
        sa.Column('avatar_storage_key', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('user_id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('students',
        sa.Column('student_id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('student_id')
    )
    op.create_index('ix_students_user_id', 'students', ['user_id'], unique=True)

    op.create_table('documents',
        sa.Column('document_id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('storage_kind', sa.String(length=10), nullable=False),
        sa.Column('storage_key', sa.String(length=1024), nullable=False),
        sa.Column('media_kind', sa.String(length=100), nullable=False),
        sa.Column('content_type', sa.String(length=100), nullable=True),
        sa.Column('file_size_kb', sa.Integer(), nullable=True),
        sa.Column('owner_id', sa.BigInteger(), nullable=False),
        sa.Column('uploaded_by', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['students.student_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['uploaded_by'], ['users.user_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('document_id'),
        sa.UniqueConstraint('storage_kind', 'storage_key', name='uq_documents_storage')
    )
    op.create_index('ix_documents_owner_id', 'documents', ['owner_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_documents_owner_id', table_name='documents')
    op.drop_table('documents')
    op.drop_index('ix_students_user_id', table_name='students')
    op.drop_table('students')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
