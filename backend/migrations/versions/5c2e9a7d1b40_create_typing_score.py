"""create typing_score table

Revision ID: 5c2e9a7d1b40
Revises:
Create Date: 2025-09-14 10:20:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7d1b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Tables created via `flask db-reset` already carry the schema
    if 'typing_score' in set(insp.get_table_names()):
        return

    op.create_table(
        'typing_score',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('level', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_typing_score_user_id', 'typing_score', ['user_id'])
    op.create_index('ix_typing_score_created_at', 'typing_score', ['created_at'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'typing_score' not in set(insp.get_table_names()):
        return
    op.drop_index('ix_typing_score_created_at', table_name='typing_score')
    op.drop_index('ix_typing_score_user_id', table_name='typing_score')
    op.drop_table('typing_score')
