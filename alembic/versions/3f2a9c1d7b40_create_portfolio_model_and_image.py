"""create portfolio_model and image

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2a9c1d7b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'portfolio_model',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('height', sa.String(length=50), nullable=True),
        sa.Column('bust', sa.String(length=50), nullable=True),
        sa.Column('waist', sa.String(length=50), nullable=True),
        sa.Column('hips', sa.String(length=50), nullable=True),
        sa.Column('shoe_size', sa.String(length=50), nullable=True),
        sa.Column('hair_color', sa.String(length=50), nullable=True),
        sa.Column('eye_color', sa.String(length=50), nullable=True),
        sa.Column('instagram', sa.String(length=200), nullable=True),
        sa.Column('display_order', sa.Integer(), server_default='0', nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )
    op.create_index('ix_portfolio_model_id', 'portfolio_model', ['id'])
    op.create_index('idx_portfolio_model_display_order', 'portfolio_model', ['display_order'])

    # Unique (model_id, position) stays immediate; reorders park rows on
    # negative placeholders before writing final positions.
    op.create_table(
        'image',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('model_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('payload_ref', sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(['model_id'], ['portfolio_model.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('model_id', 'position', name='uq_image_model_position'),
    )
    op.create_index('ix_image_id', 'image', ['id'])
    op.create_index('ix_image_model_id', 'image', ['model_id'])


def downgrade() -> None:
    op.drop_index('ix_image_model_id', table_name='image')
    op.drop_index('ix_image_id', table_name='image')
    op.drop_table('image')
    op.drop_index('idx_portfolio_model_display_order', table_name='portfolio_model')
    op.drop_index('ix_portfolio_model_id', table_name='portfolio_model')
    op.drop_table('portfolio_model')
