# alembic/versions/0001_initial.py
# initial tables; mirrors app/db/models.py
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admins_username', 'admins', ['username'], unique=True)

    op.create_table('cars',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price_per_day', sa.Numeric(10, 2), nullable=False),
        sa.Column('image_urls', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_cars_created_at', 'cars', ['created_at'])

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('car_id', sa.Integer(), sa.ForeignKey('cars.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('contact', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('total_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('source', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_bookings_car_id', 'bookings', ['car_id'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_index('ix_bookings_created_at', 'bookings', ['created_at'])

    op.create_table('unavailable_dates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('car_id', sa.Integer(), sa.ForeignKey('cars.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(length=50), nullable=False),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id', ondelete='SET NULL'), nullable=True),
        sa.UniqueConstraint('car_id', 'date', name='uq_unavailable_dates_car_date'),
    )
    op.create_index('ix_unavailable_dates_car_id', 'unavailable_dates', ['car_id'])
    op.create_index('ix_unavailable_dates_booking_id', 'unavailable_dates', ['booking_id'])

    op.create_table('admin_refresh_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('admin_id', sa.Integer(), sa.ForeignKey('admins.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('revoked', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_admin_refresh_tokens_admin_id', 'admin_refresh_tokens', ['admin_id'])


def downgrade():
    op.drop_table('admin_refresh_tokens')
    op.drop_table('unavailable_dates')
    op.drop_table('bookings')
    op.drop_table('cars')
    op.drop_table('admins')
