from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'warehouses',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('address', sa.String(255), nullable=False)
    )
    op.create_table(
        'products',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('features', sa.JSON, nullable=False),
        sa.Column('weight', sa.Float, nullable=False, server_default='0'),
        sa.Column('barcode', sa.String(64), nullable=True)
    )
    op.create_table(
        'inventory',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('productid', sa.Integer, nullable=False, index=True),
        sa.Column('warehouseid', sa.Integer, nullable=False, index=True),
        sa.Column('quantity', sa.Integer, nullable=False, server_default='0'),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount', sa.Float, nullable=False, server_default='0'),
        sa.UniqueConstraint('productid', 'warehouseid', name='uq_inventory_product_warehouse'),
        sa.CheckConstraint('quantity >= 0', name='ck_inventory_quantity_non_negative')
    )
    op.create_table(
        'analytics',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('warehouse_id', sa.Integer, nullable=False, index=True),
        sa.Column('product_id', sa.Integer, nullable=False, index=True),
        sa.Column('quantity', sa.Integer, nullable=False),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('recorded_at', sa.DateTime, nullable=False, server_default=sa.func.now())
    )

def downgrade():
    op.drop_table('analytics')
    op.drop_table('inventory')
    op.drop_table('products')
    op.drop_table('warehouses')
