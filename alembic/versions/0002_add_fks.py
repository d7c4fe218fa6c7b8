from alembic import op
import sqlalchemy as sa

revision = '0002_add_fks'
down_revision = '0001_init'
branch_labels = None
depends_on = None

FOREIGN_KEYS = [
    ('fk_inventory_productid_products', 'inventory', 'products', 'productid'),
    ('fk_inventory_warehouseid_warehouses', 'inventory', 'warehouses', 'warehouseid'),
    ('fk_analytics_product_id_products', 'analytics', 'products', 'product_id'),
    ('fk_analytics_warehouse_id_warehouses', 'analytics', 'warehouses', 'warehouse_id'),
]

def upgrade():
    for name, source, referent, column in FOREIGN_KEYS:
        op.create_foreign_key(
            name,
            source_table=source,
            referent_table=referent,
            local_cols=[column],
            remote_cols=['id'],
            ondelete='RESTRICT'
        )

def downgrade():
    for name, source, _, _ in reversed(FOREIGN_KEYS):
        op.drop_constraint(name, source, type_='foreignkey')
