"""Initial procurement schema

Revision ID: 001
Revises: 
Create Date: 2024-05-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create kategori table
    op.create_table('kategori',
        sa.Column('id_kategori', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nama_kategori', sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint('id_kategori')
    )

    # Create client table
    op.create_table('client',
        sa.Column('id_client', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nama_brand', sa.String(length=128), nullable=False),
        sa.Column('nama_pt', sa.String(length=255), nullable=True),
        sa.Column('alamat', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id_client')
    )

    # Create vendor table
    op.create_table('vendor',
        sa.Column('id_vendor', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nama_pt_cv', sa.String(length=255), nullable=False),
        sa.Column('nama_vendor', sa.String(length=255), nullable=True),
        sa.Column('id_kategori', sa.Integer(), nullable=True),
        sa.Column('alamat', sa.Text(), nullable=True),
        sa.Column('no_pic', sa.String(length=32), nullable=True),
        sa.Column('nama_pic', sa.String(length=128), nullable=True),
        sa.Column('status_verifikasi', sa.String(length=32), server_default='Belum terverifikasi', nullable=False),
        sa.ForeignKeyConstraint(['id_kategori'], ['kategori.id_kategori']),
        sa.PrimaryKeyConstraint('id_vendor')
    )
    op.create_index('ix_vendor_id_kategori', 'vendor', ['id_kategori'])

    # Create memo_procurement table
    op.create_table('memo_procurement',
        sa.Column('no_memo', sa.String(length=64), nullable=False),
        sa.Column('id_client', sa.Integer(), nullable=True),
        sa.Column('perihal', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['id_client'], ['client.id_client']),
        sa.PrimaryKeyConstraint('no_memo')
    )
    op.create_index('ix_memo_procurement_id_client', 'memo_procurement', ['id_client'])

    # Create purchase_order table
    op.create_table('purchase_order',
        sa.Column('no_po', sa.String(length=64), nullable=False),
        sa.Column('id_vendor', sa.Integer(), nullable=True),
        sa.Column('id_client', sa.Integer(), nullable=True),
        sa.Column('no_memo', sa.String(length=64), nullable=True),
        sa.Column('nominal', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('perihal_project', sa.Text(), nullable=True),
        sa.Column('tanggal_po', sa.Date(), nullable=True),
        sa.Column('status_po', sa.String(length=32), nullable=True),
        sa.ForeignKeyConstraint(['id_vendor'], ['vendor.id_vendor']),
        sa.ForeignKeyConstraint(['id_client'], ['client.id_client']),
        sa.ForeignKeyConstraint(['no_memo'], ['memo_procurement.no_memo']),
        sa.PrimaryKeyConstraint('no_po')
    )
    op.create_index('ix_purchase_order_id_vendor', 'purchase_order', ['id_vendor'])
    op.create_index('ix_purchase_order_id_client', 'purchase_order', ['id_client'])
    op.create_index('ix_purchase_order_tanggal_po', 'purchase_order', ['tanggal_po'])

    # Create invoice table
    op.create_table('invoice',
        sa.Column('id_invoice', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('no_po', sa.String(length=64), nullable=False),
        sa.Column('no_invoice', sa.String(length=64), nullable=True),
        sa.Column('status_invoice', sa.String(length=16), nullable=False),
        sa.Column('termin', sa.String(length=64), nullable=True),
        sa.Column('invoice_portion_percent', sa.Numeric(precision=7, scale=4), nullable=False),
        sa.Column('ppn_status', sa.String(length=16), nullable=True),
        sa.ForeignKeyConstraint(['no_po'], ['purchase_order.no_po']),
        sa.PrimaryKeyConstraint('id_invoice')
    )
    op.create_index('ix_invoice_no_po', 'invoice', ['no_po'])
    op.create_index('ix_invoice_status_invoice', 'invoice', ['status_invoice'])

    # Create attachments table
    op.create_table('attachments',
        sa.Column('id_attachment', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('file_path', sa.String(length=255), nullable=False),
        sa.Column('original_name', sa.String(length=255), nullable=True),
        sa.Column('document_type', sa.String(length=64), nullable=True),
        sa.Column('related_table', sa.String(length=16), nullable=False),
        sa.Column('related_id_text', sa.String(length=64), nullable=True),
        sa.Column('related_id_int', sa.Integer(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id_attachment')
    )
    op.create_index('ix_attachments_related_int', 'attachments', ['related_table', 'related_id_int'])
    op.create_index('ix_attachments_related_text', 'attachments', ['related_table', 'related_id_text'])


def downgrade() -> None:
    op.drop_index('ix_attachments_related_text', table_name='attachments')
    op.drop_index('ix_attachments_related_int', table_name='attachments')
    op.drop_table('attachments')
    op.drop_index('ix_invoice_status_invoice', table_name='invoice')
    op.drop_index('ix_invoice_no_po', table_name='invoice')
    op.drop_table('invoice')
    op.drop_index('ix_purchase_order_tanggal_po', table_name='purchase_order')
    op.drop_index('ix_purchase_order_id_client', table_name='purchase_order')
    op.drop_index('ix_purchase_order_id_vendor', table_name='purchase_order')
    op.drop_table('purchase_order')
    op.drop_index('ix_memo_procurement_id_client', table_name='memo_procurement')
    op.drop_table('memo_procurement')
    op.drop_index('ix_vendor_id_kategori', table_name='vendor')
    op.drop_table('vendor')
    op.drop_table('client')
    op.drop_table('kategori')
