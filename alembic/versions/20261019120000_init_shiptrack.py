from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019120000_init_shiptrack"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "shipments",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("owner_user_id", sa.String(length=32), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tracking_number", sa.String(length=50), nullable=False),
        sa.Column("customer_name", sa.String(length=80), nullable=False),
        sa.Column("status", sa.Enum("Pending", "InTransit", "Delivered", name="shipmentstatus"), nullable=False),
        sa.Column("current_location", sa.String(length=80), nullable=False),
        sa.Column("eta", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_shipments_tracking_number", "shipments", ["tracking_number"], unique=True)
    op.create_index("ix_shipments_owner_user_id_status", "shipments", ["owner_user_id", "status"])
    op.create_index("ix_shipments_created_at", "shipments", ["created_at"])

def downgrade() -> None:
    op.drop_table("shipments")
    op.drop_table("users")
    sa.Enum(name="shipmentstatus").drop(op.get_bind(), checkfirst=True)
