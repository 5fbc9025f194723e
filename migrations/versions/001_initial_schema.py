"""Initial schema: posted rides with route polyline and pricing.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("driver_name", sa.String(120), nullable=False, server_default=""),
        sa.Column("start_name", sa.String(255), nullable=False),
        sa.Column("end_name", sa.String(255), nullable=False),
        sa.Column("departure", sa.DateTime, nullable=False),
        sa.Column("seats", sa.Integer, nullable=False),
        sa.Column("available_seats", sa.Integer, nullable=False),
        sa.Column("fare", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "fare_mode",
            sa.Enum("FIXED", "PER_KM", name="pricingmode"),
            nullable=False,
            server_default="FIXED",
        ),
        sa.Column("per_km_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("route_polyline", sa.Text, nullable=True),
        sa.Column("total_distance", sa.Float, nullable=False, server_default="0"),
        sa.Column("estimated_duration", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "vehicle_type",
            sa.Enum("HATCHBACK", "SEDAN", "SUV", "MUV", "BIKE", name="vehicletype"),
            nullable=True,
        ),
        sa.Column("vehicle_number", sa.String(20), nullable=False, server_default=""),
        sa.Column("ac_available", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("luggage_allowed", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("music_allowed", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("pet_friendly", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("smoking_allowed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("women_only", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "child_seat_available", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_rides_departure", "rides", ["departure"])
    op.create_index("idx_rides_active", "rides", ["is_active"])
    op.create_index("idx_rides_names", "rides", ["start_name", "end_name"])


def downgrade() -> None:
    op.drop_index("idx_rides_names", table_name="rides")
    op.drop_index("idx_rides_active", table_name="rides")
    op.drop_index("idx_rides_departure", table_name="rides")
    op.drop_table("rides")
    op.execute("DROP TYPE IF EXISTS vehicletype")
    op.execute("DROP TYPE IF EXISTS pricingmode")
