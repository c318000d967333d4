"""Initial OfferDesk schema: fares, rules, bundles, agents, cohorts, campaigns, traces, audit

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_ONLY = sa.text("status = 'ACTIVE'")


def _id() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()"))


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _validity() -> list[sa.Column]:
    return [
        sa.Column("valid_from", sa.Date, nullable=False),
        sa.Column("valid_to", sa.Date, nullable=False),
    ]


def _active_code_index(name: str, table: str, column: str) -> None:
    op.create_index(name, table, [column], unique=True, postgresql_where=ACTIVE_ONLY)


def upgrade() -> None:
    # --- negotiated_fares ---
    op.create_table(
        "negotiated_fares",
        _id(),
        sa.Column("airline_code", sa.String(2), nullable=False),
        sa.Column("fare_code", sa.String(50), nullable=False),
        sa.Column("origin", sa.String(3), nullable=False),
        sa.Column("destination", sa.String(3), nullable=False),
        sa.Column("trip_type", sa.String(20), nullable=False),
        sa.Column("cabin_class", sa.String(20), nullable=False),
        sa.Column("base_net_fare", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("booking_start_date", sa.Date, nullable=False),
        sa.Column("booking_end_date", sa.Date, nullable=False),
        sa.Column("travel_start_date", sa.Date, nullable=False),
        sa.Column("travel_end_date", sa.Date, nullable=False),
        sa.Column("pos", JSONB, nullable=False, server_default="[]"),
        sa.Column("seat_allotment", sa.Integer),
        sa.Column("min_stay", sa.Integer),
        sa.Column("max_stay", sa.Integer),
        sa.Column("blackout_dates", JSONB),
        sa.Column("eligible_agent_tiers", JSONB, nullable=False, server_default="[]"),
        sa.Column("eligible_cohorts", JSONB),
        sa.Column("remarks", sa.Text),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index(
        "idx_negotiated_fares_scope",
        "negotiated_fares",
        ["airline_code", "origin", "destination", "cabin_class"],
    )

    # --- dynamic_discount_rules ---
    op.create_table(
        "dynamic_discount_rules",
        _id(),
        sa.Column("rule_code", sa.String(50), nullable=False),
        sa.Column("fare_source", sa.String(20), nullable=False, server_default="API_GDS_NDC"),
        sa.Column("origin", sa.String(3), nullable=False),
        sa.Column("destination", sa.String(3), nullable=False),
        sa.Column("cabin_class", sa.String(20), nullable=False),
        sa.Column("trip_type", sa.String(20), nullable=False),
        sa.Column("pos", JSONB, nullable=False, server_default="[]"),
        sa.Column("market_region", sa.String(50)),
        sa.Column("agent_tier", JSONB, nullable=False, server_default="[]"),
        sa.Column("cohort_codes", JSONB),
        sa.Column("channel", sa.String(20), nullable=False),
        sa.Column("booking_window_min", sa.Integer),
        sa.Column("booking_window_max", sa.Integer),
        sa.Column("travel_window_min", sa.Integer),
        sa.Column("travel_window_max", sa.Integer),
        sa.Column("season_code", sa.String(50)),
        sa.Column("adjustment_type", sa.String(20), nullable=False),
        sa.Column("adjustment_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("stackable", sa.Boolean, server_default="false"),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_validity(),
        *_timestamps(),
    )
    _active_code_index("uq_dynamic_discount_rules_active_code", "dynamic_discount_rules", "rule_code")

    # --- air_ancillary_rules ---
    op.create_table(
        "air_ancillary_rules",
        _id(),
        sa.Column("rule_code", sa.String(50), nullable=False),
        sa.Column("ancillary_code", sa.String(50), nullable=False),
        sa.Column("airline_code", sa.String(2)),
        sa.Column("origin", sa.String(3)),
        sa.Column("destination", sa.String(3)),
        sa.Column("pos", JSONB, nullable=False, server_default="[]"),
        sa.Column("channel", sa.String(20), nullable=False),
        sa.Column("agent_tier", JSONB, nullable=False, server_default="[]"),
        sa.Column("cohort_codes", JSONB),
        sa.Column("condition_behavior", sa.String(30)),
        sa.Column("adjustment_type", sa.String(20), nullable=False),
        sa.Column("adjustment_value", sa.Numeric(12, 2)),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_validity(),
        *_timestamps(),
    )
    _active_code_index("uq_air_ancillary_rules_active_code", "air_ancillary_rules", "rule_code")

    # --- offer_rules ---
    op.create_table(
        "offer_rules",
        _id(),
        sa.Column("rule_code", sa.String(50), nullable=False),
        sa.Column("rule_name", sa.String(255), nullable=False),
        sa.Column("rule_type", sa.String(30), nullable=False),
        sa.Column("conditions", JSONB, nullable=False, server_default="{}"),
        sa.Column("actions", JSONB, nullable=False, server_default="[]"),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), server_default="DRAFT"),
        *_validity(),
        sa.Column("justification", sa.Text),
        sa.Column("approved_by", sa.String(100)),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        sa.Column("created_by", sa.String(100), server_default="system"),
        *_timestamps(),
    )
    _active_code_index("uq_offer_rules_active_code", "offer_rules", "rule_code")

    # --- channel_price_overrides ---
    op.create_table(
        "channel_price_overrides",
        _id(),
        sa.Column("override_code", sa.String(50), nullable=False),
        sa.Column("channel", sa.String(20), nullable=False),
        sa.Column("pos", JSONB, nullable=False, server_default="[]"),
        sa.Column("product_scope", sa.String(20), nullable=False),
        sa.Column("adjustment_type", sa.String(20), nullable=False),
        sa.Column("adjustment_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_validity(),
        *_timestamps(),
    )
    _active_code_index("uq_channel_price_overrides_active_code", "channel_price_overrides", "override_code")

    # --- nonair_rates ---
    op.create_table(
        "nonair_rates",
        _id(),
        sa.Column("supplier_code", sa.String(50), nullable=False),
        sa.Column("product_code", sa.String(50), nullable=False),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("net_rate", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("region", JSONB, nullable=False, server_default="[]"),
        *_validity(),
        sa.Column("inventory", sa.Integer),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index("idx_nonair_rates_product", "nonair_rates", ["supplier_code", "product_code"])

    # --- nonair_markup_rules ---
    op.create_table(
        "nonair_markup_rules",
        _id(),
        sa.Column("rule_code", sa.String(50), nullable=False),
        sa.Column("supplier_code", sa.String(50)),
        sa.Column("product_code", sa.String(50), nullable=False),
        sa.Column("pos", JSONB, nullable=False, server_default="[]"),
        sa.Column("agent_tier", JSONB, nullable=False, server_default="[]"),
        sa.Column("cohort_codes", JSONB),
        sa.Column("channel", sa.String(20), nullable=False),
        sa.Column("adjustment_type", sa.String(20), nullable=False),
        sa.Column("adjustment_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_validity(),
        *_timestamps(),
    )
    _active_code_index("uq_nonair_markup_rules_active_code", "nonair_markup_rules", "rule_code")

    # --- bundles ---
    op.create_table(
        "bundles",
        _id(),
        sa.Column("bundle_code", sa.String(50), nullable=False),
        sa.Column("bundle_name", sa.String(255), nullable=False),
        sa.Column("components", JSONB, nullable=False, server_default="[]"),
        sa.Column("bundle_type", sa.String(20), nullable=False),
        sa.Column("pos", JSONB, nullable=False, server_default="[]"),
        sa.Column("agent_tier", JSONB, nullable=False, server_default="[]"),
        sa.Column("cohort_codes", JSONB),
        sa.Column("channel", sa.String(20), nullable=False),
        *_validity(),
        sa.Column("inventory_cap", sa.Integer),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_timestamps(),
    )
    _active_code_index("uq_bundles_active_code", "bundles", "bundle_code")

    # --- bundle_pricing_rules ---
    op.create_table(
        "bundle_pricing_rules",
        _id(),
        sa.Column("rule_code", sa.String(50), nullable=False),
        sa.Column("bundle_code", sa.String(50), nullable=False),
        sa.Column("discount_type", sa.String(20), nullable=False),
        sa.Column("discount_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_validity(),
        *_timestamps(),
    )
    op.create_index("ix_bundle_pricing_rules_bundle_code", "bundle_pricing_rules", ["bundle_code"])
    _active_code_index("uq_bundle_pricing_rules_active_code", "bundle_pricing_rules", "rule_code")

    # --- agents ---
    op.create_table(
        "agents",
        _id(),
        sa.Column("agent_id", sa.String(50), nullable=False),
        sa.Column("agency_name", sa.String(255), nullable=False),
        sa.Column("iata_code", sa.String(20)),
        sa.Column("tier", sa.String(20), nullable=False, server_default="BRONZE"),
        sa.Column("allowed_channels", JSONB, nullable=False, server_default="[]"),
        sa.Column("commission_profile_id", sa.String(50)),
        sa.Column("pos", JSONB, nullable=False, server_default="[]"),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_timestamps(),
    )
    _active_code_index("uq_agents_active_agent_id", "agents", "agent_id")

    # --- agent_bookings ---
    op.create_table(
        "agent_bookings",
        _id(),
        sa.Column("agent_id", sa.String(50), nullable=False),
        sa.Column("booking_ref", sa.String(50), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("booked_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("trace_id", sa.String(20)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_agent_bookings_agent", "agent_bookings", ["agent_id", "booked_at"])

    # --- agent_tiers ---
    op.create_table(
        "agent_tiers",
        _id(),
        sa.Column("tier_code", sa.String(20), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("kpi_window", sa.String(20), nullable=False),
        sa.Column("kpi_thresholds", JSONB, nullable=False, server_default="{}"),
        sa.Column("default_pricing_policy", JSONB),
        sa.Column("description", sa.Text),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        sa.Column("created_by", sa.String(100), server_default="system"),
        *_timestamps(),
    )
    _active_code_index("uq_agent_tiers_active_code", "agent_tiers", "tier_code")

    # --- agent_tier_assignments ---
    op.create_table(
        "agent_tier_assignments",
        _id(),
        sa.Column("agent_id", sa.String(50), nullable=False),
        sa.Column("tier_code", sa.String(20), nullable=False),
        sa.Column("assignment_type", sa.String(20), nullable=False),
        sa.Column("effective_from", sa.Date, nullable=False),
        sa.Column("effective_to", sa.Date),
        sa.Column("kpi_snapshot", JSONB),
        sa.Column("justification", sa.Text),
        sa.Column("assigned_by", sa.String(100), server_default="system"),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        *_timestamps(),
    )
    # At most one ACTIVE assignment per agent
    _active_code_index("uq_agent_tier_assignments_active_agent", "agent_tier_assignments", "agent_id")

    # --- cohorts ---
    op.create_table(
        "cohorts",
        _id(),
        sa.Column("cohort_code", sa.String(50), nullable=False),
        sa.Column("cohort_name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("criteria", JSONB, nullable=False, server_default="{}"),
        sa.Column("description", sa.Text),
        sa.Column("status", sa.String(20), server_default="ACTIVE"),
        sa.Column("created_by", sa.String(100), server_default="system"),
        *_timestamps(),
    )
    _active_code_index("uq_cohorts_active_code", "cohorts", "cohort_code")

    # --- campaigns ---
    op.create_table(
        "campaigns",
        _id(),
        sa.Column("campaign_code", sa.String(50), nullable=False),
        sa.Column("campaign_name", sa.String(255), nullable=False),
        sa.Column("target", JSONB, nullable=False, server_default="{}"),
        sa.Column("products", JSONB, nullable=False, server_default="{}"),
        sa.Column("offer", JSONB, nullable=False, server_default="{}"),
        sa.Column("lifecycle", JSONB, nullable=False, server_default="{}"),
        sa.Column("comms", JSONB, nullable=False, server_default="{}"),
        sa.Column("status", sa.String(20), server_default="DRAFT"),
        sa.Column("created_by", sa.String(100), server_default="system"),
        *_timestamps(),
    )
    _active_code_index("uq_campaigns_active_code", "campaigns", "campaign_code")

    op.create_table(
        "campaign_metrics",
        _id(),
        sa.Column("campaign_code", sa.String(50), nullable=False),
        sa.Column("metric_date", sa.Date, nullable=False),
        sa.Column("sent", sa.Integer, server_default="0"),
        sa.Column("delivered", sa.Integer, server_default="0"),
        sa.Column("opened", sa.Integer, server_default="0"),
        sa.Column("clicked", sa.Integer, server_default="0"),
        sa.Column("purchased", sa.Integer, server_default="0"),
        sa.Column("revenue", sa.Numeric(14, 2), server_default="0"),
        sa.Column("currency", sa.String(3), server_default="INR"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("campaign_code", "metric_date", name="uq_campaign_metrics_day"),
    )

    op.create_table(
        "campaign_deliveries",
        _id(),
        sa.Column("campaign_code", sa.String(50), nullable=False),
        sa.Column("recipient", sa.String(255), nullable=False),
        sa.Column("channel", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), server_default="SENT"),
        sa.Column("sent_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("opened_at", sa.DateTime(timezone=True)),
        sa.Column("clicked_at", sa.DateTime(timezone=True)),
        sa.Column("purchased_at", sa.DateTime(timezone=True)),
        sa.Column("purchase_amount", sa.Numeric(12, 2)),
    )
    op.create_index("ix_campaign_deliveries_campaign_code", "campaign_deliveries", ["campaign_code"])

    # --- offer_traces ---
    op.create_table(
        "offer_traces",
        _id(),
        sa.Column("trace_id", sa.String(20), nullable=False, unique=True),
        sa.Column("agent_id", sa.String(50), nullable=False),
        sa.Column("search_params", JSONB, nullable=False),
        sa.Column("agent_tier", sa.String(20), nullable=False),
        sa.Column("cohorts", JSONB, nullable=False, server_default="[]"),
        sa.Column("fare_source", sa.String(20), nullable=False),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("adjustments", JSONB, nullable=False, server_default="[]"),
        sa.Column("ancillaries", JSONB, nullable=False, server_default="[]"),
        sa.Column("bundles", JSONB, nullable=False, server_default="[]"),
        sa.Column("final_offer_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission", sa.Numeric(12, 2), nullable=False),
        sa.Column("audit_trace_id", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), server_default="COMPOSED"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_offer_traces_agent_id", "offer_traces", ["agent_id"])

    # --- audit_logs ---
    op.create_table(
        "audit_logs",
        _id(),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("user", sa.String(100), nullable=False, server_default="system"),
        sa.Column("module", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=False),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("before_data", JSONB),
        sa.Column("after_data", JSONB),
        sa.Column("diff", JSONB),
        sa.Column("justification", sa.Text),
        sa.Column("ip_address", sa.String(64)),
        sa.Column("user_agent", sa.Text),
        sa.Column("session_id", sa.String(100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_audit_logs_entity", "audit_logs", ["module", "entity_id"])
    op.create_index("idx_audit_logs_timestamp", "audit_logs", ["timestamp"])


def downgrade() -> None:
    for table in (
        "audit_logs",
        "offer_traces",
        "campaign_deliveries",
        "campaign_metrics",
        "campaigns",
        "cohorts",
        "agent_tier_assignments",
        "agent_tiers",
        "agent_bookings",
        "agents",
        "bundle_pricing_rules",
        "bundles",
        "nonair_markup_rules",
        "nonair_rates",
        "channel_price_overrides",
        "offer_rules",
        "air_ancillary_rules",
        "dynamic_discount_rules",
        "negotiated_fares",
    ):
        op.drop_table(table)
