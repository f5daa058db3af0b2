"""create offering catalog

Revision ID: 202610180001
Revises:
Create Date: 2026-10-18 00:01:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "202610180001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(precision=10, scale=2), nullable=True)


def upgrade() -> None:
    op.create_table(
        "ecosystem",
        sa.Column("ecosystem_id", sa.Integer(), nullable=False),
        sa.Column("ecosystem_name", sa.String(length=128), nullable=True),
        sa.Column("profession_id", sa.Integer(), nullable=True),
        sa.Column("brand_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("ecosystem_id"),
    )

    op.create_table(
        "brand_lookup",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("description", sa.String(length=256), nullable=True),
        sa.Column("ecosystem_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["ecosystem_id"], ["ecosystem.ecosystem_id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "fulfillment_platform",
        sa.Column("fulfillment_platform_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("url", sa.String(length=255), nullable=True),
        sa.Column("description_short", sa.String(length=256), nullable=True),
        sa.Column("description_long", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=True),
        sa.Column("create_date", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("fulfillment_platform_id"),
    )

    op.create_table(
        "cost_center_lookup",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cost_center_name", sa.String(length=128), nullable=True),
        sa.Column("cost_center_description", sa.String(length=256), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "product_features",
        sa.Column("product_feature_id", sa.Integer(), nullable=False),
        sa.Column("feature_name", sa.String(length=128), nullable=True),
        sa.Column("feature_description", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.PrimaryKeyConstraint("product_feature_id"),
    )

    op.create_table(
        "language_lookup",
        sa.Column("language_id", sa.SmallInteger(), autoincrement=False, nullable=False),
        sa.Column("language_name", sa.String(length=64), nullable=True),
        sa.Column("language_abbr", sa.String(length=4), nullable=True),
        sa.PrimaryKeyConstraint("language_id"),
    )

    op.create_table(
        "offering",
        sa.Column("offering_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("sku", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("description_short", sa.String(length=255), nullable=True),
        sa.Column("description_long", sa.Text(), nullable=True),
        sa.Column("not_for_sale", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("sequence_order", sa.SmallInteger(), nullable=True),
        sa.Column("ecosystem_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["ecosystem_id"], ["ecosystem.ecosystem_id"]),
        sa.PrimaryKeyConstraint("offering_id"),
    )
    op.create_index("ix_offering_sku", "offering", ["sku"], unique=False)
    op.create_index("ix_offering_ecosystem", "offering", ["ecosystem_id"], unique=False)

    op.create_table(
        "sku_version",
        sa.Column("sku_version_id", sa.Integer(), nullable=False),
        sa.Column("offering_id", sa.Uuid(), nullable=False),
        sa.Column("version_name", sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(["offering_id"], ["offering.offering_id"]),
        sa.PrimaryKeyConstraint("sku_version_id"),
    )
    op.create_index("ix_sku_version_offering", "sku_version", ["offering_id"], unique=False)

    op.create_table(
        "sku_version_detail",
        sa.Column("sku_version_detail_id", sa.Integer(), nullable=False),
        sa.Column("sku_version", sa.Integer(), nullable=True),
        sa.Column("version_name", sa.String(length=128), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("qualifying_education", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("continuing_education", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("description_short", sa.String(length=256), nullable=True),
        sa.Column("description_long", sa.Text(), nullable=True),
        sa.Column("not_for_individual_sale", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("credit_hours", sa.Integer(), nullable=True),
        sa.Column("access_period", sa.String(length=128), nullable=True),
        sa.Column("platform", sa.String(length=128), nullable=True),
        sa.Column("hybrid_delivery", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("certifications_awarded", sa.String(length=256), nullable=True),
        sa.Column("owner", sa.String(length=128), nullable=True),
        sa.ForeignKeyConstraint(["sku_version"], ["sku_version.sku_version_id"]),
        sa.PrimaryKeyConstraint("sku_version_detail_id"),
    )
    op.create_index("ix_sku_version_detail_version", "sku_version_detail", ["sku_version"], unique=False)

    op.create_table(
        "sku_version_pricing",
        sa.Column("sku_version_pricing_id", sa.Integer(), nullable=False),
        sa.Column("sku_version_detail_id", sa.Integer(), nullable=True),
        _money("base_price"),
        _money("cogs"),
        sa.Column("cost_center", sa.Integer(), nullable=True),
        _money("delivery_cost"),
        _money("subscription_price"),
        _money("msrp"),
        _money("promotional_price"),
        sa.Column("discount_percentage", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column("recognition_period_months", sa.Integer(), nullable=True),
        sa.Column("revenue_allocation_method", sa.String(length=64), nullable=True),
        sa.Column("discount_eligibility", sa.String(length=64), nullable=True),
        sa.Column("discount_type", sa.String(length=64), nullable=True),
        _money("additional_certificate_price"),
        sa.Column("recognition_start_trigger", sa.String(length=64), nullable=True),
        sa.Column("deferred_revenue_account", sa.String(length=64), nullable=True),
        sa.Column("income_account", sa.String(length=64), nullable=True),
        sa.Column("profit_center", sa.String(length=64), nullable=True),
        sa.Column("revenue_category", sa.String(length=64), nullable=True),
        sa.Column("revenue_subcategory", sa.String(length=64), nullable=True),
        sa.Column("revenue_forecast_category", sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(["sku_version_detail_id"], ["sku_version_detail.sku_version_detail_id"]),
        sa.ForeignKeyConstraint(["cost_center"], ["cost_center_lookup.id"]),
        sa.PrimaryKeyConstraint("sku_version_pricing_id"),
    )
    op.create_index(
        "ix_sku_version_pricing_detail",
        "sku_version_pricing",
        ["sku_version_detail_id"],
        unique=False,
    )

    op.create_table(
        "sku_version_content",
        sa.Column("sku_version_content_id", sa.Integer(), nullable=False),
        sa.Column("sku_version_detail_id", sa.Integer(), nullable=True),
        sa.Column("content_version", sa.String(length=64), nullable=True),
        sa.Column("content_format", sa.String(length=64), nullable=True),
        sa.Column("mobile_compatible", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("description_short", sa.String(length=256), nullable=True),
        sa.Column("description_long", sa.Text(), nullable=True),
        sa.Column("content_length", sa.String(length=64), nullable=True),
        sa.Column("instructor_information", sa.String(length=256), nullable=True),
        sa.Column("refresh_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("create_date", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["sku_version_detail_id"], ["sku_version_detail.sku_version_detail_id"]),
        sa.PrimaryKeyConstraint("sku_version_content_id"),
    )

    op.create_table(
        "content_language",
        sa.Column("content_language_id", sa.Integer(), nullable=False),
        sa.Column("sku_version_content_id", sa.Integer(), nullable=True),
        sa.Column("language_id", sa.SmallInteger(), nullable=True),
        sa.ForeignKeyConstraint(["sku_version_content_id"], ["sku_version_content.sku_version_content_id"]),
        sa.ForeignKeyConstraint(["language_id"], ["language_lookup.language_id"]),
        sa.PrimaryKeyConstraint("content_language_id"),
    )

    op.create_table(
        "sku_version_features",
        sa.Column("sku_feature_id", sa.Integer(), nullable=False),
        sa.Column("sku_version_detail_id", sa.Integer(), nullable=False),
        sa.Column("feature_id", sa.Integer(), nullable=False),
        sa.Column("regulatory_modifier", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("pricing_modifier", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.ForeignKeyConstraint(["sku_version_detail_id"], ["sku_version_detail.sku_version_detail_id"]),
        sa.ForeignKeyConstraint(["feature_id"], ["product_features.product_feature_id"]),
        sa.PrimaryKeyConstraint("sku_feature_id"),
    )
    op.create_index(
        "ix_sku_version_features_detail",
        "sku_version_features",
        ["sku_version_detail_id"],
        unique=False,
    )

    op.create_table(
        "sku_version_fulfillment_platform",
        sa.Column("sku_fulfillment_platform_id", sa.Integer(), nullable=False),
        sa.Column("sku_version_id", sa.Integer(), nullable=False),
        sa.Column("fulfillment_platform_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["sku_version_id"], ["sku_version.sku_version_id"]),
        sa.ForeignKeyConstraint(["fulfillment_platform_id"], ["fulfillment_platform.fulfillment_platform_id"]),
        sa.PrimaryKeyConstraint("sku_fulfillment_platform_id"),
    )
    op.create_index(
        "ix_sku_version_fulfillment_platform_version",
        "sku_version_fulfillment_platform",
        ["sku_version_id"],
        unique=False,
    )

    op.create_table(
        "offering_product",
        sa.Column("offering_id", sa.Uuid(), nullable=False),
        sa.Column("sku_version", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["offering_id"], ["offering.offering_id"]),
        sa.ForeignKeyConstraint(["sku_version"], ["sku_version.sku_version_id"]),
        sa.PrimaryKeyConstraint("offering_id", "sku_version"),
    )

    op.create_table(
        "offering_brand",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("offering_id", sa.Uuid(), nullable=True),
        sa.Column("brand_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["offering_id"], ["offering.offering_id"]),
        sa.ForeignKeyConstraint(["brand_id"], ["brand_lookup.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_offering_brand_offering", "offering_brand", ["offering_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_offering_brand_offering", table_name="offering_brand")
    op.drop_table("offering_brand")
    op.drop_table("offering_product")
    op.drop_index("ix_sku_version_fulfillment_platform_version", table_name="sku_version_fulfillment_platform")
    op.drop_table("sku_version_fulfillment_platform")
    op.drop_index("ix_sku_version_features_detail", table_name="sku_version_features")
    op.drop_table("sku_version_features")
    op.drop_table("content_language")
    op.drop_table("sku_version_content")
    op.drop_index("ix_sku_version_pricing_detail", table_name="sku_version_pricing")
    op.drop_table("sku_version_pricing")
    op.drop_index("ix_sku_version_detail_version", table_name="sku_version_detail")
    op.drop_table("sku_version_detail")
    op.drop_index("ix_sku_version_offering", table_name="sku_version")
    op.drop_table("sku_version")
    op.drop_index("ix_offering_ecosystem", table_name="offering")
    op.drop_index("ix_offering_sku", table_name="offering")
    op.drop_table("offering")
    op.drop_table("language_lookup")
    op.drop_table("product_features")
    op.drop_table("cost_center_lookup")
    op.drop_table("fulfillment_platform")
    op.drop_table("brand_lookup")
    op.drop_table("ecosystem")
