"""
Tests for the plan catalog.

Covers plan ordering, lookup failures, and plan change classification.
"""

import pytest
from pydantic import ValidationError

from carebase.platform.billing.catalog import (
    DEFAULT_PLAN_CATALOG,
    DEFAULT_PLAN_DEFINITIONS,
    FeatureKey,
    PlanCatalog,
    PlanChangeType,
    PlanDefinition,
    PlanType,
    Product,
    ProductPricing,
    compare_plans,
)
from carebase.platform.billing.exceptions import PlanNotFoundError


@pytest.mark.unit
class TestPlanType:
    """Test PlanType enum."""

    def test_plan_type_values(self):
        assert PlanType.DEMO == "demo"
        assert PlanType.FREE == "free"
        assert PlanType.STANDARD == "standard"
        assert PlanType.AI == "ai"

    def test_rank_follows_entitlement_order(self):
        ranks = [plan.rank for plan in (PlanType.DEMO, PlanType.FREE, PlanType.STANDARD, PlanType.AI)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4


@pytest.mark.unit
class TestPlanCatalog:
    """Test PlanCatalog lookups."""

    def test_catalog_covers_every_plan(self):
        assert set(DEFAULT_PLAN_CATALOG) == set(PlanType)
        assert len(DEFAULT_PLAN_CATALOG) == 4

    def test_lookup_by_enum_and_string(self):
        assert DEFAULT_PLAN_CATALOG[PlanType.STANDARD].device_price == 1000
        assert DEFAULT_PLAN_CATALOG["ai"].device_price == 1000
        assert DEFAULT_PLAN_CATALOG.get_definition("free").device_price == 0

    def test_unknown_plan_fails_fast(self):
        with pytest.raises(PlanNotFoundError) as exc_info:
            DEFAULT_PLAN_CATALOG.get_definition("enterprise")

        assert exc_info.value.error_code == "PLAN_NOT_FOUND"
        assert exc_info.value.context["plan_id"] == "enterprise"

    def test_contains(self):
        assert "standard" in DEFAULT_PLAN_CATALOG
        assert "enterprise" not in DEFAULT_PLAN_CATALOG
        assert 3 not in DEFAULT_PLAN_CATALOG

    def test_catalog_requires_every_plan(self):
        partial = [d for d in DEFAULT_PLAN_DEFINITIONS if d.plan != PlanType.AI]

        with pytest.raises(PlanNotFoundError):
            PlanCatalog(partial)

    def test_definitions_are_frozen(self):
        definition = DEFAULT_PLAN_CATALOG[PlanType.STANDARD]

        with pytest.raises(ValidationError):
            definition.device_price = 0

    def test_feature_flags_are_read_only(self):
        demo = DEFAULT_PLAN_CATALOG[PlanType.DEMO]

        with pytest.raises(TypeError):
            demo.features[FeatureKey.EXTERNAL_API.value] = True

        assert DEFAULT_PLAN_CATALOG[PlanType.DEMO].features[FeatureKey.EXTERNAL_API.value] is False

    def test_feature_flags_copied_from_input(self):
        flags = {FeatureKey.PRODUCTS.value: True}
        custom = PlanDefinition(
            plan=PlanType.FREE,
            display_name="Free",
            max_staff_per_device=1,
            max_staff=1,
            max_clients=20,
            storage_limit=1024,
            features=flags,
        )

        flags[FeatureKey.PRODUCTS.value] = False

        assert custom.features[FeatureKey.PRODUCTS.value] is True

    def test_only_paid_plans_bill_devices(self):
        assert not DEFAULT_PLAN_CATALOG[PlanType.DEMO].bills_devices
        assert not DEFAULT_PLAN_CATALOG[PlanType.FREE].bills_devices
        assert DEFAULT_PLAN_CATALOG[PlanType.STANDARD].bills_devices
        assert DEFAULT_PLAN_CATALOG[PlanType.AI].bills_devices

    def test_ai_features_only_on_ai_plan(self):
        standard = DEFAULT_PLAN_CATALOG[PlanType.STANDARD]
        ai = DEFAULT_PLAN_CATALOG[PlanType.AI]

        assert standard.features[FeatureKey.AI_PRODUCTS.value] is False
        assert ai.features[FeatureKey.AI_PRODUCTS.value] is True
        assert ai.features[FeatureKey.EXTERNAL_API.value] is True


@pytest.mark.unit
class TestComparePlans:
    """Test plan change classification."""

    @pytest.mark.parametrize(
        ("current", "new", "expected"),
        [
            (PlanType.FREE, PlanType.STANDARD, PlanChangeType.UPGRADE),
            (PlanType.DEMO, PlanType.AI, PlanChangeType.UPGRADE),
            (PlanType.AI, PlanType.STANDARD, PlanChangeType.DOWNGRADE),
            (PlanType.STANDARD, PlanType.FREE, PlanChangeType.DOWNGRADE),
            (PlanType.STANDARD, PlanType.STANDARD, PlanChangeType.SAME),
        ],
    )
    def test_compare_plans(self, current, new, expected):
        assert compare_plans(current, new) == expected

    def test_compare_plans_accepts_strings(self):
        assert compare_plans("free", "ai") == PlanChangeType.UPGRADE

    def test_compare_plans_rejects_unknown(self):
        with pytest.raises(PlanNotFoundError):
            compare_plans("free", "platinum")


@pytest.mark.unit
class TestProduct:
    """Test Product model validation."""

    def test_product_without_ai_price(self):
        product = Product(id="shift", display_name="Shift", pricing=ProductPricing(standard=1500))
        assert product.pricing.ai is None

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ProductPricing(standard=-1)

        assert any("standard" in str(error) for error in exc_info.value.errors())

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Product(id="", display_name="Nameless", pricing=ProductPricing(standard=0))
