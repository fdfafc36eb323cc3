"""Tests for HikeAggregator weight distributions, sections and mutations."""

import logging

import pytest

from pack_planner.services.dto import IntentKind
from pack_planner.services.exceptions import HikeGearNotFound, ValidationError
from pack_planner.services.hike_aggregator import HikeAggregator, ViewState, WeightKind


@pytest.fixture
def packed(make_gear, make_assignment, make_hike):
    """Tent (base), jacket (worn), food x3 (consumable)."""
    tent = make_gear("Tent", 1250.0, "Shelter")
    jacket = make_gear("Rain Jacket", 300.0, "Clothing")
    food = make_gear("Dinner", 150.0, "Food")
    hike = make_hike(
        [
            make_assignment(tent),
            make_assignment(jacket, worn=True, verified=True),
            make_assignment(food, quantity=3, consumable=True),
        ]
    )
    return hike


class TestWeights:
    """The four weight distributions."""

    def test_total_is_sum_of_weight_times_quantity(self, packed):
        aggregator = HikeAggregator(packed)
        assert aggregator.get_weight_grams(WeightKind.TOTAL) == pytest.approx(
            1250.0 + 300.0 + 150.0 * 3
        )

    def test_kinds_partition_single_flagged_assignments(self, packed):
        aggregator = HikeAggregator(packed)
        assert aggregator.get_weight_grams("base") == pytest.approx(1250.0)
        assert aggregator.get_weight_grams("worn") == pytest.approx(300.0)
        assert aggregator.get_weight_grams("consumable") == pytest.approx(450.0)

    def test_category_maps(self, packed):
        aggregator = HikeAggregator(packed)
        assert aggregator.get_distribution(WeightKind.TOTAL) == {
            "Shelter": 1250.0,
            "Clothing": 300.0,
            "Food": 450.0,
        }
        assert aggregator.get_distribution(WeightKind.WORN) == {"Clothing": 300.0}
        assert aggregator.get_distribution(WeightKind.BASE) == {"Shelter": 1250.0}

    def test_category_map_sums_to_scalar(self, packed):
        aggregator = HikeAggregator(packed)
        for kind in WeightKind:
            distribution = aggregator.get_weight_distribution(kind)
            assert sum(distribution.by_category.values()) == pytest.approx(
                distribution.total_grams
            )

    def test_get_distribution_returns_copy(self, packed):
        aggregator = HikeAggregator(packed)
        aggregator.get_distribution("total")["Shelter"] = 0.0
        assert aggregator.get_distribution("total")["Shelter"] == 1250.0

    def test_distribution_value_is_read_only(self, packed):
        distribution = HikeAggregator(packed).get_weight_distribution("total")
        with pytest.raises(TypeError):
            distribution.by_category["Shelter"] = 0.0

    def test_weight_strings(self, packed):
        aggregator = HikeAggregator(packed)
        assert aggregator.get_weight_string("total") == "2 Kg 0.0 Grams"
        assert aggregator.get_weight_string("worn") == "0 Kg 300.0 Grams"

    def test_weight_string_imperial(self, make_gear, make_assignment, make_hike):
        gear = make_gear("Pack", 453.592, "Backpack")
        aggregator = HikeAggregator(make_hike([make_assignment(gear)]), imperial=True)
        assert aggregator.get_weight_string(WeightKind.TOTAL) == "1 Lb 0.0 Oz"

    def test_unknown_kind_raises(self, packed):
        aggregator = HikeAggregator(packed)
        with pytest.raises(ValidationError, match="Weight kind"):
            aggregator.get_weight_grams("carried")

    def test_empty_hike(self, make_hike):
        aggregator = HikeAggregator(make_hike())
        for kind in WeightKind:
            assert aggregator.get_weight_grams(kind) == 0.0
            assert aggregator.get_distribution(kind) == {}
        assert aggregator.get_weight_string("total") == "0 Kg 0.0 Grams"
        assert aggregator.is_empty()
        assert aggregator.get_category_sections() == []

    def test_dual_flagged_counts_in_worn_and_consumable(
        self, make_gear, make_assignment, make_hike
    ):
        """An assignment both worn and consumable counts in both, and once in total."""
        water = make_gear("Water", 1000.0, "Water")
        aggregator = HikeAggregator(
            make_hike([make_assignment(water, worn=True, consumable=True)])
        )

        assert aggregator.get_weight_grams("total") == pytest.approx(1000.0)
        assert aggregator.get_weight_grams("worn") == pytest.approx(1000.0)
        assert aggregator.get_weight_grams("consumable") == pytest.approx(1000.0)
        assert aggregator.get_weight_grams("base") == 0.0
        combined = sum(aggregator.get_weight_grams(k) for k in ("base", "worn", "consumable"))
        assert combined > aggregator.get_weight_grams("total")


class TestDanglingReferences:
    """Assignments whose gear cannot be resolved."""

    def test_counts_as_zero_in_unknown_category(
        self, make_gear, make_assignment, make_hike
    ):
        tent = make_gear("Tent", 1250.0, "Shelter")
        aggregator = HikeAggregator(make_hike([make_assignment(tent), make_assignment(None)]))

        assert aggregator.get_weight_grams("total") == pytest.approx(1250.0)
        assert aggregator.get_distribution("total") == {"Shelter": 1250.0, "Unknown": 0.0}
        assert aggregator.get_category_sections()[1][0] == "Unknown"

    def test_logged_as_warning(self, make_assignment, make_hike, caplog):
        with caplog.at_level(logging.WARNING, logger="pack_planner.services.hike_aggregator"):
            HikeAggregator(make_hike([make_assignment(None, id=7)]))

        records = [
            r for r in caplog.records if getattr(r, "outcome", None) == "dangling_reference"
        ]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].assignment_id == 7


class TestSections:
    """Category sections over the display list."""

    def test_sections_sorted_by_category(self, packed):
        aggregator = HikeAggregator(packed)
        assert [category for category, _ in aggregator.get_category_sections()] == [
            "Clothing",
            "Food",
            "Shelter",
        ]
        assert aggregator.section_count == 3
        assert aggregator.category_at(2) == "Shelter"

    def test_assignment_addressing(self, packed):
        aggregator = HikeAggregator(packed)
        assert aggregator.assignment_at(0, 0).gear.name == "Rain Jacket"
        assert [a.gear.name for a in aggregator.assignments_in_section(1)] == ["Dinner"]

    def test_out_of_range_section(self, packed):
        with pytest.raises(IndexError):
            HikeAggregator(packed).category_at(5)

    def test_pending_only_lists_unverified(self, packed):
        aggregator = HikeAggregator(packed, pending_only=True)
        assert aggregator.view_state == ViewState.PENDING_ONLY
        names = [a.gear.name for _, rows in aggregator.get_category_sections() for a in rows]
        assert names == ["Dinner", "Tent"]

    def test_all_verified_pending_view_empty_but_weights_unchanged(
        self, make_gear, make_assignment, make_hike
    ):
        hike = make_hike(
            [
                make_assignment(make_gear("Tent", 1250.0, "Shelter"), verified=True),
                make_assignment(make_gear("Fuel", 230.0, "Cooking"), consumable=True, verified=True),
            ]
        )
        full = HikeAggregator(hike)
        pending = HikeAggregator(hike, pending_only=True)

        assert pending.is_empty()
        assert pending.get_category_sections() == []
        for kind in WeightKind:
            assert pending.get_weight_grams(kind) == full.get_weight_grams(kind)
            assert pending.get_distribution(kind) == full.get_distribution(kind)

    def test_set_pending_only_leaves_distributions(self, packed):
        aggregator = HikeAggregator(packed)
        before = {kind: aggregator.get_weight_distribution(kind) for kind in WeightKind}

        aggregator.set_pending_only(True)

        assert aggregator.view_state == ViewState.PENDING_ONLY
        assert len(aggregator.display_assignments) == 2
        for kind in WeightKind:
            assert aggregator.get_weight_distribution(kind) is before[kind]

        aggregator.set_pending_only(False)
        assert len(aggregator.display_assignments) == 3


class TestToggles:
    """Flag toggles move weight between distributions."""

    def test_toggle_worn_moves_weight_from_base(self, packed):
        aggregator = HikeAggregator(packed)
        tent = packed.assignments[0]

        updated = aggregator.toggle_worn(tent.id)

        assert updated.worn is True
        assert aggregator.get_weight_grams("base") == 0.0
        assert aggregator.get_weight_grams("worn") == pytest.approx(1550.0)
        assert aggregator.get_weight_grams("total") == pytest.approx(2000.0)

    def test_toggle_twice_restores(self, packed):
        aggregator = HikeAggregator(packed)
        food = packed.assignments[2]
        aggregator.toggle_consumable(food.id)
        aggregator.toggle_consumable(food.id)
        assert aggregator.get_weight_grams("consumable") == pytest.approx(450.0)

    def test_toggle_verified_updates_pending_view(self, packed):
        aggregator = HikeAggregator(packed, pending_only=True)
        tent = packed.assignments[0]

        aggregator.toggle_verified(tent.id)

        assert [a.gear.name for a in aggregator.display_assignments] == ["Dinner"]

    def test_original_snapshot_untouched(self, packed):
        aggregator = HikeAggregator(packed)
        aggregator.toggle_worn(packed.assignments[0].id)
        assert packed.assignments[0].worn is False
        assert aggregator.hike is not packed

    def test_unknown_assignment_raises(self, packed):
        with pytest.raises(HikeGearNotFound):
            HikeAggregator(packed).toggle_worn(999)

    def test_emits_intent_with_new_value(self, packed, recording_store):
        aggregator = HikeAggregator(packed, store=recording_store)
        jacket = packed.assignments[1]

        aggregator.toggle_worn(jacket.id)

        intent = recording_store.intents[-1]
        assert intent.kind == IntentKind.SET_WORN
        assert intent.target_id == jacket.id
        assert intent.value is False

    def test_failing_store_leaves_snapshot(self, packed):
        def failing_store(intent):
            raise RuntimeError("disk full")

        aggregator = HikeAggregator(packed, store=failing_store)
        with pytest.raises(RuntimeError):
            aggregator.toggle_worn(packed.assignments[0].id)

        assert aggregator.hike is packed
        assert aggregator.get_weight_grams("base") == pytest.approx(1250.0)


class TestSetQuantity:
    """Quantity changes."""

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True, "2"])
    def test_invalid_quantity_raises(self, packed, quantity):
        aggregator = HikeAggregator(packed)
        with pytest.raises(ValidationError, match="Quantity"):
            aggregator.set_quantity(packed.assignments[0].id, quantity)
        assert aggregator.get_weight_grams("total") == pytest.approx(2000.0)

    def test_quantity_scales_total(self, packed):
        aggregator = HikeAggregator(packed)
        food = packed.assignments[2]

        aggregator.set_quantity(food.id, 1)
        assert aggregator.get_weight_grams("total") == pytest.approx(1250.0 + 300.0 + 150.0)

        aggregator.set_quantity(food.id, 5)
        assert aggregator.get_weight_grams("total") == pytest.approx(1250.0 + 300.0 + 750.0)
        assert aggregator.get_distribution("consumable") == {"Food": 750.0}

    def test_emits_intent(self, packed, recording_store):
        aggregator = HikeAggregator(packed, store=recording_store)
        aggregator.set_quantity(packed.assignments[0].id, 2)

        intent = recording_store.intents[-1]
        assert intent.kind == IntentKind.SET_QUANTITY
        assert intent.value == 2

    def test_unknown_assignment_raises(self, packed):
        with pytest.raises(HikeGearNotFound):
            HikeAggregator(packed).set_quantity(999, 2)


class TestAddAndRemove:
    """Adding gear and removing assignments."""

    def test_remove_assignment(self, packed, recording_store):
        aggregator = HikeAggregator(packed, store=recording_store)
        tent = packed.assignments[0]

        aggregator.remove_assignment(tent.id)

        assert len(aggregator.assignments) == 2
        assert "Shelter" not in aggregator.get_distribution("total")
        assert recording_store.intents[-1].kind == IntentKind.REMOVE_ASSIGNMENT

    def test_remove_unknown_assignment_raises(self, packed):
        with pytest.raises(HikeGearNotFound):
            HikeAggregator(packed).remove_assignment(999)

    def test_add_gear_uses_store_id(self, packed, make_gear, recording_store):
        aggregator = HikeAggregator(packed, store=recording_store)
        stove = make_gear("Stove", 85.0, "Cooking", id=50)

        assignment = aggregator.add_gear(stove, quantity=2)

        assert assignment.id == 101
        assert assignment.quantity == 2
        assert aggregator.get_weight_grams("base") == pytest.approx(1250.0 + 170.0)
        intent = recording_store.intents[-1]
        assert intent.kind == IntentKind.ADD_GEAR
        assert intent.target_id == packed.id
        assert intent.value == 50
        assert intent.quantity == 2

    def test_add_gear_without_store_uses_provisional_id(self, packed, make_gear):
        aggregator = HikeAggregator(packed)
        first = aggregator.add_gear(make_gear("Stove", 85.0, "Cooking", id=50))
        second = aggregator.add_gear(make_gear("Pot", 120.0, "Cooking", id=51))
        assert first.id < 0
        assert second.id < first.id

    def test_add_gear_rejects_duplicate(self, packed, recording_store):
        aggregator = HikeAggregator(packed, store=recording_store)
        tent = packed.assignments[0].gear

        assert aggregator.add_gear(tent) is None
        assert len(aggregator.assignments) == 3
        assert recording_store.intents == []

    def test_add_gear_invalid_quantity(self, packed, make_gear):
        with pytest.raises(ValidationError):
            HikeAggregator(packed).add_gear(make_gear("Stove", id=50), quantity=0)
