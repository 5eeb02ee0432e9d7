"""Combination enumeration and selection checks."""

import pytest

from app.services.configuration import check_combination, enumerate_combinations
from app.services.dimensions import DeviceType
from app.services.errors import InvalidConfigurationError
from tests.conftest import make_laptop, make_variant


def test_combinations_are_not_assumed_orthogonal():
    variants = [
        make_variant(storage=256, color="Black"),
        make_variant(storage=256, color="White"),
    ]
    combinations = enumerate_combinations(variants, "iPhone 13", DeviceType.PHONE)

    assert len(combinations) == 2
    assert {c.get("color") for c in combinations} == {"Black", "White"}


def test_every_combination_is_backed_by_a_variant():
    variants = [
        make_variant(storage=128, color="Black", price=500),
        make_variant(storage=256, color="White", price=650),
        make_variant(storage="256", color="White", price=600),
    ]
    combinations = enumerate_combinations(variants, "iPhone 13", DeviceType.PHONE)

    # 128-White and 256-Black are not stocked
    pairs = {(c.get("storage"), c.get("color")) for c in combinations}
    assert pairs == {(128, "Black"), (256, "White")}

    white = next(c for c in combinations if c.get("color") == "White")
    assert white.variant_count == 2
    assert white.min_price == 600


def test_laptop_combinations_include_cpu_and_ram():
    variants = [make_laptop(cpu="M1", ram=8), make_laptop(cpu="M2", ram=16)]
    combinations = enumerate_combinations(variants, "MacBook Air M2", DeviceType.LAPTOP)
    assert [c.get("ram") for c in combinations] == [8, 16]
    assert set(combinations[0].as_dict()) == {"condition", "storage", "color", "battery", "cpu", "ram"}


def test_enumeration_order_is_deterministic():
    variants = [
        make_variant(storage=256, color="White"),
        make_variant(storage=128, color="Black"),
        make_variant(storage=64, color="Red"),
    ]
    forward = enumerate_combinations(variants, "iPhone 13", DeviceType.PHONE)
    backward = enumerate_combinations(list(reversed(variants)), "iPhone 13", DeviceType.PHONE)
    assert forward == backward
    assert [c.get("storage") for c in forward] == [64, 128, 256]


def test_check_combination_accepts_stocked_selection():
    variants = [
        make_variant(storage=128, color="Black"),
        make_variant(storage=256, color="White"),
    ]
    combinations = enumerate_combinations(variants, "iPhone 13", DeviceType.PHONE)

    matches = check_combination(combinations, DeviceType.PHONE, {"storage": "256", "color": "White"})
    assert len(matches) == 1


def test_check_combination_names_the_first_unavailable_dimension():
    variants = [
        make_variant(storage=128, color="Black"),
        make_variant(storage=256, color="White"),
    ]
    combinations = enumerate_combinations(variants, "iPhone 13", DeviceType.PHONE)

    with pytest.raises(InvalidConfigurationError) as exc_info:
        check_combination(combinations, DeviceType.PHONE, {"storage": 128, "color": "White"})

    assert exc_info.value.field == "color"
    assert exc_info.value.details["expected"] == ["Black"]


def test_check_combination_without_stock_rejects_model():
    with pytest.raises(InvalidConfigurationError) as exc_info:
        check_combination([], DeviceType.PHONE, {"color": "Black"})
    assert exc_info.value.field == "model"
