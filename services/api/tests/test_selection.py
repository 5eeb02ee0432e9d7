"""Lowest-price representative per model."""

from app.services.selection import select_lowest_price
from tests.conftest import FakeCatalogStore, make_laptop, make_tablet, make_variant


def test_one_cheapest_variant_per_model():
    variants = [
        make_variant(model="A", price=500),
        make_variant(model="A", price=300),
        make_variant(model="B", price=700),
    ]
    selection = select_lowest_price(variants)

    assert {v.model: v.price for v in selection.variants} == {"A": 300, "B": 700}
    assert selection.count == 2


def test_ties_go_to_the_earliest_record():
    store = FakeCatalogStore()
    first, second = store.seed(
        make_variant(model="A", price=300, color="Black"),
        make_variant(model="A", price=300, color="White"),
    )
    selection = select_lowest_price([first, second])
    assert selection.variants == [first]


def test_results_ordered_by_device_type_then_price_and_bucketed():
    variants = [
        make_variant(model="iPhone 15", price=900),
        make_tablet(model="iPad Air", price=400),
        make_laptop(model="MacBook Air", price=1000),
        make_variant(model="iPhone 13", price=450),
    ]
    selection = select_lowest_price(variants)

    assert [v.model for v in selection.variants] == ["MacBook Air", "iPhone 13", "iPhone 15", "iPad Air"]
    assert [v.model for v in selection.by_device_type["Phones"]] == ["iPhone 13", "iPhone 15"]
    assert [v.model for v in selection.by_device_type["Laptops"]] == ["MacBook Air"]
    assert [v.model for v in selection.by_device_type["Tablets"]] == ["iPad Air"]


def test_empty_catalog_gives_empty_buckets():
    selection = select_lowest_price([])
    assert selection.count == 0
    assert selection.by_device_type == {"Phones": [], "Laptops": [], "Tablets": []}
