"""SQL translation of VariantCriteria (compiled against the PostgreSQL dialect)."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from app.models import Variant
from app.services.criteria import VariantCriteria
from app.services.dimensions import DeviceType
from app.stores.catalog import _criteria_clauses
from tests.conftest import make_variant


def _compile(criteria: VariantCriteria):
    query = select(Variant.id).where(*_criteria_clauses(criteria))
    return query.compile(dialect=postgresql.dialect())


def test_empty_criteria_add_no_where_clause():
    assert _criteria_clauses(VariantCriteria()) == []
    assert "WHERE" not in str(_compile(VariantCriteria()))


def test_any_of_storage_uses_canonical_text():
    compiled = _compile(VariantCriteria(storage=(256.0, " 64GB ")))

    assert "variants.storage IN" in str(compiled)
    assert ["256", "64GB"] in compiled.params.values()
    # Stored storage is canonicalized the same way, so both sides line up
    assert make_variant(storage=256.0).storage == "256"


def test_ram_filter_keeps_only_integers():
    compiled = _compile(VariantCriteria(ram=("16", 8.0, "8.5", "lots")))

    assert "variants.ram IN" in str(compiled)
    assert [16, 8] in compiled.params.values()


def test_substring_filters_are_case_insensitive_and_escaped():
    compiled = _compile(VariantCriteria(model="50%"))
    sql = str(compiled)

    assert "lower(variants.model)" in sql
    assert "ESCAPE '/'" in sql
    assert "50/%" in compiled.params.values()


def test_exact_and_range_filters():
    compiled = _compile(
        VariantCriteria(device_type=DeviceType.LAPTOP, model_exact="MacBook Air", min_price=100, max_price=900)
    )
    sql = str(compiled)

    assert "variants.device_type =" in sql
    assert "variants.model =" in sql
    assert "variants.price >=" in sql
    assert "variants.price <=" in sql
    params = list(compiled.params.values())
    assert DeviceType.LAPTOP in params
    assert "MacBook Air" in params
    assert 100 in params
    assert 900 in params
