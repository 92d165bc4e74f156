"""Tests for pricing catalog loading and discount ordering."""

import json

import pytest

from snapcontract.domain.pricing.catalog import NO_OPTION_KEY, load_catalog


def test_default_catalog(catalog):
    assert catalog.default_package_key == "standard"
    assert catalog.packages["standard"].price == 220000
    assert catalog.options[NO_OPTION_KEY].price == 0
    assert catalog.options["banquet"].price == 50000
    assert catalog.get_discount("partner").price == -10000
    assert catalog.get_discount("ghost") is None


def test_discounts_are_listed_in_catalog_order(catalog):
    ordered = catalog.ordered_discounts(["early_booking", "partner"])
    assert [d.id for d in ordered] == ["partner", "early_booking"]


def test_order_discount_ids_dedupes_and_keeps_unknown_last(catalog):
    ids = catalog.order_discount_ids(["ghost", "review", "partner", "review"])
    assert ids == ["partner", "review", "ghost"]


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "packages": {"mini": {"label": "미니", "price": 99000}},
                "discounts": [{"id": "friend", "label": "지인 할인", "price": -9000}],
            }
        ),
        encoding="utf-8",
    )
    catalog = load_catalog(str(path))
    assert catalog.default_package_key == "mini"
    assert NO_OPTION_KEY in catalog.options
    assert catalog.get_discount("friend").price == -9000


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog(str(tmp_path / "missing.json"))
