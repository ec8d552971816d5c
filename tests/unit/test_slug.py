from __future__ import annotations

import pytest

from dimcheck.spec.slug import slugify


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Mardi Marble Side Table", "mardi-marble-side-table"),
        ("  Round   Side--Table  ", "round-side-table"),
        ("Side_Table (24in)", "side-table-24in"),
        ("---", ""),
        ("   ", ""),
        ("Café Chair", "caf-chair"),
        ("ABC123", "abc123"),
    ],
)
def test_slugify_examples(text, expected):
    assert slugify(text) == expected


def test_slugify_empty_and_none():
    assert slugify("") == ""
    assert slugify(None) == ""


@pytest.mark.parametrize(
    "text",
    ["Round Side Table", "a--b__c", "-x-", "Ünïcödé 12.5\" W", "", "sku#4471/B"],
)
def test_slugify_is_idempotent(text):
    once = slugify(text)
    assert slugify(once) == once


def test_slugify_has_no_edge_or_double_hyphens():
    slug = slugify("..Lounge  //  Chair!!")
    assert slug == "lounge-chair"
    assert "--" not in slug
