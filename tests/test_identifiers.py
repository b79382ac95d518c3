from datetime import datetime
import re

from pytest import raises

from openhim_mediators.identifiers import generate_cross_border_id

CROSS_BORDER_ID = re.compile(r'^[A-Z]{2}-\d{4}-\d{2}-[0-9A-Z]{5}$')


def test_format():
    for jurisdiction in ("kenya", "KE", "Uganda", "tz-dar", "rw"):
        assert CROSS_BORDER_ID.match(generate_cross_border_id(jurisdiction))


def test_prefix_and_date():
    cbid = generate_cross_border_id("kenya", now=datetime(2024, 3, 9))
    assert cbid.startswith("KE-2024-03-")

    cbid = generate_cross_border_id("uganda", now=datetime(2023, 11, 30))
    assert cbid.startswith("UG-2023-11-")


def test_suffix_varies():
    ids = {generate_cross_border_id("kenya") for _ in range(20)}
    assert len(ids) > 1


def test_invalid_jurisdiction():
    for jurisdiction in ("", "k", "1a", "K-"):
        with raises(ValueError):
            generate_cross_border_id(jurisdiction)


def test_prefix_upper_cased_before_slicing():
    cbid = generate_cross_border_id("ßa", now=datetime(2024, 3, 9))
    assert cbid.startswith("SS-2024-03-")
