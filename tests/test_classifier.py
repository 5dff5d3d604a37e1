import pytest

from septa_crawler.classifier import is_bid_related
from septa_crawler.dedup import title_hash


@pytest.mark.parametrize("text", [
    "RFP-2024-001 IT Services",
    "ELEVATOR MAINTENANCE",
    "Invitation for Bid: Track Repair",
    "Request for Quote - Office Supplies",
])
def test_bid_text_qualifies(text):
    assert is_bid_related(text)


@pytest.mark.parametrize("text", ["", "Home", "Contact us | Privacy policy", "Welcome back, Alice"])
def test_non_bid_text_rejected(text):
    assert not is_bid_related(text)


def test_title_hash_is_stable():
    title = "Requisition 101 Bus Maintenance Services"
    assert title_hash(title) == title_hash("Requisition 101 " + "Bus Maintenance Services")
    assert len(title_hash(title)) == 64


def test_title_hash_distinguishes_titles():
    titles = [
        "Requisition 101 Bus Maintenance Services",
        "Requisition 102 Bus Maintenance Services",
        "Requisition 101 Bus Maintenance Service",
        "RFP-2024-001 IT Services",
        "RFQ 88-12 Rail Car Cleaning Supplies",
        "Construction of Platform Canopy, 69th St",
    ]
    assert len({title_hash(t) for t in titles}) == len(titles)


def test_title_hash_is_sha256_hex():
    assert title_hash("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
