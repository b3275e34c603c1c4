from __future__ import annotations

import csv
import os

import pytest

from seller_fees.rate_tables import (
    CLOSING_FEES,
    OTHER_FEES,
    REFERRAL_FEES,
    WEIGHT_HANDLING_FEES,
    StaticProvider,
)

REFERRAL_TABLE = [
    ["Category", "Price Range", "Fee Percentage"],
    ["Electronics", "<= 500", "8%"],
    ["Electronics", "> 500 and <= 1000", "10%"],
    ["Electronics", "> 1000", "12%"],
    ["Books", "All", "5%"],
    ["Toys", "> 100 and <= 200", "7%"],
]

CLOSING_TABLE = [
    ["Price Range", "FBA Normal", "FBA Exception", "Easy Ship", "Self Ship", "Seller Flex"],
    ["₹0-₹250", "₹25", "₹12", "₹4", "₹7", "₹25"],
    ["₹251-₹500", "₹20", "₹12", "₹9", "₹20", "₹20"],
    ["₹501-₹1000", "₹15", "₹15", "₹30", "₹36", "₹15"],
    ["₹1000+", "₹30", "₹30", "₹61", "₹65", "₹30"],
]

WEIGHT_TABLE = [
    ["Descriptor", "Weight Range", "Local", "Regional", "National", "IXD"],
    ["Easy Ship - Standard - Premium", "First 500g", "₹43", "₹54.5", "₹76", "-"],
    ["Easy Ship - Standard - Premium", "Additional 500g up to 1kg", "₹16", "₹20", "₹32", "-"],
    ["Easy Ship - Standard - Premium", "Additional kg after 1kg", "₹21", "₹23", "₹33", "-"],
    ["FBA - Standard - All Levels", "First 500g", "₹29", "₹29", "", "₹25"],
    ["FBA - Standard - All Levels", "Additional kg after 1kg", "₹13", "₹13", "", "NA"],
    ["FBA - Oversize/Heavy & Bulky - All Levels", "First 12kg", "₹192", "₹192", "₹192", "₹192"],
    ["FBA - Oversize/Heavy & Bulky - All Levels", "Additional kg after 12kg", "₹5", "₹5", "₹5", "₹5"],
]

OTHER_TABLE = [
    ["Fee Type", "Category", "Rate"],
    ["Pick & Pack Fee", "Standard Size", "₹14"],
    ["Pick & Pack Fee", "Oversize/Heavy & Bulky", "₹26"],
    ["Storage Fee", "All Categories", "₹45 per cubic foot per month"],
    ["Removal Fees", "Standard Size - Standard Shipping", "₹10"],
    ["Removal Fees", "Standard Size - Expedited Shipping", "₹25"],
    ["Removal Fees", "Heavy & Bulky - Standard Shipping", "₹100"],
    ["Removal Fees", "Heavy & Bulky - Expedited Shipping", "₹150"],
]

ALL_TABLES = {
    REFERRAL_FEES: REFERRAL_TABLE,
    CLOSING_FEES: CLOSING_TABLE,
    WEIGHT_HANDLING_FEES: WEIGHT_TABLE,
    OTHER_FEES: OTHER_TABLE,
}


@pytest.fixture
def tables():
    return {name: [list(row) for row in rows] for name, rows in ALL_TABLES.items()}


@pytest.fixture
def provider(tables):
    return StaticProvider(tables)


@pytest.fixture
def transaction_data():
    return {
        "productCategory": "Electronics",
        "sellingPrice": 600,
        "weight": 0.7,
        "shippingMode": "Easy Ship",
        "serviceLevel": "Premium",
        "productSize": "Standard",
        "location": "Local",
        "shippingType": "Standard",
    }


def write_table_csv(directory, name, rows):
    path = os.path.join(directory, f"{name}.csv")
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows(rows)
    return path


@pytest.fixture
def rates_dir(tmp_path):
    for name, rows in ALL_TABLES.items():
        write_table_csv(tmp_path, name, rows)
    return tmp_path
