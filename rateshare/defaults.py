"""Built-in seed snapshots for each collection and wizard suggestion data."""

from __future__ import annotations

from rateshare.schema import CALCULATORS, CHARGES, CUSTOMERS, INSURANCES, RESTRICTIONS


CALCULATOR_SEED = [
    {
        "customerName": "Acme Logistics",
        "customerCode": "ACM001",
        "quoteNumber": "Q-2025-0001",
        "validFrom": "2025-10-01",
        "validTo": "2026-03-31",
        "zip": "2100",
        "city": "Copenhagen",
        "country": "DK",
        "salesContact": "M. Jensen",
        "salesOffice": "Copenhagen",
    },
    {
        "customerName": "Nordic Freight A/S",
        "customerCode": "NFX888",
        "quoteNumber": "Q-2025-0042",
        "validFrom": "2025-09-15",
        "validTo": "2026-09-14",
        "zip": "8000",
        "city": "Aarhus",
        "country": "DK",
        "salesContact": "S. Larsen",
        "salesOffice": "Aarhus",
    },
]

CUSTOMER_SEED = [
    {
        "customerName": "Acme Logistics",
        "contactName": "Mary Jensen",
        "telephone": "+45 11 22 33 44",
        "email": "mary@acme.com",
        "refs": "ACM001",
    },
    {
        "customerName": "Nordic Freight A/S",
        "contactName": "Soren Larsen",
        "telephone": "+45 22 33 44 55",
        "email": "soren@nfx.dk",
        "refs": "NFX888",
    },
]

CHARGE_SEED = [
    {
        "name": "Energitillæg",
        "originCountry": "DK",
        "originZip": "*",
        "destCountry": "World",
        "destZip": "*",
        "currency": "DKK",
        "calcType": "Percentage",
        "amount": 10,
        "minCharge": "-",
        "maxCharge": "-",
        "validFrom": "2025-01-01",
        "validTo": "2025-12-31",
        "isService": False,
    },
]

RESTRICTION_SEED = [
    {"text": "Pallet max 10", "unitType": "pll", "unitsMax": 10, "weightMax": 1200},
]

INSURANCE_SEED = [
    {
        "name": "Basic",
        "order": 0,
        "infoText": "Standard coverage",
        "chargeText": "1% of cargo",
        "currency": "DKK",
        "amount": 100,
        "link": "#",
    },
]

DEFAULT_SEEDS = {
    CALCULATORS: CALCULATOR_SEED,
    CUSTOMERS: CUSTOMER_SEED,
    CHARGES: CHARGE_SEED,
    RESTRICTIONS: RESTRICTION_SEED,
    INSURANCES: INSURANCE_SEED,
}

# Typeahead list offered by the wizard's "map to existing customer" step.
CUSTOMER_SUGGESTIONS = [
    "Acme Logistics",
    "Nordic Freight A/S",
    "Polar Express Co.",
    "Zentao Manufacturing",
    "GreenSea Importers",
]
