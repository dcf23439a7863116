"""
import_engine.field_map - Spreadsheet column aliases.

Each canonical report field lists the header spellings accepted for it,
in lookup order.  These header names are the external contract with the
people filling in the spreadsheets, so change them with care.
"""

# Canonical field  →  accepted headers
CENTER_NAME     = ("PHC Name", "PHCName", "Center Name", "Healthcare Center")
MONTH           = ("Month", "Report Month")
YEAR            = ("Year", "Report Year")

STOCK_BEGINNING = ("Stock Beginning", "StockBeginning", "Beginning Stock")
STOCK_END       = ("Stock End", "StockEnd", "Ending Stock")
FIXED_DOSES     = ("Fixed Doses", "FixedDoses")
OUTREACH_DOSES  = ("Outreach Doses", "OutreachDoses")

IN_STOCK          = ("In Stock", "InStock")
SHORTAGE          = ("Shortage",)
SHORTAGE_RESPONSE = ("Shortage Response", "ShortageResponse")
OUTREACH          = ("Outreach",)
MISINFORMATION    = ("Misinformation",)
DHIS_CHECK        = ("DHIS Check", "DHISCheck")

# Numeric fields: attribute → (display label, aliases).  All-or-nothing per row.
NUMERIC_FIELDS: dict[str, tuple[str, tuple[str, ...]]] = {
    "stock_beginning": ("Stock Beginning", STOCK_BEGINNING),
    "stock_end":       ("Stock End", STOCK_END),
    "fixed_doses":     ("Fixed Doses", FIXED_DOSES),
    "outreach_doses":  ("Outreach Doses", OUTREACH_DOSES),
}

# Boolean fields: attribute → (aliases, default when blank/unrecognised)
BOOLEAN_FIELDS: dict[str, tuple[tuple[str, ...], bool]] = {
    "in_stock":   (IN_STOCK, True),
    "shortage":   (SHORTAGE, False),
    "outreach":   (OUTREACH, False),
    "dhis_check": (DHIS_CHECK, False),
}

TEXT_FIELDS: dict[str, tuple[str, ...]] = {
    "shortage_response": SHORTAGE_RESPONSE,
    "misinformation":    MISINFORMATION,
}

# Headers the parser insists on: display name → aliases satisfying it
REQUIRED_COLUMNS: dict[str, tuple[str, ...]] = {
    "PHC Name":        CENTER_NAME,
    "Month":           MONTH,
    "Year":            YEAR,
    "Stock Beginning": STOCK_BEGINNING,
    "Stock End":       STOCK_END,
    "Fixed Doses":     FIXED_DOSES,
    "Outreach Doses":  OUTREACH_DOSES,
}
