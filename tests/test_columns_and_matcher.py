from import_engine.center_matcher import CenterIndex, normalize_center_name
from import_engine.columns import header_key, resolve
from import_engine.field_map import CENTER_NAME
from import_engine.report import HealthcareCenterRef


# ── Column resolver ───────────────────────────────────────────────────

def test_exact_key_wins_over_case_insensitive():
    row = {"phc name": "lower", "PHC Name": "exact"}
    assert resolve(row, CENTER_NAME) == "exact"


def test_case_and_whitespace_insensitive_header():
    assert resolve({" phc name ": "Ward 3"}, CENTER_NAME) == "Ward 3"
    assert resolve({"HEALTHCARE CENTER": "Ward 3"}, CENTER_NAME) == "Ward 3"
    assert resolve({"Stock  End": "5"}, ["Stock End"]) == "5"
    assert resolve({"Outreach\tDoses": "2"}, ["Outreach Doses"]) == "2"


def test_candidates_tried_in_order_and_none_cells_skipped():
    row = {"PHC Name": None, "Center Name": "Gwale", "Healthcare Center": "Other"}
    assert resolve(row, CENTER_NAME) == "Gwale"


def test_absent_column_resolves_to_none():
    assert resolve({"Month": "3"}, CENTER_NAME) is None
    assert resolve({}, ["Anything"]) is None


def test_header_key_strips_all_whitespace():
    assert header_key("  PHC  Name ") == "phcname"
    assert header_key("Stock\tBeginning") == "stockbeginning"


# ── Center matcher ────────────────────────────────────────────────────

def test_normalization_collapses_case_spaces_and_punctuation():
    assert normalize_center_name("St. Mary's Clinic") == "stmarysclinic"
    assert normalize_center_name("st marys clinic") == "stmarysclinic"
    assert normalize_center_name("Ward-3 (PHC)") == "ward3phc"


def test_index_matches_normalized_names(centers):
    index = CenterIndex(centers)
    assert len(index) == 3
    assert index.match("ST MARYS CLINIC").id == "c-1"
    assert index.match("ward 3 phc").id == "c-2"
    assert index.match("Unknown Clinic") is None
    assert index.match("  ") is None


def test_no_approximate_matching(centers):
    index = CenterIndex(centers)
    assert index.match("St Marys Clinc") is None


def test_colliding_names_last_loaded_wins():
    index = CenterIndex([
        HealthcareCenterRef(id="a", name="Ward 1 PHC"),
        HealthcareCenterRef(id="b", name="Ward-1 PHC"),
    ])
    assert index.match("ward 1 phc").id == "b"
    assert index.collisions == {"ward1phc": ["Ward 1 PHC"]}
