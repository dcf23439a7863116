from datetime import datetime, timezone

from import_engine.persister import persist_reports, stamp
from import_engine.report import CanonicalReport


def _report(i: int, month: str = "2024-05-01") -> CanonicalReport:
    return CanonicalReport(
        center_id=f"c-{i}", center_name=f"Center {i}", report_month=month,
        in_stock=True, stock_beginning=10, stock_end=5, shortage=False,
        shortage_response=None, outreach=False, fixed_doses=3,
        outreach_doses=2, total_doses=5, misinformation=None, dhis_check=False,
    )


def test_failed_batch_does_not_block_later_batches(make_report_store):
    """250 reports, batch 2 of 3 fails → 100 + 50 saved, one error naming batch 2."""
    store = make_report_store(fail_calls={2})
    result = persist_reports(store, [_report(i) for i in range(250)], "user-1", batch_size=100)

    assert store.calls == 3
    assert [len(b) for b in store.batches] == [100, 100, 50]
    assert result.saved_count == 150
    assert len(result.errors) == 1
    assert "batch 2" in result.errors[0]
    assert "rows 101-200" in result.errors[0]
    assert result.success is False


def test_default_batch_size_is_100(make_report_store):
    store = make_report_store()
    result = persist_reports(store, [_report(i) for i in range(201)], "user-1")
    assert [len(b) for b in store.batches] == [100, 100, 1]
    assert result.success and result.saved_count == 201


def test_records_stamped_with_user_and_time(make_report_store):
    now = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)
    store = make_report_store()
    persist_reports(store, [_report(1)], "user-9", now=now)
    rec = store.batches[0][0]
    assert rec["created_by"] == "user-9"
    assert rec["created_at"] == now
    assert rec["total_doses"] == 5


def test_upsert_keeps_one_row_per_center_month(make_report_store):
    store = make_report_store()
    first = persist_reports(store, [_report(1)], "u")
    second = persist_reports(store, [_report(1)], "u")
    assert first.saved_count == second.saved_count == 1
    assert list(store.rows) == [("c-1", "2024-05-01")]


def test_missing_user_rejected_without_calls(make_report_store):
    store = make_report_store()
    result = persist_reports(store, [_report(1)], "")
    assert result.to_dict() == {
        "success": False,
        "saved_count": 0,
        "errors": ["User ID is required for saving reports"],
    }
    assert store.calls == 0


def test_nothing_to_save(make_report_store):
    store = make_report_store()
    result = persist_reports(store, [], "u")
    assert result.success and result.saved_count == 0
    assert store.calls == 0


def test_stamp_does_not_mutate_reports():
    report = _report(1)
    records = stamp([report], "u")
    records[0]["fixed_doses"] = 99
    assert report.fixed_doses == 3
