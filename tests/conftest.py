import pytest

from db import init_db, get_session, HealthcareCenter
from import_engine.errors import StoreError
from import_engine.report import HealthcareCenterRef
from main import create_app


HEADER = "PHC Name,Month,Year,Stock Beginning,Stock End,Fixed Doses,Outreach Doses"


class FakeCenterStore:
    """In-memory center snapshot."""

    def __init__(self, centers):
        self.centers = list(centers)
        self.calls = 0

    def list_centers(self):
        self.calls += 1
        return list(self.centers)


class FakeReportStore:
    """Keeps upserted rows keyed on (center_id, report_month); can fail chosen calls."""

    def __init__(self, fail_calls=()):
        self.fail_calls = set(fail_calls)
        self.calls = 0
        self.batches = []
        self.rows = {}

    def upsert_reports(self, records):
        self.calls += 1
        self.batches.append(list(records))
        if self.calls in self.fail_calls:
            raise StoreError("connection reset")
        for rec in records:
            self.rows[(rec["center_id"], rec["report_month"])] = dict(rec)


@pytest.fixture
def centers():
    return [
        HealthcareCenterRef(id="c-1", name="St. Mary's Clinic", state="Kano", lga="Nassarawa"),
        HealthcareCenterRef(id="c-2", name="Ward 3 PHC", state="Kano", lga="Fagge"),
        HealthcareCenterRef(id="c-3", name="Gwale Health Post", state="Lagos", lga="Ikeja"),
    ]


@pytest.fixture
def center_store(centers):
    return FakeCenterStore(centers)


@pytest.fixture
def report_store():
    return FakeReportStore()


@pytest.fixture
def session():
    """Fresh in-memory database per test."""
    init_db("sqlite://")
    s = get_session()
    yield s
    s.close()


@pytest.fixture
def db_centers(session):
    """Two persisted centers: one treatment, one control."""
    a = HealthcareCenter(name="St. Mary's Clinic", area="Central", state="Kano",
                         lga="Nassarawa", latitude=12.0, longitude=8.5,
                         is_treatment_area=True)
    b = HealthcareCenter(name="Ward 3 PHC", area="North", state="Lagos", lga="Ikeja")
    session.add_all([a, b])
    session.commit()
    return a, b


@pytest.fixture
def app():
    app = create_app("sqlite://")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def user_headers():
    return {"X-User-Id": "user-42"}


def csv_bytes(*lines, header=HEADER):
    return ("\n".join((header,) + lines) + "\n").encode("utf-8")


@pytest.fixture
def make_csv():
    return csv_bytes


@pytest.fixture
def make_report_store():
    """Factory: make_report_store(fail_calls=(2,)) fails the 2nd upsert call."""
    return FakeReportStore
