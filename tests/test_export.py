import csv
import io
from datetime import datetime, timezone

from leadscan.core.models import Business, ScanQuery, SocialFootprint
from leadscan.etl import export


def _business(**overrides):
    values = dict(id="NODE-ABCD-0001", name="Acme", social_footprint=SocialFootprint(linkedin="https://linkedin.com/company/acme"))
    values.update(overrides)
    return Business(**values)


def test_csv_quotes_every_field_and_doubles_quotes():
    content = export.businesses_to_csv([_business(name='The "Best" Cafe', description="Busy, loud")])
    lines = content.splitlines()

    assert lines[0].startswith('"Matrix ID","Business Name"')
    assert '"The ""Best"" Cafe"' in lines[1]
    assert '"Busy, loud"' in lines[1]
    assert lines[1].startswith('"NODE-ABCD-0001"')


def test_csv_round_trips_through_reader():
    rows = list(csv.reader(io.StringIO(export.businesses_to_csv([_business(), _business(id="NODE-ABCD-0002")]))))

    assert rows[0] == export.CSV_HEADERS
    assert len(rows) == 3
    assert rows[1][8] == "https://linkedin.com/company/acme"
    assert rows[1][9] == "N/A"


def test_export_filename_replaces_whitespace():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    name = export.export_filename(ScanQuery(category="dental  clinics", location="Lagos"), now)
    assert name == f"OM_EXTRACT_dental_clinics_{int(now.timestamp() * 1000)}.csv"


def test_write_csv_creates_file(tmp_path):
    path = export.write_csv(tmp_path / "out" / "leads.csv", [_business()])
    assert path.read_text(encoding="utf-8").startswith('"Matrix ID"')
