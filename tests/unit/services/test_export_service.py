"""Unit tests for CSV and PDF exports."""
import csv
import io
import re
from datetime import datetime
from unittest.mock import patch

import pytest

from src.models.registration import Registration
from src.services.export_service import (
    CSV_HEADERS,
    REPORT_HEADERS,
    _NumberedCanvas,
    csv_rows,
    render_csv,
    render_pdf,
    report_rows,
)
from src.utils.date_utils import format_display_time

PAGE_PATTERN = re.compile(rb"/Type /Page[^s]")


def make_registration(index, **overrides):
    values = {
        "full_name": f"Person {index}",
        "email": f"person{index}@x.com",
        "company": "Acme & Co",
        "phone": "0612345678",
        "country": "Maroc",
        "interests": ["AquaEdge"],
        "timestamp": f"2025-10-28T14:{index % 60:02d}:00+00:00",
    }
    values.update(overrides)
    return Registration(**values)


@pytest.fixture
def registrations():
    return [
        make_registration(1, team_member="Karim"),
        make_registration(2, interests=["FertiEdge", "other"], other_interest="Drones",
                          creator_email="staff@x.com"),
        make_registration(3),
    ]


class TestCsvExport:
    """Flat CSV rows."""

    def test_row_values(self, registrations):
        rows = csv_rows(registrations)

        assert rows[0]["Nom Complet"] == "Person 1"
        assert rows[0]["Inscrit par"] == "Karim"
        assert rows[1]["Solutions d'intérêt"] == "FertiEdge, other"
        assert rows[1]["Autre intérêt"] == "Drones"
        assert rows[1]["Inscrit par"] == "staff@x.com"
        assert rows[2]["Autre intérêt"] == ""
        assert rows[2]["Inscrit par"] == "N/A"
        assert rows[0]["Date d'inscription"] == format_display_time(registrations[0].timestamp)

    def test_render_csv_header_and_bom(self, registrations):
        data = render_csv(registrations)
        assert data.startswith(b"\xef\xbb\xbf")

        reader = csv.reader(io.StringIO(data.decode("utf-8-sig")))
        lines = list(reader)
        assert lines[0] == CSV_HEADERS
        assert len(lines) == 4

    def test_values_with_commas_are_quoted(self):
        data = render_csv([make_registration(1, interests=["AquaEdge", "YieldEdge"])])
        rows = list(csv.DictReader(io.StringIO(data.decode("utf-8-sig"))))
        assert rows[0]["Solutions d'intérêt"] == "AquaEdge, YieldEdge"

    def test_empty_export_has_header_only(self):
        lines = render_csv([]).decode("utf-8-sig").splitlines()
        assert lines == [",".join(CSV_HEADERS)]


class TestPdfReport:
    """Printable report."""

    def test_report_rows_order(self, registrations):
        rows = report_rows(registrations)
        assert len(rows[0]) == len(REPORT_HEADERS)
        assert rows[1][4] == "FertiEdge, other, Drones"
        assert rows[2][6] == "N/A"

    def test_render_pdf_bytes(self, registrations):
        data = render_pdf(registrations, generated_at=datetime(2025, 10, 28, 15, 0, 0))
        assert data.startswith(b"%PDF")
        assert len(PAGE_PATTERN.findall(data)) == 1

    def test_empty_report(self):
        data = render_pdf([])
        assert data.startswith(b"%PDF")

    def test_long_report_paginates_with_footer(self):
        rows = [make_registration(i) for i in range(80)]

        with patch.object(_NumberedCanvas, "drawRightString") as draw:
            data = render_pdf(rows)

        pages = len(PAGE_PATTERN.findall(data))
        assert pages > 1
        footers = [call.args[2] for call in draw.call_args_list]
        assert footers == [f"Page {n} sur {pages}" for n in range(1, pages + 1)]

    def test_markup_characters_escaped(self):
        """Names with < or & don't break paragraph parsing."""
        data = render_pdf([make_registration(1, full_name="A <b> & C")])
        assert data.startswith(b"%PDF")
