"""
Tests for binary persistence and JSON anomaly export.
"""

import json
import math
from unittest.mock import patch

from envmonitor.core.models import Reading
from envmonitor.storage.persistence import RECORD_SIZE, ReadingPersistence


class TestBinaryStorage:
    """Tests for append / replace / load of the binary data file."""

    def test_record_size(self):
        """Test the fixed record width (int64 + 3 x float64)."""
        assert RECORD_SIZE == 32

    def test_store_single_reading(self, persistence, normal_reading):
        """Test appending and reloading one reading."""
        assert persistence.append(normal_reading) is True

        assert persistence.binary_path.stat().st_size == RECORD_SIZE
        assert persistence.load_all() == [normal_reading]

    def test_store_batch(self, persistence, sample_readings):
        """Test appending a batch."""
        assert persistence.append_batch(sample_readings) is True

        assert persistence.load_all() == sample_readings

    def test_round_trip_full_precision(self, persistence):
        """Test that the binary format preserves every bit of each field."""
        readings = [
            Reading(1700000000123, 22.123456789, 45.987654321, 0.1 + 0.2),
            Reading(-1, -273.15, 1e-300, 1e300),
            Reading(2**62, 0.0, -0.0, 123456.789),
        ]

        persistence.append_batch(readings)

        assert persistence.load_all() == readings

    def test_nan_survives_round_trip(self, persistence):
        """Test that NaN fields are stored and loaded as NaN."""
        persistence.append(Reading(1, math.nan, 50.0, 500.0))

        loaded = persistence.load_all()

        assert len(loaded) == 1
        assert math.isnan(loaded[0].temperature)

    def test_empty_batch(self, persistence):
        """Test that an empty batch creates an empty file."""
        assert persistence.append_batch([]) is True

        assert persistence.load_all() == []

    def test_multiple_batches_accumulate(self, persistence, sample_readings):
        """Test that successive appends accumulate in order."""
        persistence.append_batch(sample_readings[:2])
        persistence.append(sample_readings[2])
        persistence.append_batch(sample_readings[3:])

        assert persistence.load_all() == sample_readings

    def test_replace_all(self, persistence, sample_readings):
        """Test that replace_all discards the previous contents."""
        persistence.append_batch(sample_readings)
        replacement = [Reading(9000, 21.0, 40.0, 400.0), Reading(9001, 22.0, 41.0, 401.0)]

        assert persistence.replace_all(replacement) is True

        assert persistence.load_all() == replacement

    def test_replace_all_with_empty_batch(self, persistence, sample_readings):
        """Test that replacing with nothing truncates the file."""
        persistence.append_batch(sample_readings)

        assert persistence.replace_all([]) is True

        assert persistence.load_all() == []

    def test_load_missing_file(self, persistence):
        """Test that a missing file loads as an empty list."""
        assert not persistence.binary_path.exists()
        assert persistence.load_all() == []

    def test_load_empty_file(self, persistence):
        """Test that an empty file loads as an empty list."""
        persistence.binary_path.write_bytes(b"")

        assert persistence.load_all() == []

    def test_truncated_tail_is_dropped(self, persistence, sample_readings):
        """Test that a partial trailing record is silently ignored."""
        persistence.append_batch(sample_readings[:3])
        with open(persistence.binary_path, "ab") as f:
            f.write(b"\x01" * (RECORD_SIZE - 5))

        assert persistence.load_all() == sample_readings[:3]

    def test_write_to_unwritable_path(self, tmp_path, normal_reading):
        """Test that an unwritable path reports failure."""
        persistence = ReadingPersistence(tmp_path / "missing" / "data.bin", tmp_path / "r.json")

        assert persistence.append(normal_reading) is False
        assert persistence.append_batch([normal_reading]) is False
        assert persistence.replace_all([normal_reading]) is False

    def test_load_from_directory_returns_empty(self, tmp_path):
        """Test that a path that cannot be read as a file loads nothing."""
        persistence = ReadingPersistence(tmp_path, tmp_path / "r.json")

        assert persistence.load_all() == []

    def test_invalid_record_aborts_batch(self, persistence, sample_readings):
        """Test that a failing record aborts the rest of the batch without rollback."""
        bad = Reading("not-a-timestamp", 20.0, 50.0, 500.0)

        assert persistence.append_batch([sample_readings[0], bad, sample_readings[1]]) is False

        assert persistence.load_all() == [sample_readings[0]]

    def test_short_write_is_failure(self, persistence, normal_reading):
        """Test that a write returning fewer bytes than a record is a failure."""
        with patch("envmonitor.storage.persistence.open", create=True) as mock_open:
            mock_open.return_value.__enter__.return_value.write.return_value = 7

            assert persistence.append(normal_reading) is False


class TestExportAnomalies:
    """Tests for the JSON anomaly report."""

    def test_export_empty(self, persistence):
        """Test that no anomalies produce a valid empty array."""
        assert persistence.export_anomalies([]) is True

        text = persistence.report_path.read_text()
        assert json.loads(text) == []
        assert text.strip() == "[]"

    def test_export_single(self, persistence):
        """Test the field names of an exported reading."""
        reading = Reading(1640995200000, 12.0, 50.0, 300.0)

        persistence.export_anomalies([reading])

        assert json.loads(persistence.report_path.read_text()) == [
            {
                "timestamp_ms": 1640995200000,
                "temperature": 12.0,
                "humidity": 50.0,
                "lightIntensity": 300.0,
            }
        ]

    def test_export_multiple_full_precision(self, persistence):
        """Test that numeric values keep full precision and order."""
        readings = [Reading(1, 12.345678901, 50.0, 300.0), Reading(2, 35.1, 80.987654321, 50.0)]

        persistence.export_anomalies(readings)

        data = json.loads(persistence.report_path.read_text())
        assert [
            Reading(d["timestamp_ms"], d["temperature"], d["humidity"], d["lightIntensity"])
            for d in data
        ] == readings

    def test_export_is_pretty_printed(self, persistence, normal_reading):
        """Test 2-space indentation and numeric (not string) literals."""
        persistence.export_anomalies([normal_reading])

        text = persistence.report_path.read_text()
        assert '\n  {\n    "timestamp_ms": 1640995200000,' in text
        assert '"temperature": 22.0' in text

    def test_export_overwrites_previous_report(self, persistence, sample_readings):
        """Test that each export replaces the report."""
        persistence.export_anomalies(sample_readings)
        persistence.export_anomalies([])

        assert json.loads(persistence.report_path.read_text()) == []

    def test_export_to_unwritable_path(self, tmp_path, normal_reading):
        """Test that an unwritable report path reports failure."""
        persistence = ReadingPersistence(tmp_path / "d.bin", tmp_path / "missing" / "r.json")

        assert persistence.export_anomalies([normal_reading]) is False

    def test_export_non_finite_values_as_null(self, persistence):
        """Test that NaN and infinite values are exported as null so the report stays strict JSON."""
        readings = [Reading(5, 12.0, math.nan, 300.0), Reading(6, math.inf, 50.0, -math.inf)]

        assert persistence.export_anomalies(readings) is True

        def reject_constant(name):
            raise ValueError(f"non-standard JSON constant {name}")

        data = json.loads(persistence.report_path.read_text(), parse_constant=reject_constant)
        assert data == [
            {"timestamp_ms": 5, "temperature": 12.0, "humidity": None, "lightIntensity": 300.0},
            {"timestamp_ms": 6, "temperature": None, "humidity": 50.0, "lightIntensity": None},
        ]
