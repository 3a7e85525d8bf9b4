"""
Tests for the command line interface.

The interpret command normally reverse-geocodes through GBIF; here the
geocoder's lookup is patched so no request leaves the test process.
"""

import csv
import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from cli import app, cluster_cli, interpret_cli, load_config

runner = CliRunner()


@pytest.fixture
def records_csv(tmp_path):
    path = tmp_path / "records.csv"
    path.write_text(
        "occurrenceID,year,month,day,eventDate,country,countryCode,decimalLatitude,decimalLongitude\n"
        "occ-1,1999,10,1,2010/2011,France,FR,48.85,2.35\n"
        "occ-2,,,,2/3/2008,Atlantis,,,\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def pairs_csv(tmp_path):
    path = tmp_path / "pairs.csv"
    path.write_text("id1,id2\nA,B\nB,C\n", encoding="utf-8")
    return path


@pytest.fixture
def features_jsonl(tmp_path):
    path = tmp_path / "features.jsonl"
    rows = [
        {"id": "A", "decimalLatitude": 12.3, "decimalLongitude": 1.0},
        {"id": "B", "decimalLatitude": 12.34, "decimalLongitude": 1.0, "year": 2001, "month": 1, "day": 1},
        {"id": "C", "decimalLatitude": None, "decimalLongitude": None},
    ]
    path.write_text("".join(json.dumps(row) + "\n" for row in rows), encoding="utf-8")
    return path


class TestLoadConfig:
    """Tests for configuration loading."""

    def test_defaults(self):
        """Test that the packaged defaults are loaded."""
        cfg = load_config(None)

        assert cfg["temporal"]["date_order"] == "DMY"
        assert cfg["clustering"]["merge_strategy"] == "first"
        assert cfg["gbif"]["retry_attempts"] == 3

    def test_user_file_overrides_nested_keys(self, tmp_path):
        """Test that a user file is deep-merged over the defaults."""
        user = tmp_path / "user.toml"
        user.write_text('[temporal]\ndate_order = "MDY"\n', encoding="utf-8")

        cfg = load_config(user)

        assert cfg["temporal"]["date_order"] == "MDY"
        assert cfg["temporal"]["min_year"] == 1600


class TestInterpretCommand:
    """Tests for the interpret command."""

    def test_interpret_cli_with_matcher(self, tmp_path, records_csv, box_matcher):
        """Test the interpret entry point with an injected point matcher."""
        output = tmp_path / "out"

        count = interpret_cli(records_csv, output, point_matcher=box_matcher)

        assert count == 2
        rows = [json.loads(line) for line in (output / "interpreted.jsonl").read_text().splitlines()]
        assert rows[0]["eventDate"] == "2010/2011"
        assert rows[0]["countryCode"] == "FR"
        assert rows[0]["issues"] == ["GEODETIC_DATUM_ASSUMED_WGS84"]
        assert rows[1]["issues"] == ["RECORDED_DATE_INVALID", "COUNTRY_INVALID"]
        assert (output / "issues.csv").exists()
        assert (output / "run.log").exists()

    @patch("qc.gbif.GbifGeocoder.country_code", return_value="FR")
    def test_interpret_command(self, mock_country_code, tmp_path, records_csv):
        """Test the interpret command end to end."""
        output = tmp_path / "out"

        result = runner.invoke(app, ["interpret", "--input", str(records_csv), "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert "Interpreted 2 records" in result.output
        with (output / "issues.csv").open(newline="") as f:
            issues = {row["issue"]: row["count"] for row in csv.DictReader(f)}
        assert issues["RECORDED_DATE_INVALID"] == "1"
        assert mock_country_code.called

    def test_missing_input(self, tmp_path):
        """Test that a missing input file is rejected by the CLI."""
        result = runner.invoke(
            app, ["interpret", "--input", str(tmp_path / "nope.csv"), "--output", str(tmp_path / "out")]
        )

        assert result.exit_code != 0


class TestClusterCommand:
    """Tests for the cluster command."""

    def test_cluster_cli(self, tmp_path, pairs_csv, features_jsonl):
        """Test clustering with representative selection."""
        output = tmp_path / "out"

        assert cluster_cli(pairs_csv, features_jsonl, output) == 1

        with (output / "clusters.csv").open(newline="") as f:
            rows = list(csv.DictReader(f))
        assert [(row["id"], row["isRepresentative"]) for row in rows] == [
            ("A", "false"),
            ("B", "true"),
            ("C", "false"),
        ]

    def test_cluster_command(self, tmp_path, pairs_csv, features_jsonl):
        """Test the cluster command end to end."""
        output = tmp_path / "out"

        result = runner.invoke(
            app,
            ["cluster", "-p", str(pairs_csv), "-r", str(features_jsonl), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert "Wrote 1 clusters" in result.output

    def test_cluster_command_missing_record(self, tmp_path, features_jsonl):
        """Test that an unknown identifier fails the command."""
        pairs = tmp_path / "pairs.csv"
        pairs.write_text("id1,id2\nA,Z\n", encoding="utf-8")

        result = runner.invoke(
            app,
            ["cluster", "-p", str(pairs), "-r", str(features_jsonl), "-o", str(tmp_path / "out")],
        )

        assert result.exit_code == 1
