"""
Tests for the GBIF reverse-geocode client.

Tests cover:
- Picking the country code from a reverse-geocode response
- Retry and backoff on network errors
- Response caching
- Configuration

Note: These tests patch ``urlopen`` so the GBIF API is never contacted.
"""

import json
from unittest.mock import MagicMock, patch
from urllib.error import URLError

import pytest

from interpretation.location.coordinates import LatLng
from qc.gbif import DEFAULT_REVERSE_GEOCODE_ENDPOINT, GbifGeocoder, pick_country_code


def _response(payload):
    """Build a context-manager mock that ``json.load`` can read."""
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode("utf-8")
    response.__enter__.return_value = response
    return response


@pytest.fixture
def geocoder(vocabulary):
    """Geocoder with fast retries."""
    return GbifGeocoder(retry_attempts=3, backoff_factor=0.5, vocabulary=vocabulary)


class TestPickCountryCode:
    """Tests for choosing among the returned areas."""

    def test_political_area_wins(self):
        """Test that a political area is preferred over an EEZ."""
        areas = [
            {"type": "EEZ", "isoCountryCode2Digit": "GB"},
            {"type": "Political", "isoCountryCode2Digit": "FR"},
        ]

        assert pick_country_code(areas) == "FR"

    def test_eez_used_offshore(self):
        """Test that an EEZ code is used when no political area is returned."""
        areas = [
            {"type": "IHO", "isoCountryCode2Digit": "XZ"},
            {"type": "EEZ", "isoCountryCode2Digit": "AU"},
        ]

        assert pick_country_code(areas) == "AU"

    def test_no_codes(self):
        """Test responses without any country code."""
        assert pick_country_code([]) is None
        assert pick_country_code([{"type": "Political"}, "junk"]) is None


class TestLookup:
    """Tests for point-in-country lookups."""

    @patch("qc.gbif.urlopen")
    def test_returns_country(self, mock_urlopen, geocoder):
        """Test a successful lookup."""
        mock_urlopen.return_value = _response([{"type": "Political", "isoCountryCode2Digit": "DE"}])

        country = geocoder(LatLng(52.5, 13.4))

        assert country.code == "DE"
        url = mock_urlopen.call_args[0][0]
        assert url.startswith(DEFAULT_REVERSE_GEOCODE_ENDPOINT)
        assert "lat=52.5" in url and "lng=13.4" in url

    @patch("qc.gbif.urlopen")
    def test_ocean_has_no_country(self, mock_urlopen, geocoder):
        """Test a coordinate outside any country."""
        mock_urlopen.return_value = _response([])

        assert geocoder(LatLng(0.0, -20.0)) is None

    @patch("qc.gbif.urlopen")
    def test_unknown_code(self, mock_urlopen, geocoder):
        """Test a code missing from the vocabulary."""
        mock_urlopen.return_value = _response([{"type": "Political", "isoCountryCode2Digit": "XZ"}])

        assert geocoder(LatLng(1.0, 1.0)) is None

    @patch("qc.gbif.urlopen")
    def test_results_are_cached(self, mock_urlopen, geocoder):
        """Test that repeated lookups hit the network once."""
        mock_urlopen.return_value = _response([{"type": "Political", "isoCountryCode2Digit": "FR"}])

        geocoder(LatLng(48.0, 2.0))
        geocoder(LatLng(48.0, 2.0))

        assert mock_urlopen.call_count == 1


class TestRetries:
    """Tests for error handling."""

    @patch("qc.gbif.time.sleep")
    @patch("qc.gbif.urlopen")
    def test_retries_with_backoff(self, mock_urlopen, mock_sleep, geocoder):
        """Test exponential backoff before a successful attempt."""
        mock_urlopen.side_effect = [
            URLError("timeout"),
            URLError("timeout"),
            _response([{"type": "Political", "isoCountryCode2Digit": "BR"}]),
        ]

        assert geocoder(LatLng(-10.0, -50.0)).code == "BR"
        assert [call.args[0] for call in mock_sleep.call_args_list] == [0.5, 1.0]

    @patch("qc.gbif.time.sleep")
    @patch("qc.gbif.urlopen")
    def test_gives_up(self, mock_urlopen, mock_sleep, geocoder, caplog):
        """Test that persistent errors yield no country instead of raising."""
        mock_urlopen.side_effect = URLError("unreachable")

        assert geocoder(LatLng(10.0, 10.0)) is None
        assert mock_urlopen.call_count == 3
        assert mock_sleep.call_count == 2
        assert "failed after 3 attempts" in caplog.text

    @patch("qc.gbif.time.sleep")
    @patch("qc.gbif.urlopen")
    def test_bad_json(self, mock_urlopen, mock_sleep, geocoder):
        """Test that an undecodable body is retried like a network error."""
        broken = MagicMock()
        broken.read.return_value = b"<html>"
        broken.__enter__.return_value = broken
        mock_urlopen.return_value = broken

        assert geocoder.country_code(LatLng(10.0, 10.0)) is None


class TestConfig:
    """Tests for configuration."""

    def test_from_config(self, vocabulary):
        """Test reading the ``[gbif]`` section."""
        cfg = {"gbif": {"reverse_geocode_endpoint": "http://localhost/reverse", "retry_attempts": 1, "timeout": 2.5}}

        geocoder = GbifGeocoder.from_config(cfg, vocabulary)

        assert geocoder.reverse_geocode_endpoint == "http://localhost/reverse"
        assert geocoder.retry_attempts == 1
        assert geocoder.timeout == 2.5
        assert geocoder.vocabulary is vocabulary
        assert geocoder.url_for(LatLng(1.5, -2.0)) == "http://localhost/reverse?lat=1.5&lng=-2.0"
