"""Unit tests for roster fetch collaborators (moto for S3, mocked HTTP)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import boto3
import pytest
import requests
from moto import mock_aws

from fakes import MemoryRosterSource
from sigdeploy.core.config import AppSettings, RosterConfig
from sigdeploy.core.exceptions import RosterUnavailable, SourceUnavailable
from sigdeploy.core.protocols import IRosterSource
from sigdeploy.roster.sources import (
    HttpRosterSource,
    LocalRosterSource,
    S3RosterSource,
    create_roster_source,
)

BUCKET = "test-rosters"
REGION = "eu-central-1"


@pytest.fixture
def s3_source():
    with mock_aws():
        client = boto3.client("s3", region_name=REGION)
        client.create_bucket(
            Bucket=BUCKET, CreateBucketConfiguration={"LocationConstraint": REGION}
        )
        client.put_object(Bucket=BUCKET, Key="signatures/roster.xlsx", Body=b"PK\x03\x04data")
        yield S3RosterSource(region=REGION)


class TestS3RosterSource:
    def test_fetch_returns_bytes(self, s3_source):
        assert s3_source.fetch(f"s3://{BUCKET}/signatures/roster.xlsx") == b"PK\x03\x04data"

    def test_missing_key_raises(self, s3_source):
        with pytest.raises(RosterUnavailable):
            s3_source.fetch(f"s3://{BUCKET}/nope.xlsx")

    def test_missing_bucket_raises(self, s3_source):
        with pytest.raises(RosterUnavailable):
            s3_source.fetch("s3://other-bucket/roster.xlsx")

    def test_bad_location_raises(self, s3_source):
        with pytest.raises(RosterUnavailable):
            s3_source.fetch(f"s3://{BUCKET}")


class TestLocalRosterSource:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "roster.csv"
        path.write_bytes(b"Version:1")
        assert LocalRosterSource().fetch(str(path)) == b"Version:1"

    def test_missing_file_is_source_unavailable(self, tmp_path):
        with pytest.raises(SourceUnavailable):
            LocalRosterSource().fetch(str(tmp_path / "absent.xlsx"))


class TestHttpRosterSource:
    def test_returns_content(self):
        resp = MagicMock(content=b"roster")
        with patch("sigdeploy.roster.sources.requests.get", return_value=resp) as get:
            assert HttpRosterSource(timeout=5).fetch("https://files.acme.sk/roster.xlsx") == b"roster"
        get.assert_called_once_with("https://files.acme.sk/roster.xlsx", timeout=5)

    def test_http_error_is_wrapped(self):
        resp = MagicMock()
        resp.raise_for_status.side_effect = requests.HTTPError("404")
        with patch("sigdeploy.roster.sources.requests.get", return_value=resp):
            with pytest.raises(RosterUnavailable):
                HttpRosterSource().fetch("https://files.acme.sk/roster.xlsx")

    def test_connection_error_is_wrapped(self):
        with patch("sigdeploy.roster.sources.requests.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(RosterUnavailable):
                HttpRosterSource().fetch("https://files.acme.sk/roster.xlsx")


class TestCreateRosterSource:
    @pytest.mark.parametrize(
        "location, expected",
        [
            ("https://files.acme.sk/roster.xlsx", HttpRosterSource),
            ("http://intranet/roster.xlsx", HttpRosterSource),
            (r"C:\deploy\roster.xlsx", LocalRosterSource),
            ("/srv/roster.xlsx", LocalRosterSource),
        ],
    )
    def test_dispatch_by_scheme(self, location, expected):
        assert isinstance(create_roster_source(AppSettings(), location), expected)

    def test_s3_scheme(self):
        with mock_aws():
            source = create_roster_source(AppSettings(), "s3://bucket/roster.xlsx")
        assert isinstance(source, S3RosterSource)

    def test_falls_back_to_configured_location(self):
        settings = AppSettings(roster=RosterConfig(location="https://files.acme.sk/r.xlsx"))
        assert isinstance(create_roster_source(settings), HttpRosterSource)


def test_memory_source_satisfies_protocol():
    source = MemoryRosterSource({"mem://roster": b"x"})
    assert isinstance(source, IRosterSource)
    assert source.fetch("mem://roster") == b"x"
    with pytest.raises(RosterUnavailable):
        source.fetch("mem://other")
