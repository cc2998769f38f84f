"""Roster fetch collaborators implementing IRosterSource.

Each source returns raw bytes or raises ``RosterUnavailable``; retries and
timeouts belong to the transport, never to the reconciler.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from sigdeploy.core.config import AppSettings
from sigdeploy.core.exceptions import RosterUnavailable
from sigdeploy.core.protocols import IRosterSource

logger = logging.getLogger(__name__)


class LocalRosterSource:
    """Roster file on a local or mapped network path."""

    def fetch(self, location: str) -> bytes:
        try:
            data = Path(location).read_bytes()
        except OSError as exc:
            raise RosterUnavailable(location, str(exc)) from exc
        logger.debug("Read %d roster bytes from %s", len(data), location)
        return data


class S3RosterSource:
    """Roster object in S3, addressed as ``s3://bucket/key``."""

    def __init__(self, region: str = "eu-central-1", endpoint_url: str | None = None) -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def fetch(self, location: str) -> bytes:
        parsed = urlparse(location)
        bucket, key = parsed.netloc, parsed.path.lstrip("/")
        if parsed.scheme != "s3" or not bucket or not key:
            raise RosterUnavailable(location, "expected s3://bucket/key")
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
            data = resp["Body"].read()
        except (ClientError, BotoCoreError) as exc:
            raise RosterUnavailable(location, str(exc)) from exc
        logger.debug("Downloaded %d roster bytes from %s", len(data), location)
        return data


class HttpRosterSource:
    """Roster published at an HTTP(S) URL."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._timeout = timeout

    def fetch(self, location: str) -> bytes:
        try:
            resp = requests.get(location, timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise RosterUnavailable(location, str(exc)) from exc
        logger.debug("Downloaded %d roster bytes from %s", len(resp.content), location)
        return resp.content


def create_roster_source(settings: AppSettings, location: str | None = None) -> IRosterSource:
    """Pick the transport for a location handle by its scheme."""
    location = location if location is not None else settings.roster.location
    scheme = urlparse(location).scheme.lower()
    if scheme == "s3":
        return S3RosterSource(
            region=settings.roster.s3_region,
            endpoint_url=settings.roster.s3_endpoint_url,
        )
    if scheme in ("http", "https"):
        return HttpRosterSource(timeout=settings.roster.http_timeout)
    return LocalRosterSource()


class MemoryRosterSource:
    """Dict-backed IRosterSource for tests and offline runs."""

    def __init__(self, rosters: dict[str, bytes] | None = None) -> None:
        self._rosters: dict[str, bytes] = dict(rosters or {})
        self.fetched: list[str] = []

    def put(self, location: str, data: bytes) -> None:
        self._rosters[location] = data

    def fetch(self, location: str) -> bytes:
        self.fetched.append(location)
        try:
            return self._rosters[location]
        except KeyError:
            raise RosterUnavailable(location, "not found") from None
