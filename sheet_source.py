#!/usr/bin/env python3
"""
Sheet Source
Fetches the rows of the OFLS schedule spreadsheet, either through the
public CSV export or through the Sheets API with a service account.
"""

import csv
import io
import json
import os
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import requests
from dotenv import load_dotenv
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError
from googleapiclient.errors import HttpError


CSV_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{key}/export?format=csv&gid={gid}"

# Read-only scope, nothing is ever written back
SCOPES = ['https://www.googleapis.com/auth/spreadsheets.readonly']

DEFAULT_TIMEOUT = 30.0


class SheetFetchError(RuntimeError):
    """The schedule could not be fetched or read."""


@dataclass(frozen=True)
class SheetConfig:
    """Identifies the schedule spreadsheet and how to reach it."""
    key: str
    gid: str
    timeout: float = DEFAULT_TIMEOUT
    credentials_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'SheetConfig':
        """
        Read the configuration from the environment (and a .env file).

        Raises:
            EnvironmentError: If OFLS_KEY or OFLS_GID is missing, or
                OFLS_TIMEOUT is not a number
        """
        load_dotenv()

        values = {}
        for name in ('OFLS_KEY', 'OFLS_GID'):
            value = os.environ.get(name, '').strip()
            if not value:
                raise EnvironmentError(
                    f"{name} environment variable is not set.\n"
                    f"Please set it in .env file or with: export {name}='...'"
                )
            values[name] = value

        timeout_str = os.environ.get('OFLS_TIMEOUT', '').strip()
        try:
            timeout = float(timeout_str) if timeout_str else DEFAULT_TIMEOUT
        except ValueError:
            raise EnvironmentError(f"OFLS_TIMEOUT must be a number of seconds, got {timeout_str!r}")

        return cls(
            key=values['OFLS_KEY'],
            gid=values['OFLS_GID'],
            timeout=timeout,
            credentials_path=os.environ.get('OFLS_CREDENTIALS') or None
        )


def csv_export_url(config: SheetConfig) -> str:
    return CSV_EXPORT_URL.format(key=config.key, gid=config.gid)


def parse_csv(text: str) -> List[List[str]]:
    """Parse CSV text into rows of fields."""
    try:
        return list(csv.reader(io.StringIO(text)))
    except csv.Error as err:
        raise SheetFetchError(f"Could not parse schedule CSV: {err}") from err


def fetch_rows(config: SheetConfig) -> List[List[str]]:
    """
    Download the schedule tab as CSV and return its rows.

    Args:
        config: Spreadsheet key, tab gid and request timeout

    Returns:
        List of rows, each a list of text fields

    Raises:
        SheetFetchError: On any transport error or non-success response
    """
    try:
        response = requests.get(csv_export_url(config), timeout=config.timeout)
        response.raise_for_status()
    except requests.RequestException as err:
        raise SheetFetchError(f"Could not download schedule: {err}") from err

    text = response.content.decode('utf-8-sig', errors='replace')
    return parse_csv(text)


class SheetsApiSource:
    """Reads the schedule tab through the Google Sheets API."""

    def __init__(self, credentials_path: str, max_retries: int = 5,
                 retry_backoff_seconds: float = 5.0, service=None):
        """
        Initialize the source with service account credentials.

        Args:
            credentials_path: Path to the service account JSON file
            max_retries: Maximum attempts for rate-limited requests (default: 5)
            retry_backoff_seconds: Base backoff for exponential retry (default: 5.0)
            service: Prebuilt Sheets service, skips authentication when given
        """
        self.credentials_path = credentials_path
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds
        self.service = service if service is not None else self._authenticate()

    def _authenticate(self):
        """Build a Sheets service from the service account file."""
        if not os.path.exists(self.credentials_path):
            raise SheetFetchError(f"Credentials file not found: {self.credentials_path}")

        try:
            with open(self.credentials_path, 'r') as f:
                creds_data = json.load(f)
        except (OSError, ValueError) as err:
            raise SheetFetchError(f"Could not read credentials file: {err}") from err

        if not isinstance(creds_data, dict) or creds_data.get('type') != 'service_account':
            raise SheetFetchError(f"{self.credentials_path} must be a service account credentials file")

        try:
            creds = service_account.Credentials.from_service_account_file(
                self.credentials_path, scopes=SCOPES)
            return build('sheets', 'v4', credentials=creds, cache_discovery=False)
        except (GoogleAuthError, GoogleApiError, ValueError) as err:
            raise SheetFetchError(f"Invalid service account credentials: {err}") from err

    def _retry_with_backoff(self, func: Callable[[], Any]) -> Any:
        """
        Call func, retrying with exponential backoff while the API answers 429.

        Raises:
            HttpError: If retries are exhausted or the error is not a rate limit
        """
        for attempt in range(self.max_retries):
            try:
                return func()
            except HttpError as err:
                if err.resp.status != 429 or attempt == self.max_retries - 1:
                    raise
                backoff_time = self.retry_backoff_seconds * (2 ** attempt)
                print(f"Rate limit hit (429). Retrying in {backoff_time:.1f} seconds... "
                      f"(attempt {attempt + 1}/{self.max_retries})", file=sys.stderr)
                time.sleep(backoff_time)

    def _tab_title(self, spreadsheet_id: str, gid: str) -> str:
        sheets = self.service.spreadsheets()
        meta = self._retry_with_backoff(
            lambda: sheets.get(
                spreadsheetId=spreadsheet_id,
                fields='sheets.properties(sheetId,title)'
            ).execute()
        )
        for sheet in meta.get('sheets', []):
            props = sheet.get('properties', {})
            if str(props.get('sheetId')) == str(gid):
                return props['title']
        raise SheetFetchError(f"No tab with gid {gid} in spreadsheet")

    def fetch_rows(self, config: SheetConfig) -> List[List[str]]:
        """
        Read every row of the configured tab.

        The API drops trailing empty cells, so rows are padded to the
        widest row to match the CSV export.
        """
        try:
            title = self._tab_title(config.key, config.gid)
            quoted = title.replace("'", "''")
            result = self._retry_with_backoff(
                lambda: self.service.spreadsheets().values().get(
                    spreadsheetId=config.key,
                    range=f"'{quoted}'"
                ).execute()
            )
        except (HttpError, GoogleAuthError, OSError) as err:
            raise SheetFetchError(f"Sheets API error: {err}") from err

        values = result.get('values', [])
        width = max((len(row) for row in values), default=0)
        return [[str(cell) for cell in row] + [''] * (width - len(row)) for row in values]


def load_rows(config: SheetConfig) -> List[List[str]]:
    """Fetch the schedule rows using the Sheets API when credentials are configured."""
    if config.credentials_path:
        return SheetsApiSource(config.credentials_path).fetch_rows(config)
    return fetch_rows(config)
