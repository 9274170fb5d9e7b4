"""Google Sheets snapshot of the last crawled listings.

The snapshot is a fixed 5-column range (id, title, price, layout, size)
starting at row 2; row 1 is left for a human-readable header and is never
read or written. Saving replaces the whole range. There is no locking:
two runs saving at the same time can interleave, so only one writer may
run at a time.
"""

import asyncio
import json
import logging
from typing import Any, List, Optional, Sequence

from google.oauth2 import service_account
from googleapiclient.discovery import build

from roomwatch.api.schemas import Listing
from roomwatch.errors import StoreError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DEFAULT_RANGE = "sheet1!A2:E100"
ROW_WIDTH = 5

# Forces USER_ENTERED input to store the id as text ("00123" stays "00123").
TEXT_PREFIX = "'"


def first_row_number(sheet_range: str) -> int:
    """Sheet row number where a range like 'sheet1!A2:E100' starts."""
    cells = sheet_range.rsplit("!", 1)[-1]
    start = cells.split(":", 1)[0]
    digits = "".join(c for c in start if c.isdigit())
    return int(digits) if digits else 1


def parse_row(row_number: int, row: Sequence[Any]) -> Optional[Listing]:
    """Decode one sheet row into a Listing, or None if it is malformed."""
    if len(row) != ROW_WIDTH:
        logger.warning("row %d is malformed: %s", row_number, list(row))
        return None
    if not all(isinstance(cell, str) for cell in row):
        logger.warning("row %d has non-text cells: %s", row_number, list(row))
        return None

    listing_id, title, price, layout, size = row
    return Listing(id=listing_id, title=title, price=price, layout=layout, size=size)


def to_row(listing: Listing) -> List[str]:
    return [TEXT_PREFIX + listing.id, listing.title, listing.price, listing.layout, listing.size]


class SheetsSnapshotStore:
    """Reads and replaces the listing snapshot kept in a spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_json: str,
        sheet_range: str = DEFAULT_RANGE,
        service=None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_json = credentials_json
        self.sheet_range = sheet_range
        self._service = service

    def _values(self):
        if self._service is None:
            info = json.loads(self.credentials_json)
            creds = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._service.spreadsheets().values()

    async def load(self) -> List[Listing]:
        """Load the previous run's listings."""
        try:
            rows = await asyncio.to_thread(self._get_rows)
        except Exception as e:
            raise StoreError(str(e)) from e

        start = first_row_number(self.sheet_range)
        listings = []
        for index, row in enumerate(rows):
            listing = parse_row(start + index, row)
            if listing is not None:
                listings.append(listing)

        logger.info("Loaded %d listings from snapshot", len(listings))
        return listings

    async def save(self, listings: Sequence[Listing]) -> None:
        """Replace the snapshot with the given listings."""
        values = [to_row(listing) for listing in listings]
        try:
            await asyncio.to_thread(self._replace_rows, values)
        except Exception as e:
            raise StoreError(str(e)) from e
        logger.info("Saved %d listings to snapshot", len(values))

    def _get_rows(self) -> List[List[Any]]:
        resp = self._values().get(
            spreadsheetId=self.spreadsheet_id, range=self.sheet_range
        ).execute()
        return resp.get("values", [])

    def _replace_rows(self, values: List[List[str]]) -> None:
        sheet_values = self._values()
        sheet_values.batchClear(
            spreadsheetId=self.spreadsheet_id,
            body={"ranges": [self.sheet_range]},
        ).execute()
        sheet_values.batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={
                "valueInputOption": "USER_ENTERED",
                "data": [{"range": self.sheet_range, "values": values}],
            },
        ).execute()
