"""Decode schedule documents into rows and split them into blocks."""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import Union

from lems.core.constants import BLOCK_MARKER, SUPPORTED_SCHEDULE_VERSION
from lems.errors import MalformedDocumentError, UnsupportedScheduleVersionError

logger = logging.getLogger(__name__)

Row = list[str]

INTEGER_CELL = re.compile(r"[+-]?[0-9]+")


def cell(row: Row, index: int) -> str:
    """Return the cell at ``index``, or ``""`` when the row is too short."""
    return row[index] if index < len(row) else ""


def parse_int(value: str) -> int | None:
    """Parse an integer cell, returning None when it isn't one.

    Only plain, optionally signed ASCII digits count.
    """
    value = value.strip()
    if not INTEGER_CELL.fullmatch(value):
        return None
    return int(value)


def read_rows(data: Union[str, bytes]) -> list[Row]:
    """Decode a delimited text document into a list of rows."""
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedDocumentError(f"not valid UTF-8: {e}") from e
    else:
        data = data.lstrip("\ufeff")

    try:
        return list(csv.reader(io.StringIO(data.strip()), strict=True))
    except csv.Error as e:
        raise MalformedDocumentError(str(e)) from e


def read_version(rows: list[Row]) -> int | None:
    """Return the schema version declared in the second cell of the first row."""
    if not rows:
        return None
    return parse_int(cell(rows[0], 1))


def check_version(rows: list[Row]) -> None:
    """Raise unless the document declares the supported schema version."""
    version = read_version(rows)
    if version != SUPPORTED_SCHEDULE_VERSION:
        raise UnsupportedScheduleVersionError(
            cell(rows[0], 1) if rows else None, SUPPORTED_SCHEDULE_VERSION
        )


def _block_id(row: Row) -> int | None:
    if cell(row, 0) != BLOCK_MARKER:
        return None
    return parse_int(cell(row, 1))


class ScheduleBlocks:
    """Rows of a schedule document grouped by block identifier.

    A block is every row between a ``Block Format`` sentinel row and the next
    sentinel (or the end of the document). Rows before the first sentinel are
    not part of any block.
    """

    def __init__(self, rows: list[Row]) -> None:
        self._blocks: dict[int, list[Row]] = {}
        current: list[Row] | None = None

        for row in rows:
            block_id = _block_id(row)
            if block_id is None:
                if current is not None:
                    current.append(row)
                continue

            if block_id in self._blocks:
                logger.warning(f"Ignoring repeated schedule block {block_id}")
                current = []
            else:
                current = self._blocks[block_id] = []

    @classmethod
    def from_document(cls, data: Union[str, bytes]) -> ScheduleBlocks:
        """Decode ``data``, verify its version and segment the remaining rows."""
        rows = read_rows(data)
        check_version(rows)
        return cls(rows[1:])

    def __contains__(self, block_id: int) -> bool:
        return block_id in self._blocks

    @property
    def block_ids(self) -> list[int]:
        """Block identifiers in document order."""
        return list(self._blocks)

    def get(self, block_id: int) -> list[Row]:
        """Return a copy of a block's rows, or an empty list if it is absent."""
        return [list(row) for row in self._blocks.get(block_id, [])]
