"""
Bulk player import from CSV or Excel sheets
"""
import csv
import io
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from openpyxl import load_workbook
from sqlalchemy.orm import Session

from app.models.player import Player, PlayerType, PlayerCategory, PlayerStatus, MAX_AMOUNT

logger = logging.getLogger(__name__)


class ImportFormatError(ValueError):
    """The file itself cannot be read as a player sheet"""


@dataclass
class RowError:
    row: int  # 1-based row number in the sheet
    message: str


@dataclass
class ImportResult:
    players: list[Player] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)


class PlayerImporter:
    """Maps sheet rows onto Player records"""

    SUPPORTED_EXTENSIONS = (".csv", ".xlsx")

    # Sheet header (lowercased, trimmed) -> Player field
    HEADER_ALIASES = {
        "name": "name",
        "player name": "name",
        "type": "type",
        "player type": "type",
        "category": "category",
        "level": "category",
        "role": "role",
        "base value": "base_value",
        "base_value": "base_value",
        "basevalue": "base_value",
        "base price": "base_value",
        "image": "image",
        "photo": "image",
    }

    TYPE_ALIASES = {
        "batsman": PlayerType.BATSMAN,
        "batter": PlayerType.BATSMAN,
        "bowler": PlayerType.BOWLER,
        "all-rounder": PlayerType.ALL_ROUNDER,
        "all rounder": PlayerType.ALL_ROUNDER,
        "allrounder": PlayerType.ALL_ROUNDER,
        "wicket-keeper": PlayerType.WICKET_KEEPER,
        "wicket keeper": PlayerType.WICKET_KEEPER,
        "wicketkeeper": PlayerType.WICKET_KEEPER,
        "keeper": PlayerType.WICKET_KEEPER,
        "wk": PlayerType.WICKET_KEEPER,
    }

    # Used when the sheet has no base value for a row
    DEFAULT_BASE_VALUES = {
        PlayerCategory.L1: 500,
        PlayerCategory.L2: 300,
        PlayerCategory.L3: 200,
        PlayerCategory.L4: 100,
    }

    @classmethod
    def read_rows(cls, filename: str, content: bytes) -> list[list]:
        """Read raw cell rows from an uploaded file"""
        lowered = (filename or "").lower()
        if lowered.endswith(".csv"):
            try:
                text = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ImportFormatError("CSV file must be UTF-8 encoded") from e
            return [row for row in csv.reader(io.StringIO(text))]
        if lowered.endswith(".xlsx"):
            try:
                wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
            except Exception as e:  # openpyxl raises several unrelated types for bad files
                raise ImportFormatError(f"Could not read Excel file: {e}") from e
            try:
                return [list(row) for row in wb.active.iter_rows(values_only=True)]
            finally:
                wb.close()
        raise ImportFormatError(
            f"Unsupported file type. Use one of: {', '.join(cls.SUPPORTED_EXTENSIONS)}"
        )

    @staticmethod
    def _cell(value) -> str:
        if value is None:
            return ""
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value).strip()

    @classmethod
    def _find_header(cls, rows: list[list]) -> tuple[int, dict[int, str]]:
        """Index of the header row and a column -> field map"""
        for idx, row in enumerate(rows):
            cells = [cls._cell(c).lower() for c in row]
            if "name" not in cells and "player name" not in cells:
                continue
            columns = {}
            for col, cell in enumerate(cells):
                fieldname = cls.HEADER_ALIASES.get(cell)
                if fieldname and fieldname not in columns.values():
                    columns[col] = fieldname
            return idx, columns
        raise ImportFormatError("No header row with a 'name' column was found")

    @classmethod
    def parse_type(cls, value: str) -> Optional[PlayerType]:
        return cls.TYPE_ALIASES.get(value.strip().lower())

    @staticmethod
    def parse_category(value: str) -> Optional[PlayerCategory]:
        cleaned = value.strip().upper().replace(" ", "")
        if cleaned.isdigit():
            cleaned = f"L{cleaned}"
        try:
            return PlayerCategory(cleaned)
        except ValueError:
            return None

    @classmethod
    def map_row(cls, values: dict[str, str]) -> Player:
        """Build one Player from named cell values, raising ValueError on bad data"""
        name = values.get("name", "")
        if not name:
            raise ValueError("Missing player name")

        player_type = cls.parse_type(values.get("type", ""))
        if player_type is None:
            raise ValueError(f"Unknown player type '{values.get('type', '')}'")

        category = cls.parse_category(values.get("category", ""))
        if category is None:
            raise ValueError(f"Unknown category '{values.get('category', '')}'")

        raw_base = values.get("base_value", "")
        if raw_base:
            try:
                number = float(raw_base.replace(",", ""))
            except ValueError:
                raise ValueError(f"Base value '{raw_base}' is not a number")
            if not math.isfinite(number):
                raise ValueError(f"Base value '{raw_base}' is not a number")
            if number < 0:
                raise ValueError("Base value cannot be negative")
            if number > MAX_AMOUNT:
                raise ValueError(f"Base value '{raw_base}' is too large")
            base_value = int(number)
        else:
            base_value = cls.DEFAULT_BASE_VALUES[category]

        return Player(
            name=name,
            type=player_type,
            category=category,
            role=values.get("role") or None,
            image=values.get("image") or None,
            base_value=base_value,
            current_bid=0,
            status=PlayerStatus.AVAILABLE,
        )

    @classmethod
    def parse_rows(cls, rows: list[list]) -> ImportResult:
        """Map every data row after the header; bad rows are reported, not raised"""
        header_idx, columns = cls._find_header(rows)
        result = ImportResult()

        for idx in range(header_idx + 1, len(rows)):
            row = rows[idx]
            values = {
                fieldname: cls._cell(row[col])
                for col, fieldname in columns.items()
                if col < len(row)
            }
            if not any(values.values()):
                continue
            try:
                result.players.append(cls.map_row(values))
            except ValueError as e:
                result.errors.append(RowError(row=idx + 1, message=str(e)))

        return result

    @classmethod
    def import_file(cls, session: Session, filename: str, content: bytes) -> ImportResult:
        """Parse an uploaded sheet and insert the valid rows in one transaction"""
        result = cls.parse_rows(cls.read_rows(filename, content))
        cls.save_players(session, result.players)
        logger.info(
            "Imported %s players from %s (%s rows rejected)",
            len(result.players), filename, len(result.errors),
        )
        return result

    @staticmethod
    def save_players(session: Session, players: Iterable[Player]) -> None:
        try:
            session.add_all(players)
            session.commit()
        except Exception:
            session.rollback()
            raise
