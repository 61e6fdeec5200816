"""
Tests for mapping CSV/Excel sheets onto players.
"""
import io
import pytest
from openpyxl import Workbook

from app.importers.player_importer import PlayerImporter, ImportFormatError
from app.models.player import Player, PlayerType, PlayerCategory, PlayerStatus


SHEET = (
    "KPL Season 3 registrations,,,,\n"
    ",,,,\n"
    "Name,Type,Category,Base Value,Role\n"
    "Vikram Iyer,Batsman,L1,500,Opener\n"
    "Karan Shah,all rounder,l2,,\n"
    ",,,,\n"
    "Rohan Pai,WK,3,\"1,200\",Captain\n"
    ",Bowler,L2,300,\n"
    "Imran Sheikh,Umpire,L2,300,\n"
    "Aditya Hegde,Bowler,L9,300,\n"
    "Manish Gowda,Bowler,L4,lots,\n"
)


class TestParseRows:

    def test_header_is_found_after_preamble(self):
        result = PlayerImporter.parse_rows(PlayerImporter.read_rows("players.csv", SHEET.encode()))
        names = [p.name for p in result.players]
        assert names == ["Vikram Iyer", "Karan Shah", "Rohan Pai"]

    def test_values_are_mapped(self):
        result = PlayerImporter.parse_rows(PlayerImporter.read_rows("players.csv", SHEET.encode()))
        vikram, karan, rohan = result.players

        assert vikram.type == PlayerType.BATSMAN
        assert vikram.category == PlayerCategory.L1
        assert vikram.base_value == 500
        assert vikram.role == "Opener"
        assert vikram.status == PlayerStatus.AVAILABLE

        assert karan.type == PlayerType.ALL_ROUNDER
        assert karan.category == PlayerCategory.L2
        assert karan.base_value == 300  # L2 default
        assert karan.role is None

        assert rohan.type == PlayerType.WICKET_KEEPER
        assert rohan.category == PlayerCategory.L3
        assert rohan.base_value == 1200

    def test_bad_rows_are_reported_with_sheet_row_numbers(self):
        result = PlayerImporter.parse_rows(PlayerImporter.read_rows("players.csv", SHEET.encode()))
        errors = {e.row: e.message for e in result.errors}

        assert set(errors) == {8, 9, 10, 11}
        assert "name" in errors[8]
        assert "Umpire" in errors[9]
        assert "L9" in errors[10]
        assert "lots" in errors[11]

    @pytest.mark.parametrize("raw", ["inf", "-inf", "nan", "1e400", "1e20"])
    def test_out_of_range_base_value_is_a_row_error(self, raw):
        rows = [
            ["Name", "Type", "Category", "Base Value"],
            ["Vikram Iyer", "Batsman", "L1", raw],
            ["Karan Shah", "Bowler", "L2", "350"],
        ]
        result = PlayerImporter.parse_rows(rows)

        assert [p.name for p in result.players] == ["Karan Shah"]
        assert [e.row for e in result.errors] == [2]
        assert raw in result.errors[0].message or "negative" in result.errors[0].message

    def test_missing_header(self):
        with pytest.raises(ImportFormatError):
            PlayerImporter.parse_rows([["Player", "Team"], ["Vikram", "Strikers"]])

    def test_unsupported_extension(self):
        with pytest.raises(ImportFormatError):
            PlayerImporter.read_rows("players.pdf", b"%PDF")

    def test_excel_sheet(self):
        wb = Workbook()
        ws = wb.active
        ws.append(["NAME", "PLAYER TYPE", "LEVEL", "BASE PRICE"])
        ws.append(["Vikram Iyer", "Batsman", "L1", 450.0])
        ws.append([None, None, None, None])
        ws.append(["Karan Shah", "Bowler", 4, None])
        buffer = io.BytesIO()
        wb.save(buffer)

        rows = PlayerImporter.read_rows("players.xlsx", buffer.getvalue())
        result = PlayerImporter.parse_rows(rows)

        assert result.errors == []
        assert [(p.name, p.category, p.base_value) for p in result.players] == [
            ("Vikram Iyer", PlayerCategory.L1, 450),
            ("Karan Shah", PlayerCategory.L4, 100),
        ]

    def test_corrupt_excel(self):
        with pytest.raises(ImportFormatError):
            PlayerImporter.read_rows("players.xlsx", b"not a zip file")


class TestImportFile:

    def test_valid_rows_are_saved(self, test_db):
        result = PlayerImporter.import_file(test_db, "players.csv", SHEET.encode())

        assert len(result.players) == 3
        assert len(result.errors) == 4
        saved = test_db.query(Player).order_by(Player.id).all()
        assert [p.name for p in saved] == ["Vikram Iyer", "Karan Shah", "Rohan Pai"]
        assert all(p.id is not None for p in result.players)
        assert all(p.current_bid == 0 and p.bid_value is None for p in saved)
