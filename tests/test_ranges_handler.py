"""
Tests for RangesHandler (read/write/append/clear).
"""
import pytest
from unittest.mock import MagicMock

from handlers.ranges import RangesHandler
from lib.arguments import parse_arguments
from lib.errors import AuthenticationRequired


def _args(tool, **arguments):
    return parse_arguments(tool, arguments)


class TestReadRange:
    """Tests for read_range"""

    def test_reads_qualified_range(self, mock_sheets_client, assertions):
        mock_sheets_client.get_values.return_value = [["name", "age"], ["alice", 30]]
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="A1:B2", sheet_name="Data"))

        data = assertions.assert_success(result, "read_range")
        mock_sheets_client.get_values.assert_called_once_with("S", "Data!A1:B2")
        assert data["range"] == "Data!A1:B2"
        assert data["values"] == [["name", "age"], ["alice", 30]]
        assert data["row_count"] == 2
        assert data["truncated"] is False
        assert data["text"] == "name\tage\nalice\t30"

    def test_jagged_rows_are_padded(self, mock_sheets_client, assertions):
        mock_sheets_client.get_values.return_value = [["a", "b", "c"], ["d"]]
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="A1:C2"))

        data = assertions.assert_success(result)
        assert data["values"] == [["a", "b", "c"], ["d", "", ""]]

    def test_row_limit_truncates(self, mock_sheets_client, assertions):
        mock_sheets_client.get_values.return_value = [[i] for i in range(5)]
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="A1:A5", row_limit=2))

        data = assertions.assert_success(result)
        assert data["values"] == [[0], [1]]
        assert data["truncated"] is True

    def test_row_limit_over_maximum_skips_backend(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="A1", row_limit=2000))

        assertions.assert_error(result, "ROW_LIMIT_EXCEEDED", "read_range")
        mock_sheets_client.get_values.assert_not_called()

    def test_qualified_range_with_matching_sheet_name(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="Data!A1:B2", sheet_name="Data"))

        data = assertions.assert_success(result)
        mock_sheets_client.get_values.assert_called_once_with("S", "Data!A1:B2")
        assert data["range"] == "Data!A1:B2"

    def test_qualified_range_alone(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="'My Sheet'!A1:B2"))

        data = assertions.assert_success(result)
        mock_sheets_client.get_values.assert_called_once_with("S", "'My Sheet'!A1:B2")
        assert data["range"] == "'My Sheet'!A1:B2"

    def test_qualified_range_conflicts_with_sheet_name(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="Data!A1", sheet_name="Sheet1"))

        assertions.assert_error(result, "BAD_REQUEST", "read_range")
        mock_sheets_client.get_values.assert_not_called()

    def test_unknown_sheet_name(self, mock_sheets_client, api_error, assertions):
        mock_sheets_client.get_values.side_effect = api_error(400, "Unable to parse range: Nope!A1")
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="A1", sheet_name="Nope"))

        assertions.assert_error(result, "SHEET_NOT_FOUND")

    def test_missing_spreadsheet(self, mock_sheets_client, api_error, assertions):
        mock_sheets_client.get_values.side_effect = api_error(404)
        handler = RangesHandler(mock_sheets_client)

        result = handler.read_range(_args("read_range", spreadsheet_id="S", range="A1"))

        assertions.assert_error(result, "SPREADSHEET_NOT_FOUND")


class TestWriteRange:
    """Tests for write_range"""

    def test_writes_exact_extent(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="B2", values=[[1, 2], [3, 4]])
        )

        data = assertions.assert_success(result, "write_range")
        assert data["range"] == "B2:C3"
        assert data["sheet"] == "Sheet1"
        assert data["updated_cells"] == 4
        assert data["expanded"] is False
        mock_sheets_client.update_values.assert_called_once_with(
            "S", "B2:C3", [[1, 2], [3, 4]], value_input_option="RAW"
        )
        mock_sheets_client.batch_update.assert_not_called()

    def test_expands_small_sheet_once(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="B2", values=[[1, 2], [3, 4]], sheet_name="Data")
        )

        data = assertions.assert_success(result)
        assert data["range"] == "Data!B2:C3"
        assert data["expanded"] is True
        mock_sheets_client.batch_update.assert_called_once()
        _, requests = mock_sheets_client.batch_update.call_args.args
        props = requests[0]["updateSheetProperties"]["properties"]
        assert props["sheetId"] == 123456
        assert props["gridProperties"] == {"rowCount": 3, "columnCount": 3}
        mock_sheets_client.update_values.assert_called_once()

    def test_sheet_qualified_start(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="Sheet1!C5", values=[["x"]])
        )

        data = assertions.assert_success(result)
        assert data["range"] == "Sheet1!C5"

    def test_apostrophe_sheet_name_is_requoted(self, mock_sheets_client, sample_sheet_properties, assertions):
        mock_sheets_client.get_sheet_properties.return_value = sample_sheet_properties + [{
            "sheetId": 7,
            "title": "It's",
            "index": 2,
            "gridProperties": {"rowCount": 100, "columnCount": 10},
        }]
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="'It''s'!B2", values=[[1, 2], [3, 4]])
        )

        data = assertions.assert_success(result)
        assert data["range"] == "'It''s'!B2:C3"
        assert data["sheet"] == "It's"
        assert mock_sheets_client.update_values.call_args.args[1] == "'It''s'!B2:C3"

    def test_cell_like_sheet_name_is_quoted(self, mock_sheets_client, sample_sheet_properties, assertions):
        mock_sheets_client.get_sheet_properties.return_value = sample_sheet_properties + [{
            "sheetId": 8,
            "title": "Q1",
            "index": 2,
            "gridProperties": {"rowCount": 100, "columnCount": 10},
        }]
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="A1", values=[["x"]], sheet_name="Q1")
        )

        data = assertions.assert_success(result)
        assert data["range"] == "'Q1'!A1"

    def test_coordinate_start(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position={"row": 0, "col": 26}, values=[["x", "y"]])
        )

        data = assertions.assert_success(result)
        assert data["range"] == "AA1:AB1"

    def test_range_start_uses_top_left(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="B2:Z99", values=[["x"]])
        )

        assert assertions.assert_success(result)["range"] == "B2"

    def test_jagged_values_are_padded(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="A1", values=[[1], [2, 3, 4]])
        )

        data = assertions.assert_success(result)
        assert data["range"] == "A1:C2"
        written = mock_sheets_client.update_values.call_args.args[2]
        assert written == [[1, "", ""], [2, 3, 4]]

    def test_conflicting_sheet_names(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="Data!A1", values=[["x"]], sheet_name="Sheet1")
        )

        assertions.assert_error(result, "BAD_REQUEST")
        mock_sheets_client.update_values.assert_not_called()

    def test_invalid_start_position(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="b2", values=[["x"]])
        )

        assertions.assert_error(result, "INVALID_RANGE_FORMAT", "write_range")
        mock_sheets_client.get_sheet_properties.assert_not_called()

    def test_sheet_size_limit(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="A10000", values=[["x"], ["y"]])
        )

        assertions.assert_error(result, "SHEET_SIZE_LIMIT_EXCEEDED")
        mock_sheets_client.get_sheet_properties.assert_not_called()
        mock_sheets_client.update_values.assert_not_called()

    def test_unknown_sheet(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.write_range(
            _args("write_range", spreadsheet_id="S", start_position="A1", values=[["x"]], sheet_name="Missing")
        )

        assertions.assert_error(result, "SHEET_NOT_FOUND")
        mock_sheets_client.update_values.assert_not_called()

    def test_authentication_required_propagates(self, mock_sheets_client):
        mock_sheets_client.get_sheet_properties.side_effect = AuthenticationRequired("login")
        handler = RangesHandler(mock_sheets_client)

        with pytest.raises(AuthenticationRequired):
            handler.write_range(_args("write_range", spreadsheet_id="S", start_position="A1", values=[["x"]]))


class TestExpandSheetIfNeeded:
    """Tests for expand_sheet_if_needed"""

    SHEET = {"title": "T", "sheet_id": 7, "row_count": 10, "column_count": 5, "index": 0}

    def test_no_change_when_large_enough(self):
        sheets = MagicMock()
        handler = RangesHandler(sheets)
        assert handler.expand_sheet_if_needed("S", self.SHEET, 10, 5) is False
        sheets.batch_update.assert_not_called()

    def test_never_shrinks(self):
        sheets = MagicMock()
        handler = RangesHandler(sheets)

        assert handler.expand_sheet_if_needed("S", self.SHEET, 20, 2) is True

        _, requests = sheets.batch_update.call_args.args
        grid = requests[0]["updateSheetProperties"]["properties"]["gridProperties"]
        assert grid == {"rowCount": 20, "columnCount": 5}


class TestAppendRange:
    def test_append(self, mock_sheets_client, assertions):
        mock_sheets_client.append_values.return_value = {
            "tableRange": "Sheet1!A1:B3",
            "updates": {"updatedRange": "Sheet1!A4:B4", "updatedRows": 1, "updatedCells": 2},
        }
        handler = RangesHandler(mock_sheets_client)

        result = handler.append_range(
            _args("append_range", spreadsheet_id="S", range="A1", values=[["x", 1]], sheet_name="Sheet1")
        )

        data = assertions.assert_success(result, "append_range")
        assert data["table_range"] == "Sheet1!A1:B3"
        assert data["updated_range"] == "Sheet1!A4:B4"
        assert data["updated_rows"] == 1
        mock_sheets_client.append_values.assert_called_once_with(
            "S",
            "Sheet1!A1",
            [["x", 1]],
            value_input_option="USER_ENTERED",
            insert_data_option="INSERT_ROWS",
        )

    def test_qualified_range_not_doubled(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.append_range(
            _args("append_range", spreadsheet_id="S", range="Sheet1!A:B", values=[["x"]], sheet_name="Sheet1")
        )

        data = assertions.assert_success(result)
        assert data["range"] == "Sheet1!A:B"
        assert mock_sheets_client.append_values.call_args.args[1] == "Sheet1!A:B"

    def test_qualified_range_conflicts_with_sheet_name(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.append_range(
            _args("append_range", spreadsheet_id="S", range="Data!A1", values=[["x"]], sheet_name="Sheet1")
        )

        assertions.assert_error(result, "BAD_REQUEST", "append_range")
        mock_sheets_client.append_values.assert_not_called()


class TestClearRange:
    def test_clear(self, mock_sheets_client, assertions):
        mock_sheets_client.clear_values.return_value = {"clearedRange": "Data!A1:B2"}
        handler = RangesHandler(mock_sheets_client)

        result = handler.clear_range(_args("clear_range", spreadsheet_id="S", range="A1:B2", sheet_name="Data"))

        data = assertions.assert_success(result, "clear_range")
        assert data == {"range": "Data!A1:B2", "cleared_range": "Data!A1:B2"}

    def test_qualified_range_not_doubled(self, mock_sheets_client, assertions):
        handler = RangesHandler(mock_sheets_client)

        result = handler.clear_range(_args("clear_range", spreadsheet_id="S", range="Data!A1:B2", sheet_name="Data"))

        data = assertions.assert_success(result)
        mock_sheets_client.clear_values.assert_called_once_with("S", "Data!A1:B2")
        assert data["range"] == "Data!A1:B2"

    def test_permission_denied(self, mock_sheets_client, api_error, assertions):
        mock_sheets_client.clear_values.side_effect = api_error(403)
        handler = RangesHandler(mock_sheets_client)

        result = handler.clear_range(_args("clear_range", spreadsheet_id="S", range="A1"))

        assertions.assert_error(result, "PERMISSION_DENIED")
