import pytest

from gcms_analyzer.utils.errors import (
    FileTypeError, MissingColumnError, ParseError, RowValidationError
)
from gcms_analyzer.utils.file_handler import (
    MeasurementRow, load_sample_data, parse_csv, rows_to_dataframe, validate_file_type
)


def test_parse_valid_csv_keeps_input_order(sample_csv):
    rows = parse_csv(sample_csv, filename="run.csv", mime_type="text/csv")
    assert [r.name for r in rows] == ["Glucose", "Lactate", "Glucose", "Unobtainium"]
    assert rows[0].retention_time == 15.38
    assert rows[0].intensity == 87600.0


def test_extra_columns_preserved_as_additional_data(sample_csv):
    rows = parse_csv(sample_csv)
    assert rows[1].additional_data == {"Formula": "C3H6O3"}
    assert rows[3].additional_data == {"Formula": ""}


def test_required_columns_match_case_insensitively():
    rows = parse_csv("metabolite,RETENTIONTIME,intensity\n Pyruvate ,3.2,100\n")
    assert rows[0].name == "Pyruvate"
    assert rows[0].additional_data == {}


def test_missing_column_names_it():
    with pytest.raises(MissingColumnError) as exc:
        parse_csv("Metabolite,RetentionTime\nGlucose,1.0\n")
    assert exc.value.missing == ["Intensity"]
    assert "Intensity" in str(exc.value)


def test_missing_columns_all_reported():
    with pytest.raises(MissingColumnError) as exc:
        parse_csv("Name,Time\nGlucose,1.0\n")
    assert exc.value.missing == ["Metabolite", "RetentionTime", "Intensity"]


def test_non_numeric_retention_time_names_row():
    content = "Metabolite,RetentionTime,Intensity\nGlucose,1.0,10\nLactate,abc,20\n"
    with pytest.raises(RowValidationError) as exc:
        parse_csv(content)
    assert exc.value.row_index == 2
    assert exc.value.field == "RetentionTime"
    assert str(exc.value).startswith("Row 2:")


def test_non_numeric_intensity_rejected():
    with pytest.raises(RowValidationError) as exc:
        parse_csv("Metabolite,RetentionTime,Intensity\nGlucose,1.0,high\n")
    assert exc.value.field == "Intensity"


@pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
def test_non_finite_values_rejected(value):
    with pytest.raises(RowValidationError):
        parse_csv(f"Metabolite,RetentionTime,Intensity\nGlucose,{value},10\n")


def test_empty_metabolite_name_rejected():
    with pytest.raises(RowValidationError) as exc:
        parse_csv("Metabolite,RetentionTime,Intensity\nGlucose,1.0,10\n   ,2.0,20\n")
    assert exc.value.row_index == 2
    assert exc.value.field == "Metabolite"


def test_out_of_range_values_rejected():
    with pytest.raises(RowValidationError):
        parse_csv("Metabolite,RetentionTime,Intensity\nGlucose,0,10\n")
    with pytest.raises(RowValidationError):
        parse_csv("Metabolite,RetentionTime,Intensity\nGlucose,1.0,-5\n")


@pytest.mark.parametrize("content", ["", "   \n\n", "Metabolite,RetentionTime,Intensity\n"])
def test_empty_content_rejected(content):
    with pytest.raises(ParseError):
        parse_csv(content)


def test_malformed_row_rejected():
    content = "Metabolite,RetentionTime,Intensity\nGlucose,1.0,2.0\nLactate,2.0,3.0,4.0,5.0\n"
    with pytest.raises(ParseError):
        parse_csv(content)


def test_wrong_file_type_rejected():
    with pytest.raises(FileTypeError):
        parse_csv("Metabolite,RetentionTime,Intensity\nGlucose,1,2\n", filename="run.xlsx", mime_type="application/pdf")
    assert issubclass(FileTypeError, ParseError)


def test_validate_file_type():
    assert validate_file_type("RUN.CSV")
    assert validate_file_type("export", "application/vnd.ms-excel")
    assert not validate_file_type("run.txt", "text/plain")
    assert not validate_file_type(None, None)


def test_bytes_with_bom_and_blank_lines():
    content = "\ufeffMetabolite,RetentionTime,Intensity\n\nGlucose,1.0,2.0\n\n".encode("utf-8")
    rows = parse_csv(content, filename="run.csv")
    assert len(rows) == 1
    assert rows[0].name == "Glucose"


def test_status_callback_reports_parsing(sample_csv):
    events = []
    parse_csv(sample_csv, on_status=lambda status, message, progress: events.append(status))
    assert events == ["parsing"]


def test_load_sample_data_reports_completion():
    events = []
    rows = load_sample_data(on_status=lambda status, message, progress: events.append((status, progress)))
    assert len(rows) > 10
    assert events[0] == ("loading", 0)
    assert events[-1] == ("complete", 100)
    assert all(r.retention_time > 0 for r in rows)


def test_rows_to_dataframe(sample_csv):
    df = rows_to_dataframe(parse_csv(sample_csv))
    assert list(df.columns) == ["Metabolite", "RetentionTime", "Intensity", "Formula"]
    assert len(df) == 4
    assert rows_to_dataframe([]).empty


def test_short_row_in_extra_column_rejected():
    content = "Metabolite,RetentionTime,Intensity,Formula\nGlucose,1.0,2.0,C6H12O6\nLactate,2.0,3.0\n"
    with pytest.raises(ParseError, match="row 2 has 3 fields, expected 4"):
        parse_csv(content)


def test_short_row_in_required_column_is_parse_error():
    with pytest.raises(ParseError) as exc:
        parse_csv("Metabolite,RetentionTime,Intensity\nGlucose,1.0\n")
    assert not isinstance(exc.value, RowValidationError)
    assert "row 1 has 2 fields, expected 3" in str(exc.value)


def test_quoted_commas_do_not_count_as_fields():
    rows = parse_csv('Metabolite,RetentionTime,Intensity,Notes\nGlucose,1.0,2.0,"sharp, tall"\n')
    assert rows[0].additional_data == {"Notes": "sharp, tall"}


def test_additional_data_is_read_only(sample_csv):
    source = {"Formula": "C6H12O6"}
    row = MeasurementRow("Glucose", 1.0, 2.0, source)
    source["Formula"] = "changed"
    assert row.additional_data["Formula"] == "C6H12O6"
    with pytest.raises(TypeError):
        row.additional_data["Formula"] = "C3H6O3"
    with pytest.raises(TypeError):
        parse_csv(sample_csv)[0].additional_data["Notes"] = "x"
