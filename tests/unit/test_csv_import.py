"""Tests for CSV record import."""
from pathlib import Path

import pytest

from lnp.config_types import VariablesConfig
from lnp.errors import ConfigurationError
from lnp.ingest.csv_import import expected_header, parse_rows, read_csv, validate_header
from lnp.models import Cohort


@pytest.fixture
def clinical_schema():
    return VariablesConfig().to_schema()


def test_expected_header_layout(clinical_schema):
    header = expected_header(clinical_schema)
    assert header[:2] == ["Gender Code", "Date of Surgery"]
    assert header[2] == "Depth Code"
    assert header[-2:] == ["SLNB", "ELND"]
    assert len(header) == 2 + len(clinical_schema) + 2


def test_read_csv_assigns_row_ids_and_cohorts(tmp_path: Path, clinical_schema, write_dataset):
    path = write_dataset(tmp_path / "data.csv", [
        "1,2015-03-01,3,1,1,0,1,0,1,0",
        "2,2016-04-02,2,0,,0,2,1,0,1",
        "1,,1,,0,0,1,0,0,1",
        "1,2017-01-01,1,0,0,0,1,0,0,0",
        "2,2018-05-05,1,1,0,1,1,1,1,0",
    ])
    result = read_csv(path, clinical_schema)

    assert [r.id for r in result.slnb] == [2, 6]
    assert [r.id for r in result.elnd] == [3, 4]
    assert result.skipped == 1
    assert result.total == 4

    first = result.slnb[0]
    assert first.cohort is Cohort.SLNB
    assert first.gender_code == 1
    assert first.surgery_date == "2015-03-01"
    assert first.value("depth_code") == 3
    assert first.value("ene") == 0


def test_missing_cells_flag_discard(tmp_path: Path, clinical_schema, write_dataset):
    path = write_dataset(tmp_path / "data.csv", [
        "2,2016-04-02,2,0,,0,2,1,0,1",  # one missing
        "1,,1,,0,0,1,0,0,1",  # two missing
    ])
    result = read_csv(path, clinical_schema, missing_value_threshold=1)
    one_missing, two_missing = result.elnd
    assert one_missing.discard is False
    assert one_missing.value("perineural") is None
    assert two_missing.discard is True
    assert result.discarded == 1

    relaxed = read_csv(path, clinical_schema, missing_value_threshold=2)
    assert relaxed.discarded == 0


def test_blank_cohort_flag_counts_as_missing(tmp_path: Path, clinical_schema, write_dataset):
    # One blank variable plus the blank, unused ELND flag: two missing cells
    path = write_dataset(tmp_path / "data.csv", ["1,2015-03-01,3,1,,0,1,0,1,"])
    result = read_csv(path, clinical_schema, missing_value_threshold=1)
    assert len(result.slnb) == 1
    assert result.slnb[0].discard is True

    relaxed = read_csv(path, clinical_schema, missing_value_threshold=2)
    assert relaxed.slnb[0].discard is False


def test_non_numeric_value_is_missing(tmp_path: Path, clinical_schema, write_dataset, caplog):
    path = write_dataset(tmp_path / "data.csv", ["1,2015-03-01,deep,1,1,0,1,0,1,0"])
    result = read_csv(path, clinical_schema)
    assert result.slnb[0].value("depth_code") is None
    assert "not numeric" in caplog.text


def test_float_codes_are_accepted(tmp_path: Path, clinical_schema, write_dataset):
    path = write_dataset(tmp_path / "data.csv", ["1,2015-03-01,3.0,1,1,0,1,0,1.0,0"])
    result = read_csv(path, clinical_schema)
    assert result.slnb[0].value("depth_code") == 3


def test_disabled_variables_are_stored_null(tmp_path: Path, write_dataset):
    schema = VariablesConfig(disabled=["lvi"]).to_schema()
    path = write_dataset(tmp_path / "data.csv", ["1,2015-03-01,3,1,1,1,1,0,1,0"])
    assert read_csv(path, schema).slnb[0].value("lvi") is None


def test_blank_rows_are_ignored(clinical_schema):
    rows = [expected_header(clinical_schema), [], ["", "", "", "", "", "", "", "", "", ""],
            ["1", "2015-03-01", "3", "1", "1", "0", "1", "0", "1", "0"]]
    result = parse_rows(rows, clinical_schema, 1)
    assert [r.id for r in result.slnb] == [4]
    assert result.skipped == 0


def test_header_match_ignores_case_and_punctuation(clinical_schema):
    header = ["gender code", "Date of surgery", "depth-code", "Dysplasia present", "PERINEURAL", "lvi",
              "Invasive front type", "ene", "slnb", "elnd"]
    validate_header(header, clinical_schema)


def test_header_label_mismatch_warns(clinical_schema, caplog):
    header = expected_header(clinical_schema)
    header[2], header[3] = header[3], header[2]
    validate_header(header, clinical_schema)
    assert "Column 3" in caplog.text


def test_alternate_header_labels_are_read_by_position(tmp_path: Path, clinical_schema, caplog):
    path = tmp_path / "legacy.csv"
    path.write_text(
        "gender code,Date of Surgery,Depth Code,Dysplasia present,Perineural,LVI,Inv Front code,ENE,SLNB ,ELND\n"
        "1,2010-01-01,3,0,1,0,2,1,1,0\n",
        encoding="utf-8",
    )
    result = read_csv(path, clinical_schema)
    record = result.slnb[0]
    assert record.value("invasive_front_type") == 2
    assert record.value("ene") == 1
    assert "Inv Front code" in caplog.text
    assert "Column 4" not in caplog.text


def test_header_width_mismatch_raises(clinical_schema):
    with pytest.raises(ConfigurationError, match="column"):
        validate_header(expected_header(clinical_schema)[:-1], clinical_schema)


def test_short_row_raises(clinical_schema):
    rows = [expected_header(clinical_schema), ["1", "2015-03-01", "3"]]
    with pytest.raises(ConfigurationError, match="Row 2"):
        parse_rows(rows, clinical_schema, 1)


def test_missing_file_raises(tmp_path: Path, clinical_schema):
    with pytest.raises(FileNotFoundError):
        read_csv(tmp_path / "nope.csv", clinical_schema)


def test_utf8_bom_is_stripped(tmp_path: Path, clinical_schema):
    path = tmp_path / "bom.csv"
    text = ",".join(expected_header(clinical_schema)) + "\n1,2015-03-01,3,1,1,0,1,0,1,0\n"
    path.write_bytes(b"\xef\xbb\xbf" + text.encode("utf-8"))
    assert len(read_csv(path, clinical_schema).slnb) == 1
