import json
import logging

import pytest

from fluxclient import FloatValue, QueryResponse, Row, StringValue, decode_response


def _document(*series, **extra) -> str:
    return json.dumps({"results": [{"series": list(series), **extra}]})


def test_parses_a_response():
    src = """{
        "results": [{
            "series": [{
                "name": "status",
                "columns": ["time", "write_speed"],
                "values": [
                    ["2016-03-29T13:58:20.000000001Z", 0]
                ]
            }]
        }]
    }"""

    response = QueryResponse.from_json(src)

    assert len(response) == 1
    assert len(response[0]) == 1
    series = response[0][0]
    assert series.name == "status"
    assert series.tags is None
    assert len(series.rows) == 1
    row = series.rows[0]
    assert row["write_speed"] == FloatValue(data=0.0)
    assert isinstance(row["write_speed"].data, float)
    assert row["time"] == StringValue(data="2016-03-29T13:58:20.000000001Z")


def test_parses_a_response_with_many_values():
    columns = ["time", "avail", "hostname", "monitors", "type", "used"]
    values = [["2016-03-29T18:21:38Z", 9284852, "ip-172-31-21-156", 3, "monitor", 101584]]
    response = decode_response(
        _document({"name": "mon_daemon", "columns": columns, "values": values})
    )

    row = response[0][0].rows[0]
    assert row["monitors"] == FloatValue(data=3.0)
    assert row["hostname"] == StringValue(data="ip-172-31-21-156")
    assert list(row) == columns


def test_parses_a_response_with_tags():
    """Tags are attached to the series and never merged into the rows."""
    series = [
        {
            "name": "disk_total",
            "tags": {"path": f"/var/lib/ceph/osd/ceph-{i}"},
            "columns": ["time", "fstype", "host", "value"],
            "values": [["2016-03-29T19:03:03Z", "xfs", f"ip-{i}", 3203903488]],
        }
        for i in range(3)
    ]
    response = decode_response(_document(*series))

    group = response[0]
    assert [s.tags for s in group] == [
        {"path": "/var/lib/ceph/osd/ceph-0"},
        {"path": "/var/lib/ceph/osd/ceph-1"},
        {"path": "/var/lib/ceph/osd/ceph-2"},
    ]
    first = group[0]
    assert first.rows[0]["fstype"] == StringValue(data="xfs")
    assert "path" not in first.rows[0]


def test_tags_are_decoded_exactly():
    response = decode_response(
        _document(
            {"name": "m", "tags": {"path": "/a"}, "columns": ["v"], "values": [[1]]}
        )
    )
    series = response[0][0]
    assert series.tags == {"path": "/a"}
    assert dict(series.rows[0]) == {"v": FloatValue(data=1.0)}


def test_non_string_tag_values_are_stringified():
    response = decode_response(
        _document({"name": "m", "tags": {"n": 1, "b": True, "z": None}, "columns": []})
    )
    assert response[0][0].tags == {"n": "1", "b": "true", "z": "null"}


def test_null_tags_give_none():
    response = decode_response(
        _document({"name": "m", "tags": None, "columns": ["v"], "values": [[1]]})
    )
    assert response[0][0].tags is None


@pytest.mark.parametrize("cell", [True, False, None, [1, 2], {"a": 1}])
def test_unsupported_values_are_omitted(cell):
    response = decode_response(
        _document({"name": "m", "columns": ["time", "v"], "values": [["t0", cell]]})
    )
    row = response[0][0].rows[0]
    assert "v" not in row
    assert row.get("v") is None
    assert dict(row) == {"time": StringValue(data="t0")}


def test_rows_keep_source_order_and_missing_cells_are_skipped():
    response = decode_response(
        _document(
            {
                "name": "m",
                "columns": ["time", "a", "b"],
                "values": [["t0", 1.5, "x"], ["t1", 2], ["t2"]],
            }
        )
    )
    rows = response[0][0].rows
    assert [r.get_str("time") for r in rows] == ["t0", "t1", "t2"]
    assert dict(rows[1]) == {"time": StringValue(data="t1"), "a": FloatValue(data=2.0)}
    assert dict(rows[2]) == {"time": StringValue(data="t2")}


def test_extra_cells_beyond_columns_are_ignored():
    response = decode_response(
        _document({"name": "m", "columns": ["a"], "values": [[1, 2, 3]]})
    )
    assert dict(response[0][0].rows[0]) == {"a": FloatValue(data=1.0)}


def test_groups_and_series_keep_source_order():
    src = json.dumps(
        {
            "results": [
                {"series": [{"name": "a", "columns": []}, {"name": "b", "columns": []}]},
                {},
                {"series": [{"name": "c", "columns": []}]},
            ]
        }
    )
    response = decode_response(src)
    assert [[s.name for s in g] for g in response] == [["a", "b"], [], ["c"]]


@pytest.mark.parametrize("series", [None, "nope", 3, {"name": "x"}])
def test_wrong_shaped_series_gives_an_empty_group(series):
    response = decode_response(json.dumps({"results": [{"series": series}]}))
    assert len(response) == 1
    assert response[0].is_empty()


def test_missing_series_gives_an_empty_group():
    response = decode_response('{"results": [{"statement_id": 0}]}')
    assert len(response) == 1
    assert response[0].is_empty()


@pytest.mark.parametrize(
    "src", ["{}", '{"results": {}}', '{"results": null}', "[]", "3", '"results"']
)
def test_missing_or_wrong_shaped_results_gives_an_empty_response(src):
    response = decode_response(src)
    assert response.is_empty()
    assert len(response) == 0


@pytest.mark.parametrize("src", ["", "{", "not json", '{"results": [}', "{'a': 1}"])
def test_malformed_json_gives_an_empty_response(src, caplog):
    with caplog.at_level(logging.WARNING):
        response = decode_response(src)
    assert response.is_empty()
    assert "Error parsing JSON response" in caplog.text


def test_parse_errors_go_to_the_injected_logger(caplog):
    sink = logging.getLogger("test.decoder.sink")
    with caplog.at_level(logging.WARNING, logger="test.decoder.sink"):
        decode_response("{", logger=sink)
    assert [r.name for r in caplog.records] == ["test.decoder.sink"]


def test_bytes_input_is_accepted():
    response = decode_response(
        _document({"name": "m", "columns": ["v"], "values": [[2]]}).encode("utf-8")
    )
    assert response[0][0].rows[0].get_int("v") == 2


def test_missing_name_does_not_raise():
    response = decode_response(_document({"columns": ["v"], "values": [[1]]}))
    assert response[0][0].name == "null"


def test_series_columns_follow_first_seen_order():
    response = decode_response(
        _document(
            {"name": "m", "columns": ["a", "b"], "values": [[None, 1], [2, 3]]}
        )
    )
    assert response[0][0].columns == ["b", "a"]


def test_row_accessors_fall_back_to_zero():
    row = Row({"s": StringValue(data="12"), "f": FloatValue(data=-3.9)})
    assert row.get_float("f") == -3.9
    assert row.get_int("f") == -3
    assert row.get_float("s") == 0.0
    assert row.get_int("s") == 0
    assert row.get_float("missing") == 0.0
    assert row.get_int("missing") == 0
    assert row.get_str("s") == "12"
    assert row.get_str("missing") is None


def test_response_is_immutable():
    response = decode_response(_document({"name": "m", "columns": []}))
    with pytest.raises(AttributeError):
        response.results = []  # type: ignore[misc]
    with pytest.raises(AttributeError):
        response[0][0].name = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        Row({})["x"] = FloatValue(data=1.0)  # type: ignore[index]


def test_unterminated_deep_nesting_gives_an_empty_response(caplog):
    with caplog.at_level(logging.WARNING):
        response = decode_response("[" * 100000)
    assert response.is_empty()
    assert "Error parsing JSON response" in caplog.text


def test_deeply_nested_cell_gives_an_empty_response(caplog):
    cell = "[" * 100000 + "]" * 100000
    src = (
        '{"results": [{"series": [{"name": "m", "columns": ["v"], "values": [['
        + cell
        + "]]}]}]}"
    )
    with caplog.at_level(logging.WARNING):
        response = decode_response(src)
    assert response.is_empty()
    assert "Error parsing JSON response" in caplog.text
