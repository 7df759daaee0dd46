# tests/unit/adapters/mappers/test_envelope_codec.py
from __future__ import annotations

import json

import pytest

from exact_online.adapters.mappers.envelope import (
    EnvelopeCodec,
    extract_continuation_token,
    unwrap_array,
    unwrap_object,
)
from exact_online.domain.exceptions import ExactJsonError, MalformedEnvelope

codec = EnvelopeCodec()


def test_unwrap_object_strips_root_and_metadata() -> None:
    text = json.dumps(
        {
            "d": {
                "__metadata": {"uri": "https://x/Accounts(guid'1')", "type": "Exact.Web.Api.Models.Account"},
                "Code": "C1",
                "Name": None,
                "Blocked": False,
                "CreditLineSales": 1.5,
            }
        }
    )
    assert json.loads(codec.unwrap_object(text)) == {
        "Code": "C1",
        "Name": None,
        "Blocked": False,
        "CreditLineSales": 1.5,
    }


def test_unwrap_object_flattens_nested_results_and_drops_deferred_links() -> None:
    text = json.dumps(
        {
            "d": {
                "InvoiceID": "a",
                "SalesInvoiceLines": {"results": [{"ID": "l1", "Quantity": 2}, "noise", 3]},
                "Account": {"__deferred": {"uri": "https://x/Accounts(guid'1')"}},
                "Tags": ["x", "y"],
            }
        }
    )
    assert json.loads(codec.unwrap_object(text)) == {
        "InvoiceID": "a",
        "SalesInvoiceLines": [{"ID": "l1", "Quantity": 2}],
    }


def test_unwrap_array_accepts_both_collection_shapes_identically() -> None:
    items = [{"Code": "A"}, {"Code": "B"}]
    plain = codec.unwrap_array(json.dumps({"d": items}))
    wrapped = codec.unwrap_array(json.dumps({"d": {"results": items, "__next": "https://x?$skiptoken=1"}}))
    assert plain == wrapped
    assert json.loads(plain) == items


def test_unwrap_array_drops_non_object_elements() -> None:
    text = json.dumps({"d": {"results": [{"Code": "A"}, 1, None, "x", [1], {"Code": "B"}]}})
    assert json.loads(codec.unwrap_array(text)) == [{"Code": "A"}, {"Code": "B"}]


def test_unwrap_array_flattens_nested_collections_in_each_element() -> None:
    text = json.dumps({"d": [{"Lines": {"results": [{"Qty": 1, "__metadata": {}}]}}]})
    assert json.loads(codec.unwrap_array(text)) == [{"Lines": [{"Qty": 1}]}]


def test_unwrap_output_is_compact_and_keeps_unicode() -> None:
    assert codec.unwrap_object('{"d": {"Name": "Café"}}') == '{"Name":"Café"}'


def test_unwrap_accepts_bytes() -> None:
    assert codec.unwrap_array(b'{"d": []}') == "[]"


@pytest.mark.parametrize(
    "text",
    [None, "", "not json", '{"x": {}}', "[1, 2]", '{"d": "scalar"}', '{"d": [1]}', "NaN"],
)
def test_unwrap_object_rejects_malformed_envelopes(text: str | None) -> None:
    with pytest.raises(MalformedEnvelope) as exc_info:
        codec.unwrap_object(text)
    assert exc_info.value.details["operation"] == "unwrap_object"


@pytest.mark.parametrize("text", [None, "{", '{"x": []}', '{"d": {"Code": "A"}}', '{"d": 5}'])
def test_unwrap_array_rejects_malformed_envelopes(text: str | None) -> None:
    with pytest.raises(MalformedEnvelope):
        codec.unwrap_array(text)


def test_malformed_envelope_chains_parse_error_and_is_json_error() -> None:
    with pytest.raises(ExactJsonError) as exc_info:
        codec.unwrap_object("{broken")
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert exc_info.value.code == "MALFORMED_ENVELOPE"
    assert exc_info.value.details["excerpt"] == "{broken"


def test_extract_continuation_token_reads_skiptoken() -> None:
    text = json.dumps(
        {
            "d": {
                "results": [],
                "__next": "https://start.exactonline.nl/api/v1/1/crm/Accounts?$select=Code&$skiptoken=guid'abc'&$top=5",
            }
        }
    )
    assert codec.extract_continuation_token(text) == "guid'abc'"


def test_extract_continuation_token_stops_at_fragment() -> None:
    text = json.dumps({"d": {"__next": "https://x/Accounts?$skiptoken=XYZ#frag"}})
    assert codec.extract_continuation_token(text) == "XYZ"


@pytest.mark.parametrize(
    "text",
    [
        '{"d": {}}',
        '{"d": {"results": []}}',
        '{"d": []}',
        '{"d": {"__next": "https://x/Accounts?$top=5"}}',
        '{"d": {"__next": 5}}',
        '{"x": 1}',
        "[1]",
    ],
)
def test_extract_continuation_token_absent_yields_none(text: str) -> None:
    assert codec.extract_continuation_token(text) is None


def test_extract_continuation_token_rejects_invalid_json() -> None:
    with pytest.raises(MalformedEnvelope):
        codec.extract_continuation_token("{nope")


def test_module_level_helpers_share_default_codec() -> None:
    text = '{"d": {"results": [{"A": 1}], "__next": "u?$skiptoken=7"}}'
    assert unwrap_array(text) == '[{"A":1}]'
    assert unwrap_object('{"d": {"A": 1}}') == '{"A":1}'
    assert extract_continuation_token(text) == "7"


def _nested_results(depth: int) -> str:
    return '{"Lines": {"results": [' * depth + "{}" + "]}}" * depth


@pytest.mark.parametrize("depth", [2_000, 100_000])
def test_unwrap_object_rejects_runaway_nesting(depth: int) -> None:
    text = '{"d": ' + _nested_results(depth) + "}"
    with pytest.raises(MalformedEnvelope) as exc_info:
        codec.unwrap_object(text)
    assert isinstance(exc_info.value.__cause__, RecursionError)
    assert exc_info.value.details["operation"] == "unwrap_object"


@pytest.mark.parametrize("depth", [2_000, 100_000])
def test_unwrap_array_rejects_runaway_nesting(depth: int) -> None:
    text = '{"d": {"results": [' + _nested_results(depth) + "]}}"
    with pytest.raises(MalformedEnvelope) as exc_info:
        codec.unwrap_array(text)
    assert isinstance(exc_info.value.__cause__, RecursionError)


def test_continuation_token_rejects_runaway_nesting() -> None:
    text = '{"d": ' + "[" * 100_000 + "]" * 100_000 + "}"
    with pytest.raises(MalformedEnvelope):
        codec.extract_continuation_token(text)
