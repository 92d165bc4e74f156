"""Tests for share link building and parsing."""

import base64
import json
import zlib
from urllib.parse import parse_qs, urlparse

import pytest

from snapcontract.domain.share import link as link_module
from snapcontract.domain.share.link import (
    MODE_AUTHORING,
    MODE_RECEIVED,
    build_link,
    compress_text,
    extract_payload,
    parse_link,
    share_mode,
)
from snapcontract.errors import InvalidShareLink, MalformedShareData

BASE_URL = "https://contract.example.com/"


def test_round_trip(full_state):
    url = build_link(full_state, BASE_URL)
    assert url.startswith(BASE_URL + "?data=")
    assert parse_link(url) == full_state


def test_payload_is_url_safe(full_state):
    payload = parse_qs(urlparse(build_link(full_state, BASE_URL)).query)["data"][0]
    assert "+" not in payload
    assert "/" not in payload
    assert "=" not in payload


def test_existing_query_parameters_are_kept(full_state):
    url = build_link(full_state, BASE_URL + "?lang=ko&data=stale")
    query = parse_qs(urlparse(url).query)
    assert query["lang"] == ["ko"]
    assert len(query["data"]) == 1
    assert parse_link(url) == full_state


def test_no_data_parameter_means_authoring_mode():
    assert parse_link(BASE_URL) is None
    assert parse_link(BASE_URL + "?lang=ko") is None
    assert share_mode(BASE_URL) == MODE_AUTHORING


def test_data_parameter_means_received_mode(full_state):
    assert share_mode(build_link(full_state, BASE_URL)) == MODE_RECEIVED


@pytest.mark.parametrize(
    "payload",
    [
        "!!!notbase64",
        base64.urlsafe_b64encode(b"plain text, not zlib").decode().rstrip("="),
        "a",
    ],
)
def test_undecompressable_payload_raises_invalid_link(payload):
    with pytest.raises(InvalidShareLink):
        parse_link(f"{BASE_URL}?data={payload}")


def test_empty_payload_raises_invalid_link():
    with pytest.raises(InvalidShareLink):
        parse_link(BASE_URL + "?data=")


def test_decompressed_garbage_raises_malformed_data():
    payload = compress_text("{not valid json")
    with pytest.raises(MalformedShareData):
        parse_link(f"{BASE_URL}?data={payload}")


def test_unknown_keys_in_link_are_ignored():
    payload = compress_text(json.dumps({"n": "홍길동", "future": {"x": 1}}, ensure_ascii=False))
    state = parse_link(f"{BASE_URL}?data={payload}")
    assert state.contractorName == "홍길동"


def test_legacy_link_decodes():
    text = json.dumps({"contractorName": "홍길동", "discountItems": ["partner"]}, ensure_ascii=False)
    payload = base64.urlsafe_b64encode(zlib.compress(text.encode("utf-8"))).decode().rstrip("=")
    state = parse_link(f"{BASE_URL}?data={payload}")
    assert state.contractorName == "홍길동"
    assert state.discountItems == ["partner"]


def test_oversized_payload_is_rejected(monkeypatch):
    monkeypatch.setattr(link_module, "SHARE_MAX_BYTES", 1024)
    payload = compress_text(json.dumps({"n": "a" * 5000}))
    with pytest.raises(InvalidShareLink, match="expands beyond"):
        parse_link(f"{BASE_URL}?data={payload}")


def test_truncated_payload_is_rejected(full_state):
    payload = extract_payload(build_link(full_state, BASE_URL))
    with pytest.raises(InvalidShareLink):
        parse_link(f"{BASE_URL}?data={payload[: len(payload) // 2]}")
