from __future__ import annotations

import base64
import json
import os
from unittest.mock import MagicMock

import pytest

from tplay_playlist.generator.keys import KeySynthesizer, build_clearkey_document, hex_to_base64url
from tplay_playlist.models import LicenseInfo


def _decode_base64url(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def test_hex_to_base64url_round_trips():
    encoded = hex_to_base64url("00ff10")

    assert encoded == "AP8Q"
    assert _decode_base64url(encoded) == bytes([0x00, 0xFF, 0x10])


def test_hex_to_base64url_uses_url_safe_alphabet_without_padding():
    assert hex_to_base64url("ffff") == "__8"
    assert hex_to_base64url("fbff") == "-_8"


def test_hex_to_base64url_accepts_uuid_form():
    assert hex_to_base64url("00112233-4455-6677-8899-aabbccddeeff") == hex_to_base64url(
        "00112233445566778899aabbccddeeff"
    )


@pytest.mark.parametrize("value", ["zz", "abc", "", "   "])
def test_hex_to_base64url_rejects_malformed_input(value):
    with pytest.raises(ValueError):
        hex_to_base64url(value)


def test_build_clearkey_document_shape():
    document = build_clearkey_document("00ff10", "ffff")

    assert document.model_dump() == {
        "keys": [{"kty": "oct", "k": "__8", "kid": "AP8Q"}],
        "type": "temporary",
    }


def test_synthesizer_builds_and_caches_document(cache):
    license_api = MagicMock()
    license_api.get_license.return_value = LicenseInfo(key_id_hex="00ff10", key_hex="ffff")
    synthesizer = KeySynthesizer(license_api, cache, ttl=60)

    document = synthesizer.synthesize("512")

    assert document == {"keys": [{"kty": "oct", "k": "__8", "kid": "AP8Q"}], "type": "temporary"}
    assert synthesizer.synthesize("512") == document
    license_api.get_license.assert_called_once_with("512")
    with open(cache.path_for("TP-512.json"), encoding="utf-8") as handle:
        assert json.load(handle) == document


def test_malformed_hex_yields_none_without_retry(cache, caplog):
    license_api = MagicMock()
    license_api.get_license.return_value = LicenseInfo(key_id_hex="not-hex", key_hex="ffff")

    assert KeySynthesizer(license_api, cache, ttl=60).synthesize("13") is None
    license_api.get_license.assert_called_once()
    assert cache.age("TP-13.json") is None
    assert any("Malformed key material" in record.getMessage() for record in caplog.records)


def test_missing_key_material_yields_none(cache):
    license_api = MagicMock()
    license_api.get_license.return_value = LicenseInfo(key_id_hex="00ff10")

    assert KeySynthesizer(license_api, cache, ttl=60).synthesize("14") is None


def test_unavailable_license_yields_none(cache):
    license_api = MagicMock()
    license_api.get_license.return_value = None

    assert KeySynthesizer(license_api, cache, ttl=60).synthesize("15") is None


@pytest.mark.parametrize("channel_id", ["a/b", "..", "", "x:y"])
def test_synthesizer_rejects_ids_unfit_for_cache_names(cache, channel_id):
    license_api = MagicMock()
    license_api.get_license.return_value = LicenseInfo(key_id_hex="00ff10", key_hex="ffff")

    assert KeySynthesizer(license_api, cache, ttl=60).synthesize(channel_id) is None
    license_api.get_license.assert_not_called()
    assert os.listdir(cache.cache_dir) == []


def test_similar_ids_do_not_share_cache_entry(cache):
    license_api = MagicMock()
    license_api.get_license.return_value = LicenseInfo(key_id_hex="00ff10", key_hex="ffff")
    synthesizer = KeySynthesizer(license_api, cache, ttl=60)

    assert synthesizer.synthesize("ab") is not None
    assert synthesizer.synthesize("a/b") is None
    license_api.get_license.assert_called_once_with("ab")
