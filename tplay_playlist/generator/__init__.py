"""Manifest, clear-key and playlist generation."""

from .keys import KeySynthesizer, build_clearkey_document, hex_to_base64url
from .manifest import ManifestSynthesizer, derive_manifest_url, rewrite_manifest
from .playlist import PlaylistAssembler

__all__ = [
    "KeySynthesizer",
    "ManifestSynthesizer",
    "PlaylistAssembler",
    "build_clearkey_document",
    "derive_manifest_url",
    "hex_to_base64url",
    "rewrite_manifest",
]
