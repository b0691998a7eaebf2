"""Rewrites the upstream DRM-protected MPD into one players can open directly.

The rewrite is a sequence of substring and regex substitutions keyed to the
exact markup the upstream CDN emits. A marker that is not found leaves the
document unchanged for that step.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional
from urllib.parse import urljoin
from xml.sax.saxutils import escape

from ..api.license_api import LicenseAPI
from ..utils.file_utils import is_safe_filename
from ..utils.http_client import HttpClient
from ..utils.ttl_cache import TTLCache

STAGING_REPLACEMENTS = (("bpweb", "bpprod"), ("akamaized-staging", "akamaized"))
MANIFEST_FILENAME = "toxicify.mpd"
SEGMENT_DIR = "dash/"

RELATIVE_BASE_URL = "<BaseURL>dash/</BaseURL>"
MPD_NAMESPACE = 'xmlns="urn:mpeg:dash:schema:mpd:2011"'
CENC_NAMESPACE = 'xmlns:cenc="urn:mpeg:cenc:2013"'
CENC_MARKER = '<ContentProtection value="cenc" schemeIdUri="urn:mpeg:dash:mp4protection:2011"/>'
CENC_MARKER_WITH_KID = (
    '<ContentProtection schemeIdUri="urn:mpeg:dash:mp4protection:2011" value="cenc" cenc:default_KID="{kid}"/>'
)

DECORATION_PARAMS = {"idt", "decryption_key"}

# init*.dash / media*.m4s followed by a query string, stopping at a quote,
# whitespace, tag delimiter or the end of the text.
SEGMENT_REFERENCE = re.compile(
    r"\b(init[^\"'\s?&<>]*?\.dash|media[^\"'\s?&<>]*?\.m4s)((?:\?|&amp;|&)[^\"'\s<>]*)"
)
QUERY_SEPARATOR = re.compile(r"&amp;|[&?]")
WIDEVINE_PROTECTION = re.compile(
    r'<ContentProtection\s+schemeIdUri="(urn:[^"]+)"\s+value="Widevine"\s*/>'
)

ManifestRewriter = Callable[..., str]


def derive_manifest_url(initial_url: str) -> str:
    """Points the staging manifest URL at its production equivalent."""

    url = initial_url
    for staging, production in STAGING_REPLACEMENTS:
        url = url.replace(staging, production, 1)
    return url


def segment_base_url(manifest_url: str) -> str:
    if MANIFEST_FILENAME in manifest_url:
        return manifest_url.replace(MANIFEST_FILENAME, SEGMENT_DIR, 1)
    return urljoin(manifest_url, SEGMENT_DIR)


def strip_segment_decoration(text: str) -> str:
    """Drops ``idt``/``decryption_key`` parameters from segment references."""

    def replace(match: re.Match) -> str:
        filename, query = match.group(1), match.group(2)
        separator = "&amp;" if "&amp;" in query else "&"
        kept = [
            param
            for param in QUERY_SEPARATOR.split(query)
            if param and param.split("=", 1)[0] not in DECORATION_PARAMS
        ]
        if not kept:
            return filename
        return f"{filename}?{separator.join(kept)}"

    return SEGMENT_REFERENCE.sub(replace, text)


def rewrite_manifest(raw: str, *, manifest_url: str, pssh_set: str = "", kid: str = "") -> str:
    manifest = raw.replace(
        RELATIVE_BASE_URL,
        f"<BaseURL>{escape(segment_base_url(manifest_url))}</BaseURL>",
        1,
    )
    manifest = strip_segment_decoration(manifest)

    if pssh_set:
        manifest = WIDEVINE_PROTECTION.sub(
            lambda match: (
                f'<ContentProtection schemeIdUri="{match.group(1)}">'
                f"<cenc:pssh>{pssh_set}</cenc:pssh></ContentProtection>"
            ),
            manifest,
            count=1,
        )

    if "xmlns:cenc=" not in manifest:
        manifest = manifest.replace(MPD_NAMESPACE, f"{MPD_NAMESPACE} {CENC_NAMESPACE}", 1)

    if kid:
        manifest = manifest.replace(CENC_MARKER, CENC_MARKER_WITH_KID.format(kid=kid), 1)
    return manifest


class ManifestSynthesizer:
    """Builds (and caches) the playable manifest for a channel id."""

    def __init__(
        self,
        license_api: LicenseAPI,
        http_client: HttpClient,
        cache: TTLCache,
        ttl: float,
        rewriter: ManifestRewriter = rewrite_manifest,
    ) -> None:
        self._license_api = license_api
        self._client = http_client
        self._cache = cache
        self._ttl = ttl
        self._rewriter = rewriter

    def synthesize(self, channel_id: str) -> Optional[str]:
        if not is_safe_filename(channel_id):
            logging.error("Invalid channel id %r", channel_id)
            return None
        return self._cache.get_or_fetch_text(
            f"TP-{channel_id}.mpd",
            self._ttl,
            lambda: self._build(channel_id),
        )

    def _build(self, channel_id: str) -> Optional[str]:
        info = self._license_api.get_license(channel_id)
        if info is None:
            return None
        if not info.initial_url:
            logging.error("Licensing data for channel %s has no initialUrl", channel_id)
            return None

        manifest_url = derive_manifest_url(info.initial_url)
        raw = self._client.fetch_text(manifest_url)
        if raw is None:
            return None

        manifest = self._rewriter(
            raw,
            manifest_url=manifest_url,
            pssh_set=info.pssh_set or "",
            kid=info.kid or "",
        )
        logging.info("Generated manifest for channel %s", channel_id)
        return manifest
