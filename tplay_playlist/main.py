from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

from .api.channel_api import ChannelAPI
from .api.license_api import LicenseAPI
from .api.session_api import SessionAPI
from .generator.keys import KeySynthesizer
from .generator.manifest import ManifestSynthesizer
from .generator.playlist import DEFAULT_EPG_URL, PlaylistAssembler
from .utils.file_utils import atomic_write_text
from .utils.http_client import HttpClient
from .utils.ttl_cache import TTLCache

load_dotenv()

DEFAULT_CHANNELS_URL = "https://babel-in.xyz/babel-469c814cea6a2f626809c9b6f1f966a4/tata/channels"
DEFAULT_HMAC_URL = "https://babel-in.xyz/babel-469c814cea6a2f626809c9b6f1f966a4/tata/hmac"


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_float(name: str) -> float | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _default(value, fallback):
    return fallback if value is None else value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a clear-key M3U playlist and DASH manifests.")
    parser.add_argument("--channels-url", default=_env_str("CHANNELS_URL") or DEFAULT_CHANNELS_URL, help="Channel list endpoint")
    parser.add_argument("--hmac-url", default=_env_str("HMAC_URL") or DEFAULT_HMAC_URL, help="Session (hmac) endpoint")
    parser.add_argument("--key-url", default=_env_str("KEY_URL") or "", help="Licensing endpoint prefix; the channel id is appended")
    parser.add_argument("--epg-url", default=_env_str("EPG_URL") or DEFAULT_EPG_URL, help="Program guide URL written to the playlist header")
    parser.add_argument("--retries", type=int, default=_default(_env_int("RETRIES"), 3), help="Attempts per upstream request")
    parser.add_argument(
        "--retry-delay",
        type=float,
        default=_default(_env_float("RETRY_DELAY"), 0.0),
        help="Seconds to wait between attempts",
    )
    parser.add_argument("--timeout", type=int, default=_default(_env_int("HTTP_TIMEOUT"), 10), help="HTTP timeout in seconds")
    parser.add_argument("--cache-dir", default=_env_str("CACHE_DIR") or "_cache_", help="Directory holding cache files")
    parser.add_argument(
        "--cache-time",
        type=int,
        default=_default(_env_int("CACHE_TIME"), 60),
        help="TTL in seconds for manifest and key documents",
    )
    parser.add_argument(
        "--m3u-cache-time",
        type=int,
        default=_default(_env_int("M3U_CACHE_TIME"), 7200),
        help="TTL in seconds for the channel list and session data",
    )
    parser.add_argument("--output", default=_env_str("OUTPUT_FILE") or "ts.m3u", help="Playlist output path")
    parser.add_argument("--manifest-id", help="Print the rewritten manifest for this channel id and exit")
    parser.add_argument("--keys-id", help="Print the clear-key JSON for this channel id and exit")
    parser.add_argument("--verbose", action="store_true", default=_env_bool("VERBOSE"), help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def generate_playlist(args: argparse.Namespace, http_client: HttpClient, cache: TTLCache) -> bool:
    channels = ChannelAPI(http_client, cache, args.channels_url, args.m3u_cache_time).get_channels()
    session = SessionAPI(http_client, cache, args.hmac_url, args.m3u_cache_time).get_session()

    if channels is None or session is None:
        logging.error("Failed to fetch data from API")
        return False

    playlist = PlaylistAssembler(args.epg_url).assemble(channels, session)
    try:
        atomic_write_text(args.output, playlist)
    except OSError as exc:
        logging.error("Unable to write playlist %s: %s", args.output, exc)
        return False
    logging.info("M3U8 playlist generated and saved to %s", args.output)
    return True


def print_manifest(args: argparse.Namespace, http_client: HttpClient, cache: TTLCache) -> bool:
    license_api = LicenseAPI(http_client, args.key_url)
    manifest = ManifestSynthesizer(license_api, http_client, cache, args.cache_time).synthesize(args.manifest_id)
    if manifest is None:
        logging.error("Failed to generate manifest for channel %s", args.manifest_id)
        return False
    sys.stdout.write(manifest)
    return True


def print_keys(args: argparse.Namespace, http_client: HttpClient, cache: TTLCache) -> bool:
    license_api = LicenseAPI(http_client, args.key_url)
    document = KeySynthesizer(license_api, cache, args.cache_time).synthesize(args.keys_id)
    if document is None:
        logging.error("Failed to generate keys for channel %s", args.keys_id)
        return False
    sys.stdout.write(json.dumps(document) + "\n")
    return True


def run(args: argparse.Namespace, http_client: HttpClient) -> bool:
    try:
        cache = TTLCache(args.cache_dir)
    except OSError as exc:
        logging.error("Unable to prepare cache directory %s: %s", args.cache_dir, exc)
        return False

    if args.manifest_id or args.keys_id:
        if not args.key_url:
            logging.error("--key-url (KEY_URL) is required for manifest or key generation")
            return False
        ok = True
        if args.manifest_id:
            ok = print_manifest(args, http_client, cache) and ok
        if args.keys_id:
            ok = print_keys(args, http_client, cache) and ok
        return ok

    return generate_playlist(args, http_client, cache)


def main() -> None:
    args = parse_args()
    configure_logging(args.verbose)

    with HttpClient(timeout=args.timeout, retries=args.retries, retry_delay=args.retry_delay) as http_client:
        run(args, http_client)


if __name__ == "__main__":
    main()
