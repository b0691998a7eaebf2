"""Serializes channels into an M3U playlist with clear-key player directives."""

from __future__ import annotations

import json
from typing import Iterable, List

from ..models import Channel, SessionMetadata

DEFAULT_EPG_URL = "https://raw.githubusercontent.com/mitthu786/tvepg/main/tataplay/epg.xml.gz"


class PlaylistAssembler:
    """Emits one entry block per channel that carries a clear-key document."""

    def __init__(self, epg_url: str = DEFAULT_EPG_URL) -> None:
        self.epg_url = epg_url

    def assemble(self, channels: Iterable[Channel], session: SessionMetadata) -> str:
        lines: List[str] = [f'#EXTM3U x-tvg-url="{self.epg_url}"', ""]
        for channel in channels:
            if not channel.has_clearkey:
                continue
            lines.extend(self._entry(channel, session))
        return "\n".join(lines) + "\n"

    def _entry(self, channel: Channel, session: SessionMetadata) -> List[str]:
        license_key = json.dumps(channel.base64, separators=(",", ":"), ensure_ascii=False)
        cookie = session.cookie
        return [
            f'#EXTINF:-1 tvg-id="{channel.id}" group-title="{channel.genre}" '
            f'tvg-logo="{channel.logo}", {channel.title}',
            "#KODIPROP:inputstream.adaptive.license_type=clearkey",
            f"#KODIPROP:inputstream.adaptive.license_key={license_key}",
            f"#EXTVLCOPT:http-user-agent={session.user_agent}",
            f'#EXTHTTP:{{"cookie":"{cookie}"}}',
            f"{channel.initial_url}|cookie:{cookie}",
            "",
        ]
