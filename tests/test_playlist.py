from __future__ import annotations

from tplay_playlist.generator.playlist import PlaylistAssembler
from tplay_playlist.models import Channel, SessionMetadata

EPG_URL = "https://epg.test/tataplay/epg.xml.gz"
CLEARKEY = {"keys": [{"kty": "oct", "k": "__8", "kid": "AP8Q"}], "type": "temporary"}
SESSION = SessionMetadata(user_agent="Mozilla/5.0 TestAgent", cookie="hdntl=exp=1~acl=/*~hmac=abc")


def _channels():
    return [
        Channel(
            id=101,
            title="Colors HD",
            genre="Entertainment",
            logo="https://img.test/colors.png",
            initial_url="https://cdn.test/colors/toxicify.mpd",
            base64=CLEARKEY,
        ),
        Channel(id=102, title="Empty", genre="News", logo="", initial_url="https://cdn.test/b.mpd", base64={}),
        Channel(id=103, title="Plain", genre="News", logo="", initial_url="https://cdn.test/c.mpd"),
    ]


def test_only_channels_with_clearkey_are_emitted():
    playlist = PlaylistAssembler(EPG_URL).assemble(_channels(), SESSION)

    assert playlist.count("#EXTINF:") == 1
    assert 'tvg-id="101"' in playlist
    assert "Empty" not in playlist and "Plain" not in playlist


def test_entry_block_format():
    playlist = PlaylistAssembler(EPG_URL).assemble(_channels()[:1], SESSION)

    assert playlist == (
        f'#EXTM3U x-tvg-url="{EPG_URL}"\n'
        "\n"
        '#EXTINF:-1 tvg-id="101" group-title="Entertainment" tvg-logo="https://img.test/colors.png", Colors HD\n'
        "#KODIPROP:inputstream.adaptive.license_type=clearkey\n"
        '#KODIPROP:inputstream.adaptive.license_key={"keys":[{"kty":"oct","k":"__8","kid":"AP8Q"}],"type":"temporary"}\n'
        "#EXTVLCOPT:http-user-agent=Mozilla/5.0 TestAgent\n"
        '#EXTHTTP:{"cookie":"hdntl=exp=1~acl=/*~hmac=abc"}\n'
        "https://cdn.test/colors/toxicify.mpd|cookie:hdntl=exp=1~acl=/*~hmac=abc\n"
        "\n"
    )


def test_empty_channel_list_yields_header_only():
    assert PlaylistAssembler(EPG_URL).assemble([], SESSION) == f'#EXTM3U x-tvg-url="{EPG_URL}"\n\n'


def test_upstream_documents_with_several_keys_pass_through_unchanged():
    document = {
        "keys": [
            {"kty": "oct", "k": "a", "kid": "b"},
            {"kty": "oct", "k": "c", "kid": "d"},
        ],
        "type": "temporary",
    }
    channel = Channel(id="x1", title="Multi", initial_url="https://cdn.test/m.mpd", base64=document)

    playlist = PlaylistAssembler(EPG_URL).assemble([channel], SESSION)

    assert (
        '#KODIPROP:inputstream.adaptive.license_key={"keys":[{"kty":"oct","k":"a","kid":"b"},'
        '{"kty":"oct","k":"c","kid":"d"}],"type":"temporary"}'
    ) in playlist


def test_malformed_clearkey_documents_are_skipped():
    channels = [
        Channel(id=1, initial_url="https://cdn.test/1.mpd", base64="not-a-document"),
        Channel(id=2, initial_url="https://cdn.test/2.mpd", base64={"keys": []}),
        Channel(id=3, initial_url="https://cdn.test/3.mpd", base64={"keys": "oops"}),
    ]

    assert PlaylistAssembler(EPG_URL).assemble(channels, SESSION).count("#EXTINF:") == 0


def test_channel_order_is_preserved():
    channels = [
        Channel(id=n, title=f"Channel {n}", initial_url=f"https://cdn.test/{n}.mpd", base64=CLEARKEY)
        for n in (30, 10, 20)
    ]

    playlist = PlaylistAssembler(EPG_URL).assemble(channels, SESSION)

    assert playlist.index('tvg-id="30"') < playlist.index('tvg-id="10"') < playlist.index('tvg-id="20"')


def test_assembly_is_deterministic():
    assembler = PlaylistAssembler(EPG_URL)

    assert assembler.assemble(_channels(), SESSION) == assembler.assemble(_channels(), SESSION)
