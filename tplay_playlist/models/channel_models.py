"""Pydantic models that describe channels and the session attached to them."""

from typing import Any, Optional, Union

from pydantic import BaseModel


class Channel(BaseModel):
    """A single entry from the channel list endpoint."""

    id: Union[int, str]
    title: str = ""
    genre: str = ""
    logo: str = ""
    initial_url: str
    # Raw clear-key document as delivered upstream; kept verbatim for the playlist.
    base64: Optional[Any] = None

    @property
    def has_clearkey(self) -> bool:
        document = self.base64
        if not isinstance(document, dict):
            return False
        keys = document.get("keys")
        return isinstance(keys, list) and len(keys) > 0


class SessionMetadata(BaseModel):
    """Authorization context shared by every playlist entry."""

    user_agent: str = ""
    cookie: str
