"""Models for per-channel licensing data and clear-key documents."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class LicenseInfo(BaseModel):
    """Licensing metadata returned for one channel id."""

    initial_url: Optional[str] = None
    pssh_set: Optional[str] = None
    kid: Optional[str] = None
    key_id_hex: Optional[str] = None
    key_hex: Optional[str] = None


class ClearKey(BaseModel):
    kty: str = "oct"
    k: str
    kid: str


class ClearKeyDocument(BaseModel):
    """JSON Web Key set understood by clear-key capable players."""

    keys: List[ClearKey]
    type: str = "temporary"
