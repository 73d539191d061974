"""
Data structures for channel activity resolution.

Neynar returns plain JSON; these dataclasses are the typed view the resolver
works with. Parsing is tolerant: absent optional fields become None or "".
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Channel:
    """A Farcaster channel as embedded in a cast."""
    id: str
    name: str = ""
    image_url: str = ""

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Optional["Channel"]:
        if not isinstance(data, dict) or not data.get("id"):
            return None
        # The feed endpoints use image_url, some older shapes use imageUrl
        image_url = data.get("image_url") or data.get("imageUrl") or ""
        return cls(id=str(data["id"]), name=data.get("name") or "", image_url=image_url)


@dataclass(frozen=True)
class Cast:
    hash: str
    channel: Optional[Channel] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Cast":
        return cls(hash=data.get("hash", ""), channel=Channel.from_api(data.get("channel")))


@dataclass(frozen=True)
class Identity:
    """Farcaster identity resolved from an Ethereum address."""
    fid: int
    username: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Identity":
        return cls(fid=int(data["fid"]), username=data.get("username"))


@dataclass
class ChannelActivity:
    """Aggregate of a user's casts in one channel."""
    channel_id: str
    count: int
    image_url: str
    name: str


@dataclass(frozen=True)
class MostActiveChannelImage:
    """The channel a user posts in most, with the image used for the frame."""
    channel_image_url: str
    address: str
    channel_name: Optional[str] = None
    channel_id: Optional[str] = None
    cast_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channelImageUrl": self.channel_image_url,
            "address": self.address,
            "channelName": self.channel_name,
        }
