"""
Channel Activity Resolver

Resolves an Ethereum address to the Farcaster channel its owner posts in most:

    address -> FID (bulk-by-address) -> popular casts -> per-channel tally -> max

A missing identity, an empty feed, casts without channels and upstream 404s all
resolve to None. Every other failure is raised as a ChannelLookupError subclass
carrying the address.
"""

import logging
import re
from typing import Dict, Iterable, Optional

from channelframe.core.models import Cast, ChannelActivity, Identity, MostActiveChannelImage
from channelframe.exceptions import (
    ChannelLookupError,
    InvalidAddressError,
    NeynarNotFoundError,
    NeynarUnavailableError,
)
from channelframe.integrations.neynar import NeynarAPIClient

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def tally_channel_activity(casts: Iterable[Cast]) -> Dict[str, ChannelActivity]:
    """
    Count casts per channel in a single pass.

    The returned dict keeps first-seen order. Name and image are taken from the
    first cast seen for each channel and never overwritten.
    """
    activity: Dict[str, ChannelActivity] = {}
    for cast in casts:
        channel = cast.channel
        if channel is None:
            continue
        entry = activity.get(channel.id)
        if entry is None:
            entry = ChannelActivity(
                channel_id=channel.id, count=0, image_url=channel.image_url, name=channel.name
            )
            activity[channel.id] = entry
        entry.count += 1
    return activity


def select_most_active(activity: Dict[str, ChannelActivity]) -> Optional[ChannelActivity]:
    """Return the entry with the highest count; ties go to the earliest-seen channel."""
    most_active: Optional[ChannelActivity] = None
    for entry in activity.values():
        if most_active is None or entry.count > most_active.count:
            most_active = entry
    return most_active


class ChannelActivityResolver:
    """Looks up the most active channel for an address via Neynar."""

    def __init__(self, client: NeynarAPIClient):
        self.client = client

    @staticmethod
    def validate_address(address) -> str:
        if not address or not isinstance(address, str):
            raise InvalidAddressError("Invalid address provided", address=address or None)
        if not ADDRESS_PATTERN.match(address):
            raise InvalidAddressError("Address is not a 0x-prefixed hex address", address=address)
        return address

    async def resolve(self, address: str) -> Optional[MostActiveChannelImage]:
        """
        Resolve the most active channel image for an address.

        Returns:
            MostActiveChannelImage, or None when the address has no Farcaster
            identity, no popular casts, or no cast in any channel.

        Raises:
            InvalidAddressError: address is empty or malformed.
            ChannelLookupError: any other lookup failure, with the address attached.
        """
        self.validate_address(address)

        try:
            identity = await self._lookup_identity(address)
            if identity is None:
                logger.info(f"No Farcaster identity for address {address}")
                return None

            casts = await self._fetch_popular_casts(identity.fid)
            if not casts:
                logger.info(f"No popular casts for FID {identity.fid}")
                return None
        except NeynarNotFoundError:
            logger.info(f"Neynar returned 404 while resolving {address}")
            return None
        except ChannelLookupError as e:
            e.address = address
            raise
        except Exception as e:
            raise NeynarUnavailableError(
                "Failed to fetch most active channel image",
                address=address,
                original_error=e,
            ) from e

        activity = tally_channel_activity(casts)
        most_active = select_most_active(activity)
        if most_active is None:
            logger.info(f"None of the {len(casts)} popular casts for {address} were in a channel")
            return None

        logger.debug(
            f"Most active channel for {address}: {most_active.channel_id} ({most_active.count} casts)"
        )
        return MostActiveChannelImage(
            channel_image_url=most_active.image_url,
            address=address,
            channel_name=most_active.name,
            channel_id=most_active.channel_id,
            cast_count=most_active.count,
        )

    async def _lookup_identity(self, address: str) -> Optional[Identity]:
        users_by_address = await self.client.get_users_by_address([address])
        users = (users_by_address or {}).get(address.lower()) or []
        if not users:
            return None
        return Identity.from_api(users[0])

    async def _fetch_popular_casts(self, fid: int) -> list:
        payload = await self.client.get_popular_casts(fid)
        raw_casts = (payload or {}).get("casts") or []
        return [Cast.from_api(raw) for raw in raw_casts]
