"""
Core lookup logic: typed models and the channel activity resolver.
"""

from .channel_resolver import ChannelActivityResolver, select_most_active, tally_channel_activity
from .models import Cast, Channel, ChannelActivity, Identity, MostActiveChannelImage

__all__ = [
    "ChannelActivityResolver",
    "select_most_active",
    "tally_channel_activity",
    "Cast",
    "Channel",
    "ChannelActivity",
    "Identity",
    "MostActiveChannelImage",
]
