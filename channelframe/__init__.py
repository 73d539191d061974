"""
Channelframe - renders a Farcaster "favourite channel" frame for an Ethereum address.

This package provides:
- A Neynar API client for address and feed lookups
- Channel activity resolution (most active channel per user)
- Pillow-based compositing of the channel image onto a frame template
- A FastAPI endpoint returning the rendered PNG
"""

__version__ = "0.1.0"
__author__ = "Channelframe Team"
