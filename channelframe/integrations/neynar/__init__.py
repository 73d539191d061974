from .neynar_api_client import NeynarAPIClient

__all__ = ["NeynarAPIClient"]
