"""
Global test configuration and fixtures.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from channelframe.config import AppConfig, NeynarConfig, RenderConfig
from channelframe.core.channel_resolver import ChannelActivityResolver
from channelframe.integrations.neynar import NeynarAPIClient
from tests.factories import PLACEHOLDER_URL, TEMPLATE_COLOR, TEMPLATE_SIZE, solid_image


@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    """Write a solid blue template PNG."""
    path = tmp_path / "template.png"
    solid_image(TEMPLATE_SIZE, TEMPLATE_COLOR).save(path, format="PNG")
    return path


@pytest.fixture
def settings(template_path: Path) -> AppConfig:
    return AppConfig(
        neynar=NeynarConfig(api_key="test_key"),
        render=RenderConfig(template_path=str(template_path), placeholder_url=PLACEHOLDER_URL),
    )


@pytest.fixture
def mock_neynar_client() -> MagicMock:
    client = MagicMock(spec=NeynarAPIClient)
    client.get_users_by_address = AsyncMock(return_value={})
    client.get_popular_casts = AsyncMock(return_value={"casts": []})
    return client


@pytest.fixture
def resolver(mock_neynar_client) -> ChannelActivityResolver:
    return ChannelActivityResolver(mock_neynar_client)
