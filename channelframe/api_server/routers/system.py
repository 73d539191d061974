"""
System router - health checks.
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from ..dependencies import DependencyContainer, get_dependency_container

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check(container: DependencyContainer = Depends(get_dependency_container)):
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "channelframe",
        "dependencies": container.get_health_status(),
    }
