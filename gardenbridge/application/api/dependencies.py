"""FastAPI dependencies for the diagnostics API."""

from fastapi import Request

from gardenbridge.core.platform import GardenPlatform


def get_platform(request: Request) -> GardenPlatform:
    """Platform instance attached to the application at startup."""
    return request.app.state.platform
