"""
Dataset access for the API.

The comps service (institution directory + year registry + result cache) is
built once during application startup and stored on ``app.state``; routes
receive it through the get_service() dependency.
"""

from fastapi import HTTPException, Request

from ipeds.service import CompsService


def get_service(request: Request) -> CompsService:
    """FastAPI dependency: return the application's CompsService.

    Usage in a route::

        from api.dataset import get_service
        from fastapi import Depends

        @router.get("/example")
        def example(service: CompsService = Depends(get_service)):
            ...

    Raises HTTP 503 if called before startup has loaded the dataset.
    """
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Dataset not loaded")
    return service
