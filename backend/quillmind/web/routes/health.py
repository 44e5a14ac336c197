from fastapi import APIRouter, Request

from ..schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    if getattr(request.app.state, "config_error", None) is not None:
        return HealthResponse(status="misconfigured")
    services = getattr(request.app.state, "services", None)
    if services is None:
        return HealthResponse(status="starting")

    store = services.vector_store
    breaker = getattr(store, "breaker", None)
    return HealthResponse(
        status="ok",
        vector_store=store.name,
        breaker=breaker.state.value if breaker is not None else None,
    )
