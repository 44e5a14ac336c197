"""AI assistant routes."""

from fastapi import APIRouter, Depends

from ..schemas import AIActionRequest
from ..services import Services, get_services

router = APIRouter(prefix="/ai")


@router.post("/action")
async def ai_action(request: AIActionRequest, services: Services = Depends(get_services)):
    context = request.context.model_dump(by_alias=True) if request.context else None
    response = await services.pipeline.handle_request(
        request.text,
        context=context,
        project_id=request.project_id,
        history=[m.model_dump() for m in request.history],
        action=request.action,
    )
    return response.to_dict()
