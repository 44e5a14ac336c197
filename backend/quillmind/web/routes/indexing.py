"""Vector index maintenance routes."""

from fastapi import APIRouter, Depends

from ..schemas import IndexResponse
from ..services import Services, get_services

router = APIRouter()


@router.post("/projects/{project_id}/index", response_model=IndexResponse)
async def index_project(project_id: int, services: Services = Depends(get_services)):
    result = await services.indexing.index_project(project_id)
    return IndexResponse(**result.to_dict())


@router.post("/files/{file_id}/index", response_model=IndexResponse)
async def index_file(file_id: int, services: Services = Depends(get_services)):
    result = await services.indexing.index_file(file_id)
    return IndexResponse(**result.to_dict())


@router.delete("/files/{file_id}/index", response_model=IndexResponse)
async def remove_file(file_id: int, services: Services = Depends(get_services)):
    result = await services.indexing.remove_file(file_id)
    return IndexResponse(**result.to_dict())
