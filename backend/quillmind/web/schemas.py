from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Union


class ContextFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    file_content: Optional[str] = Field(default=None, alias="fileContent")


class RequestContext(BaseModel):
    files: List[ContextFile] = []


class HistoryMessage(BaseModel):
    author: str
    text: str


class AIActionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    action: Optional[str] = None
    context: Optional[RequestContext] = None
    project_id: Optional[Union[int, str]] = Field(default=None, alias="projectId")
    history: List[HistoryMessage] = []


class IndexResponse(BaseModel):
    success: bool
    message: str
    indexed: int = 0


class HealthResponse(BaseModel):
    status: str
    vector_store: Optional[str] = None
    breaker: Optional[str] = None
