from .base import AssistantRequest, Responder
from .router import IntentRouter, parse_routing_choice
from .responders import EditResponder, RetrievalResponder, StandardResponder
from .pipeline import AssistantPipeline, build_pipeline

__all__ = [
    "AssistantRequest",
    "Responder",
    "IntentRouter",
    "parse_routing_choice",
    "EditResponder",
    "RetrievalResponder",
    "StandardResponder",
    "AssistantPipeline",
    "build_pipeline",
]
