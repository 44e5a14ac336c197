from .base import FileDiscovery
from .discovery import DefaultFileDiscovery, discover_files
from .retrieval import fetch_matched_files, query_project, retrieve_relevant_files

__all__ = [
    "FileDiscovery",
    "DefaultFileDiscovery",
    "discover_files",
    "fetch_matched_files",
    "query_project",
    "retrieve_relevant_files",
]
