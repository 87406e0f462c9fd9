"""FastAPI dependencies resolving app-scoped collaborators."""
from typing import Callable, Dict, Optional

from fastapi import Depends, Query, Request

from ..auth import Principal, require_principal
from ..config import Settings
from ..db.store import DocumentStore
from ..services import CollectionService, PlaylistService
from ..services.resources import Resource


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def require_auth(request: Request) -> Principal:
    """Reject the request with 401 unless the configured strategy authenticates it."""
    return require_principal(request.app.state.auth, request)


def collection_service(resource: Resource) -> Callable[..., CollectionService]:
    """Build a dependency returning a CollectionService for resource."""

    def dependency(
        store: DocumentStore = Depends(get_store),
        settings: Settings = Depends(get_settings),
    ) -> CollectionService:
        return CollectionService(store, resource, enforce_unique_on_update=settings.enforce_unique_on_update)

    return dependency


def playlist_service(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> PlaylistService:
    return PlaylistService(store, enforce_unique_on_update=settings.enforce_unique_on_update)


class ListParams:
    """Pagination and sorting query parameters shared by every list endpoint.

    Values stay raw strings; the query builder decides what is valid.
    """

    def __init__(
        self,
        page: Optional[str] = Query(None, description="Page number, starting at 1"),
        limit: Optional[str] = Query(None, description="Items per page (default 10, max 100)"),
        sort_by: Optional[str] = Query(None, alias="sortBy", description="Field to sort by"),
        sort_order: Optional[str] = Query(None, alias="sortOrder", description="'asc' or 'desc'"),
    ):
        self.page = page
        self.limit = limit
        self.sort_by = sort_by
        self.sort_order = sort_order

    def to_params(self, **filters: Optional[str]) -> Dict[str, str]:
        """Merge pagination, sorting and the given filters, dropping absent values."""
        params = {
            "page": self.page,
            "limit": self.limit,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
            **filters,
        }
        return {key: value for key, value in params.items() if value is not None}
