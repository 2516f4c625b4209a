"""Workflow repository backed by a remote REST API.

Endpoints (relative to the base URL):

    GET    /workflows?userId=...                  select_all
    GET    /workflows/executable?userId=...       select_execute_ability
    GET    /users/{userId}/workflows              select_by_user_id
    GET    /workflows/{id}                        select_by_id
    GET    /workflows/{id}/structure              select_structure_by_id
    POST   /workflows                             save
    POST   /workflows/{id}/structure              save_structure
    GET    /workflows/{id}/access                 check_access
    DELETE /workflows/{id}                        delete
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from flowbuilder.core.types import (
    Workflow,
    WorkflowEdge,
    WorkflowNode,
    WorkflowStructure,
    WorkflowSummary,
    to_edge,
    to_node,
)
from flowbuilder.errors import RepositoryError
from flowbuilder.repositories.interfaces import IWorkflowRepository

logger = logging.getLogger(__name__)

TokenGetter = Callable[[], Awaitable[str | None]]
ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RepositoryError(f"Workflow API returned a malformed {model.__name__}: {e}") from e


class RemoteWorkflowRepository(IWorkflowRepository):
    """Client for a workflow REST backend.

    A 404 maps to ``None`` (or ``False``); any other failure raises
    :class:`RepositoryError`.

    Example:
        >>> async with RemoteWorkflowRepository("https://api.example.com") as repo:
        ...     workflows = await repo.select_all("user-1")
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        token_getter: TokenGetter | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize remote repository.

        Args:
            base_url: Base URL of the workflow API.
            timeout: Request timeout in seconds.
            token_getter: Coroutine returning a bearer token, if any.
            client: Preconfigured client (tests inject a mock transport).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_getter = token_getter
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
        )

    async def __aenter__(self) -> RemoteWorkflowRepository:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token_getter is not None:
            token = await self._token_getter()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> httpx.Response | None:
        """Send a request.

        Returns None for a 404 when ``allow_not_found`` is set.
        """
        try:
            response = await self._client.request(
                method, path, headers=await self._headers(), **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404 and allow_not_found:
                return None
            logger.warning("Workflow API %s %s failed with %d", method, path, status)
            raise RepositoryError(
                f"Workflow API returned {status} for {method} {path}",
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Workflow API %s %s unreachable: %s", method, path, e)
            raise RepositoryError(
                f"Failed to reach workflow API at {self.base_url}: {e}"
            ) from e

        return response

    async def _json(
        self,
        method: str,
        path: str,
        *,
        expect: type[dict] | type[list] = dict,
        **kwargs: Any,
    ) -> Any:
        """Send a request and decode the JSON body. None for 404 or no body.

        Raises:
            RepositoryError: The body is not JSON or its top level is not
                ``expect``.
        """
        response = await self._request(method, path, **kwargs)
        if response is None or not response.content:
            return None
        try:
            data = response.json()
        except ValueError as e:
            raise RepositoryError(
                f"Workflow API returned invalid JSON for {method} {path}",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, expect):
            raise RepositoryError(
                f"Workflow API returned {type(data).__name__} for {method} {path}, "
                f"expected {expect.__name__}",
                status_code=response.status_code,
            )
        return data

    async def select_by_id(self, workflow_id: str) -> Workflow | None:
        data = await self._json("GET", f"/workflows/{workflow_id}", allow_not_found=True)
        return _parse(Workflow, data) if data else None

    async def select_structure_by_id(
        self,
        workflow_id: str,
        ignore_note: bool = False,
    ) -> WorkflowStructure | None:
        data = await self._json(
            "GET",
            f"/workflows/{workflow_id}/structure",
            params={"ignoreNote": str(ignore_note).lower()},
            allow_not_found=True,
        )
        return _parse(WorkflowStructure, data) if data else None

    async def select_all(self, user_id: str) -> list[WorkflowSummary]:
        data = await self._json("GET", "/workflows", expect=list, params={"userId": user_id})
        return [_parse(WorkflowSummary, item) for item in data or []]

    async def select_by_user_id(self, user_id: str) -> list[Workflow]:
        data = await self._json("GET", f"/users/{user_id}/workflows", expect=list)
        return [_parse(Workflow, item) for item in data or []]

    async def select_execute_ability(self, user_id: str) -> list[WorkflowSummary]:
        data = await self._json(
            "GET", "/workflows/executable", expect=list, params={"userId": user_id}
        )
        return [_parse(WorkflowSummary, item) for item in data or []]

    async def save(
        self,
        workflow: Workflow,
        no_generate_input_node: bool = False,
    ) -> Workflow:
        payload = {
            "workflow": workflow.model_dump(mode="json", by_alias=True, exclude_none=True),
            "noGenerateInputNode": no_generate_input_node,
        }
        data = await self._json("POST", "/workflows", json=payload)
        if not data:
            raise RepositoryError("Workflow API returned an empty body for save")
        return _parse(Workflow, data)

    async def save_structure(
        self,
        workflow_id: str,
        nodes: Sequence[WorkflowNode] | None = None,
        edges: Sequence[WorkflowEdge] | None = None,
        delete_nodes: Sequence[str] | None = None,
        delete_edges: Sequence[str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {
            "nodes": [
                to_node(n).model_dump(mode="json", by_alias=True, exclude_none=True)
                for n in nodes or []
            ],
            "edges": [
                to_edge(e).model_dump(mode="json", by_alias=True, exclude_none=True)
                for e in edges or []
            ],
            "deleteNodes": list(delete_nodes or []),
            "deleteEdges": list(delete_edges or []),
        }
        await self._request("POST", f"/workflows/{workflow_id}/structure", json=payload)

    async def check_access(
        self,
        workflow_id: str,
        user_id: str,
        read_only: bool = True,
    ) -> bool:
        data = await self._json(
            "GET",
            f"/workflows/{workflow_id}/access",
            params={"userId": user_id, "readOnly": str(read_only).lower()},
            allow_not_found=True,
        )
        return bool(data and data.get("hasAccess"))

    async def delete(self, workflow_id: str) -> bool:
        response = await self._request(
            "DELETE", f"/workflows/{workflow_id}", allow_not_found=True
        )
        return response is not None
