"""Async client for the project/task REST backend.

All responses come wrapped in a ``{code, message, data}`` envelope; methods
here unwrap it and return record objects. HTTP 401 ends the session.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from taskdeck.config import DEFAULT_TIMEOUT
from taskdeck.errors import ApiError, AuthExpiredError
from taskdeck.model.board import sort_stages
from taskdeck.model.records import Comment, Member, Project, Stage, Task, User
from taskdeck.session import Session

logger = logging.getLogger(__name__)

SUCCESS_CODE = 200


def _pick(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Return data[key] when the server nests the record, else data itself."""
    inner = data.get(key)
    return inner if isinstance(inner, dict) else data


def _items(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = data.get(key)
    if items is None:
        items = data.get("data")
    return [i for i in items or [] if isinstance(i, dict)]


def unwrap(response: httpx.Response) -> dict[str, Any]:
    """Unwrap the envelope of a non-401 response, raising ApiError on failure."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if response.is_error:
        message = response.reason_phrase or f"HTTP {response.status_code}"
        code = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or message
            code = body.get("code")
        raise ApiError(message, status=response.status_code, code=code)

    if not isinstance(body, dict):
        return {}
    if "code" not in body:
        return body
    if body["code"] != SUCCESS_CODE:
        raise ApiError(body.get("message") or "request failed", status=response.status_code, code=body["code"])
    data = body.get("data")
    if data is None:
        return {}
    if isinstance(data, dict):
        return data
    return {"data": data}


class ApiClient:
    """Thin async wrapper around httpx for the backend.

    ``session`` supplies the bearer token and is cleared on 401, after
    which ``on_unauthorized`` (if given) is called and AuthExpiredError
    raised. ``transport`` is passed to httpx, mainly for tests.
    """

    def __init__(
        self,
        base_url: str,
        session: Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.on_unauthorized = on_unauthorized
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        if self.session is not None and self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the unwrapped ``data``."""
        url = path if path.startswith("/") else f"/{path}"
        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(method, url, json=json, params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"network error: {exc}") from exc

        # a 401 from the auth endpoints means bad credentials, not an expired session
        if response.status_code == 401 and not url.startswith("/auth/"):
            logger.info("%s %s: unauthorized, clearing session", method, url)
            if self.session is not None:
                self.session.clear()
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise AuthExpiredError()

        return unwrap(response)

    # -- auth --

    async def login(self, email: str, password: str) -> User:
        data = await self.request("POST", "/auth/login", json={"email": email, "password": password})
        return self._start_session(data)

    async def register(self, username: str, email: str, password: str) -> User:
        body = {"username": username, "email": email, "password": password}
        data = await self.request("POST", "/auth/register", json=body)
        return self._start_session(data)

    def _start_session(self, data: dict[str, Any]) -> User:
        token = data.get("token")
        user = data.get("user") or {}
        if not token:
            raise ApiError("login response did not include a token")
        if not user:
            raise ApiError("login response did not include the user")
        if self.session is not None:
            self.session.save(token, user)
        return User.from_dict(user)

    def logout(self) -> None:
        if self.session is not None:
            self.session.clear()

    # -- projects --

    async def list_projects(self) -> list[Project]:
        data = await self.request("GET", "/projects")
        return [Project.from_dict(p) for p in _items(data, "projects")]

    async def get_project(self, project_id: Any) -> Project:
        data = await self.request("GET", f"/projects/{project_id}")
        project = Project.from_dict(_pick(data, "project"))
        if data.get("user_role"):
            project.user_role = data["user_role"]
        return project

    async def create_project(self, fields: dict[str, Any]) -> Project:
        data = await self.request("POST", "/projects", json=fields)
        return Project.from_dict(_pick(data, "project"))

    async def update_project(self, project_id: Any, fields: dict[str, Any]) -> Project:
        data = await self.request("PUT", f"/projects/{project_id}", json=fields)
        return Project.from_dict(_pick(data, "project"))

    async def delete_project(self, project_id: Any) -> None:
        await self.request("DELETE", f"/projects/{project_id}")

    async def list_members(self, project_id: Any) -> list[Member]:
        data = await self.request("GET", f"/project-members/{project_id}")
        return [Member.from_dict(m) for m in _items(data, "members")]

    async def add_member(self, project_id: Any, user_id: Any, role: str = "collaborator") -> Member:
        data = await self.request("POST", f"/project-members/{project_id}", json={"user_id": user_id, "role": role})
        return Member.from_dict(_pick(data, "member"))

    async def remove_member(self, project_id: Any, user_id: Any) -> None:
        await self.request("DELETE", f"/project-members/{project_id}/{user_id}")

    async def search_users(self, query: str) -> list[User]:
        data = await self.request("POST", "/users/search", json={"query": query})
        return [User.from_dict(u) for u in _items(data, "users")]

    # -- stages --

    async def list_stages(self, project_id: Any) -> list[Stage]:
        data = await self.request("GET", f"/project-stages/{project_id}")
        return sort_stages(Stage.from_dict(s) for s in _items(data, "stages"))

    async def create_stage(self, fields: dict[str, Any]) -> Stage:
        data = await self.request("POST", "/stages", json=fields)
        return Stage.from_dict(_pick(data, "stage"))

    async def update_stage(self, stage_id: Any, fields: dict[str, Any]) -> Stage:
        data = await self.request("PUT", f"/stages/{stage_id}", json=fields)
        return Stage.from_dict(_pick(data, "stage"))

    async def delete_stage(self, stage_id: Any) -> None:
        await self.request("DELETE", f"/stages/{stage_id}")

    async def reorder_stages(self, order: list[Any]) -> None:
        """Persist a new column order given as a list of stage ids."""
        body = {"stage_orders": [{"stage_id": sid, "position": i} for i, sid in enumerate(order)]}
        await self.request("POST", "/stages/reorder", json=body)

    # -- tasks --

    async def list_tasks(self, project_id: Any) -> list[Task]:
        data = await self.request("GET", f"/project-tasks/{project_id}")
        return [Task.from_dict(t) for t in _items(data, "tasks")]

    async def completed_count(self, project_id: Any) -> int | None:
        data = await self.request("GET", f"/project-tasks/{project_id}/completed-stats")
        count = data.get("completed_count")
        return count if isinstance(count, int) else None

    async def create_task(self, fields: dict[str, Any]) -> Task:
        data = await self.request("POST", "/tasks", json=fields)
        return Task.from_dict(_pick(data, "task"))

    async def update_task(self, task_id: Any, fields: dict[str, Any]) -> Task:
        data = await self.request("PUT", f"/tasks/{task_id}", json=fields)
        return Task.from_dict(_pick(data, "task"))

    async def delete_task(self, task_id: Any) -> None:
        await self.request("DELETE", f"/tasks/{task_id}")

    async def move_task(self, task_id: Any, new_stage_id: Any, new_position: int) -> Task | None:
        """Move a task. Returns the server's record, or None if it sent none."""
        body = {"new_stage_id": new_stage_id, "new_position": new_position}
        data = await self.request("PATCH", f"/tasks/{task_id}/move", json=body)
        task = data.get("task")
        return Task.from_dict(task) if isinstance(task, dict) else None

    # -- comments --

    async def list_comments(self, task_id: Any) -> list[Comment]:
        data = await self.request("GET", f"/task-comments/{task_id}")
        return [Comment.from_dict(c) for c in _items(data, "comments")]

    async def add_comment(
        self,
        task_id: Any,
        content: str,
        reply_to_id: Any = None,
        parent_comment_id: Any = None,
        media: dict[str, str] | None = None,
    ) -> Comment:
        body: dict[str, Any] = {"task_id": task_id, "content": content}
        if reply_to_id is not None:
            body["reply_to_id"] = reply_to_id
        if parent_comment_id is not None:
            body["parent_comment_id"] = parent_comment_id
        for key in ("media_id", "media_type", "media_name"):
            if media and media.get(key):
                body[key] = media[key]
        data = await self.request("POST", f"/task-comments/{task_id}", json=body)
        return Comment.from_dict(_pick(data, "comment"))

    async def update_comment(self, comment_id: Any, content: str) -> Comment:
        data = await self.request("PUT", f"/comments/{comment_id}", json={"content": content})
        return Comment.from_dict(_pick(data, "comment"))

    async def delete_comment(self, comment_id: Any) -> None:
        await self.request("DELETE", f"/comments/{comment_id}")

    # -- analytics --

    async def project_stats(self, project_id: Any) -> dict[str, Any]:
        return await self.request("GET", f"/analytics/project-stats/{project_id}")
