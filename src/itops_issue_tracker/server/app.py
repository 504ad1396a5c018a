"""FastAPI app factory.

Endpoints are intentionally thin wrappers over :class:`IssueService`.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, Path, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from itops_issue_tracker import __version__
from itops_issue_tracker.server.config import ServerSettings
from itops_issue_tracker.server.middleware import OptionsMiddleware
from itops_issue_tracker.server.models import (
    ApiIssue,
    ApiUser,
    CreateIssueRequest,
    ErrorResponse,
    IssueListResponse,
    PatchIssueRequest,
    UserListResponse,
)
from itops_issue_tracker.tracker.errors import IssueNotFound, IssueTrackerError
from itops_issue_tracker.tracker.lifecycle import Issue
from itops_issue_tracker.tracker.service import IssueService
from itops_issue_tracker.tracker.store import IssueStore
from itops_issue_tracker.tracker.users import UserDirectory

logger = logging.getLogger(__name__)

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}

_HTTP_ERROR_KINDS: dict[int, str] = {
    status.HTTP_404_NOT_FOUND: "NotFound",
    status.HTTP_405_METHOD_NOT_ALLOWED: "MethodNotAllowed",
}


def get_issue_service(request: Request) -> IssueService:
    return request.app.state.issue_service


ServiceDep = Annotated[IssueService, Depends(get_issue_service)]
IssueId = Annotated[int, Path(ge=0)]


def _error_response(
    message: str, code: int, kind: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    body = ErrorResponse(error=message, code=code, kind=kind)
    return JSONResponse(status_code=code, content=body.model_dump(), headers=headers)


def _to_api_issue(service: IssueService, issue: Issue) -> ApiIssue:
    return ApiIssue.from_issue(issue, service.assignee_of(issue))


def create_app(
    settings: ServerSettings | None = None,
    service: IssueService | None = None,
) -> FastAPI:
    """Build the API.

    Args:
        settings: Server settings; loaded from the environment when omitted.
        service: Issue service to serve; a fresh in-memory one when omitted.
    """

    settings = settings or ServerSettings()
    service = service or IssueService(store=IssueStore(), users=UserDirectory.default())

    app = FastAPI(
        title="ItOps Issue Tracker",
        version=__version__,
        description="In-memory issue tracker with an enforced status lifecycle.",
    )

    app.state.settings = settings
    app.state.issue_service = service

    # CORSMiddleware goes on last so it wraps OptionsMiddleware and answers preflights.
    app.add_middleware(OptionsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    _register_exception_handlers(app)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/users", response_model=UserListResponse)
    def list_users(service: ServiceDep) -> UserListResponse:
        return UserListResponse(users=[ApiUser.from_user(u) for u in service.users.list()])

    @app.post(
        "/issue",
        response_model=ApiIssue,
        status_code=status.HTTP_201_CREATED,
        responses=_ERROR_RESPONSES,
    )
    def create_issue(req: CreateIssueRequest, service: ServiceDep) -> ApiIssue:
        issue = service.create_issue(req.to_intent())
        return _to_api_issue(service, issue)

    @app.get("/issues", response_model=IssueListResponse, responses=_ERROR_RESPONSES)
    def list_issues(service: ServiceDep, status: str | None = None) -> IssueListResponse:
        issues = service.list_issues(status)
        return IssueListResponse(issues=[_to_api_issue(service, i) for i in issues])

    @app.get("/issue/{issue_id}", response_model=ApiIssue, responses=_ERROR_RESPONSES)
    def get_issue(issue_id: IssueId, service: ServiceDep) -> ApiIssue:
        return _to_api_issue(service, service.get_issue(issue_id))

    @app.patch("/issue/{issue_id}", response_model=ApiIssue, responses=_ERROR_RESPONSES)
    def update_issue(issue_id: IssueId, req: PatchIssueRequest, service: ServiceDep) -> ApiIssue:
        issue = service.update_issue(issue_id, req.to_intent())
        return _to_api_issue(service, issue)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(IssueTrackerError)
    async def tracker_error_handler(request: Request, exc: IssueTrackerError) -> JSONResponse:
        code = (
            status.HTTP_404_NOT_FOUND
            if isinstance(exc, IssueNotFound)
            else status.HTTP_400_BAD_REQUEST
        )
        logger.warning(
            "Request rejected",
            extra={
                "kind": exc.kind,
                "detail": exc.message,
                "method": request.method,
                "path": request.url.path,
            },
        )
        return _error_response(exc.message, code, exc.kind)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "Invalid request",
            extra={
                "errors": exc.errors(),
                "method": request.method,
                "path": request.url.path,
            },
        )
        return _error_response("Invalid request", status.HTTP_400_BAD_REQUEST, "InvalidRequest")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        kind = _HTTP_ERROR_KINDS.get(exc.status_code, "HTTPError")
        logger.warning(
            "HTTP error",
            extra={
                "kind": kind,
                "status_code": exc.status_code,
                "method": request.method,
                "path": request.url.path,
            },
        )
        return _error_response(str(exc.detail), exc.status_code, kind, headers=exc.headers)
