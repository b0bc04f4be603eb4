"""FastAPI application factory."""

import logging
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from form_duration_tracker.api.admin import router as admin_router
from form_duration_tracker.api.models import SubmissionChanges, SubmissionParams
from form_duration_tracker.app_logging import configure_logging
from form_duration_tracker.containers import AppContainer
from form_duration_tracker.domain.submissions import FormSubmission
from form_duration_tracker.services.lifecycle import RequestContext
from form_duration_tracker.services.session_timer import format_timestamp

_RESOURCE = "submission"
_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)

    def run_action(
        request: Request,
        response: Response,
        action: str,
        params: dict[str, object] | None = None,
    ) -> RequestContext:
        """Resolve the client session and run the before-action hooks."""
        cookie_name = container.settings.session_cookie
        session_id, session, issued = container.session_registry.open_session(
            request.cookies.get(cookie_name)
        )
        if issued:
            response.set_cookie(cookie_name, session_id, httponly=True)
        context = RequestContext(
            action=action,
            session=session,
            params=params if params is not None else {},
            resource=_RESOURCE,
        )
        container.action_hooks.run(context)
        return context

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/submissions/new")
    async def new_submission(request: Request, response: Response) -> dict[str, object]:
        """Present a new form and start its timer."""
        context = run_action(request, response, "new")
        started_at = container.tracker.read_from_session(context.session)
        return {
            container.tracker.attribute: (
                format_timestamp(started_at) if started_at else None
            )
        }

    @app.post("/submissions", status_code=status.HTTP_201_CREATED)
    async def create_submission(
        request: Request, response: Response
    ) -> dict[str, object]:
        """Create a submission from the form params."""
        params = await _read_params(request)
        context = run_action(request, response, "create", params)
        try:
            payload = SubmissionParams.model_validate(params.get(_RESOURCE))
        except ValidationError as exc:
            raise HTTPException(
                status_code=_UNPROCESSABLE,
                detail=exc.errors(include_url=False, include_context=False),
            ) from exc

        try:
            submission = container.submission_service.create(
                title=payload.title,
                body=payload.body,
                started_at=payload.started_at,
            )
        except RuntimeError as exc:
            logger.exception("Failed to save submission")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE
            ) from exc

        if submission.errors:
            started_at = container.tracker.read_from_session(context.session)
            if started_at is not None:
                container.tracker.preserve_in_session(context.session, started_at)
            return _errors_response(submission, response)

        container.tracker.cleanup_session(context.session)
        return {_RESOURCE: _submission_payload(submission)}

    @app.get("/submissions/{submission_id}/edit")
    async def edit_submission(
        submission_id: UUID, request: Request, response: Response
    ) -> dict[str, object]:
        """Present the edit form for an existing submission."""
        run_action(request, response, "edit")
        submission = container.submission_service.get(submission_id)
        if submission is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {_RESOURCE: _submission_payload(submission)}

    @app.patch("/submissions/{submission_id}")
    async def update_submission(
        submission_id: UUID, request: Request, response: Response
    ) -> dict[str, object]:
        """Update an existing submission."""
        params = await _read_params(request)
        run_action(request, response, "update", params)
        try:
            changes = SubmissionChanges.model_validate(params.get(_RESOURCE) or {})
        except ValidationError as exc:
            raise HTTPException(
                status_code=_UNPROCESSABLE,
                detail=exc.errors(include_url=False, include_context=False),
            ) from exc

        submission = container.submission_service.update(
            submission_id, changes.model_dump(exclude_unset=True)
        )
        if submission is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        if submission.errors:
            return _errors_response(submission, response)
        return {_RESOURCE: _submission_payload(submission)}

    return app


async def _read_params(request: Request) -> dict[str, object]:
    """Read the JSON body as a mutable param bag."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _errors_response(submission: FormSubmission, response: Response) -> JSONResponse:
    error_response = JSONResponse(
        status_code=_UNPROCESSABLE,
        content={"errors": submission.errors.to_dict()},
    )
    set_cookie = response.headers.get("set-cookie")
    if set_cookie:
        error_response.headers.append("set-cookie", set_cookie)
    return error_response


def _submission_payload(submission: FormSubmission) -> dict[str, object]:
    return {
        "id": str(submission.id) if submission.id else None,
        "title": submission.title,
        "body": submission.body,
        "started_at": (
            format_timestamp(submission.started_at) if submission.started_at else None
        ),
    }
