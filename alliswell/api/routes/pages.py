from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.responses import Response

from alliswell.api import pages
from alliswell.api.cookies import clear_flash, read_flash
from alliswell.api.deps import get_crisis_interceptor, get_request_context, require_login
from alliswell.domain import RequestContext
from alliswell.domain.services.assessment_scorer import max_score
from alliswell.domain.services.crisis import CrisisInterceptor

router = APIRouter(tags=["Pages"], include_in_schema=False)


def _render(request: Request, html: str) -> HTMLResponse:
    response = HTMLResponse(html)
    if read_flash(request) is not None:
        clear_flash(response)
    return response


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    context: RequestContext = Depends(get_request_context),  # noqa: B008
    interceptor: CrisisInterceptor = Depends(get_crisis_interceptor),  # noqa: B008
) -> HTMLResponse:
    html = pages.index_page(
        is_logged_in=context.is_authenticated,
        crisis_phrases=interceptor.phrases,
        max_score=max_score(),
        flash_message=read_flash(request),
    )
    return _render(request, html)


@router.get("/login", response_class=HTMLResponse)
async def login_form(
    request: Request,
    context: RequestContext = Depends(get_request_context),  # noqa: B008
) -> Response:
    if context.is_authenticated:
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return _render(request, pages.login_page(read_flash(request)))


@router.get("/signup", response_class=HTMLResponse)
async def signup_form(
    request: Request,
    context: RequestContext = Depends(get_request_context),  # noqa: B008
) -> Response:
    if context.is_authenticated:
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return _render(request, pages.signup_page(read_flash(request)))


@router.get("/assessment")
async def open_assessment(
    _: RequestContext = Depends(require_login),  # noqa: B008
) -> RedirectResponse:
    return RedirectResponse(url="/?openAssessment=true", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/chat")
async def open_chat(
    _: RequestContext = Depends(require_login),  # noqa: B008
) -> RedirectResponse:
    return RedirectResponse(url="/?openChat=true", status_code=status.HTTP_303_SEE_OTHER)
