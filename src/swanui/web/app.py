"""
HTTP backend for the strongSwan web UI.

JSON endpoints feed the frontend, text endpoints expose raw swanctl output
for debugging, and /initiate + /terminate drive child SAs over VICI.
Handlers are plain ``def`` so FastAPI runs the blocking swanctl and VICI
calls in its thread pool.
"""

from __future__ import annotations

import logging
import typing as t
from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from ..agent import status_check
from ..agent.swanctl import SwanctlRunner
from ..agent.vici_control import ViciController
from ..errors import ControlChannelFailure, ExternalProcessFailure, ExternalProcessTimeout, MissingParameter
from ..schema import SwanUIConfig
from ..swanctl_parsers.stats import status_to_dict

logger = logging.getLogger(__name__)

router = APIRouter()


def get_runner(request: Request) -> SwanctlRunner:
    return request.app.state.runner


def get_controller(request: Request) -> ViciController:
    return request.app.state.controller


def _process_error(e: ExternalProcessFailure) -> HTTPException:
    logger.warning("swanctl failed: %s", e)
    if isinstance(e, ExternalProcessTimeout):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(e))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=e.output or str(e),
    )


def _text_error(e: ExternalProcessFailure) -> PlainTextResponse:
    err = _process_error(e)
    return PlainTextResponse(str(err.detail), status_code=err.status_code)


# ----------- VICI control (initiate/terminate) -----------

def _control(action: str, name: t.Optional[str], controller: ViciController) -> PlainTextResponse:
    try:
        getattr(controller, action)(name or "")
    except MissingParameter as e:
        return PlainTextResponse(f"{e}\n", status_code=status.HTTP_400_BAD_REQUEST)
    except ControlChannelFailure as e:
        logger.warning("%s %s failed: %s", action, name, e)
        return PlainTextResponse(f"{action} failed: {e}\n", status_code=status.HTTP_502_BAD_GATEWAY)
    return PlainTextResponse("ok\n")


@router.api_route("/initiate", methods=["GET", "POST"], response_class=PlainTextResponse)
def initiate(name: t.Optional[str] = None, controller: ViciController = Depends(get_controller)):
    return _control("initiate", name, controller)


@router.api_route("/terminate", methods=["GET", "POST"], response_class=PlainTextResponse)
def terminate(name: t.Optional[str] = None, controller: ViciController = Depends(get_controller)):
    return _control("terminate", name, controller)


# ----------- Text endpoints -----------

@router.get("/status_txt", response_class=PlainTextResponse)
def status_txt(runner: SwanctlRunner = Depends(get_runner)):
    try:
        return PlainTextResponse(runner.list_sas())
    except ExternalProcessFailure as e:
        return _text_error(e)


@router.get("/connections_txt", response_class=PlainTextResponse)
def connections_txt(runner: SwanctlRunner = Depends(get_runner)):
    try:
        return PlainTextResponse(runner.list_conns())
    except ExternalProcessFailure as e:
        return _text_error(e)


@router.get("/debug_active_lines", response_class=PlainTextResponse)
def debug_active_lines(runner: SwanctlRunner = Depends(get_runner)):
    """Shows which --list-sas lines matched the active-child rules."""
    return PlainTextResponse(status_check.collect_debug_trace(runner))


# ----------- JSON endpoints -----------

@router.get("/children_json")
def children_json(runner: SwanctlRunner = Depends(get_runner)) -> t.List[str]:
    """Sorted configured child names; never fails."""
    return status_check.collect_children(runner)


@router.get("/active_children_json")
def active_children_json(runner: SwanctlRunner = Depends(get_runner)) -> t.List[str]:
    try:
        return status_check.collect_active(runner)
    except ExternalProcessFailure as e:
        raise _process_error(e)


@router.get("/status_json")
def status_json(runner: SwanctlRunner = Depends(get_runner)) -> t.Dict[str, t.Dict[str, t.Any]]:
    try:
        stats = status_check.collect_status(runner)
    except ExternalProcessFailure as e:
        raise _process_error(e)
    return status_to_dict(stats)


@router.get("/summary_json")
def summary_json(runner: SwanctlRunner = Depends(get_runner)) -> t.Dict[str, t.Any]:
    try:
        return status_check.collect_summary(runner)
    except ExternalProcessFailure as e:
        raise _process_error(e)


@router.get("/health")
def health() -> t.Dict[str, str]:
    return {"status": "healthy"}


def create_app(
    config: t.Optional[SwanUIConfig] = None,
    runner: t.Optional[SwanctlRunner] = None,
    controller: t.Optional[ViciController] = None,
) -> FastAPI:
    config = config or SwanUIConfig()
    app = FastAPI(title="swanui", description="strongSwan status and control backend")
    app.state.config = config
    app.state.runner = runner or SwanctlRunner(
        binary=config.swanctl.binary,
        timeout=config.swanctl.timeout_seconds,
    )
    app.state.controller = controller or ViciController(
        socket_path=config.vici.socket_path,
        timeout=config.vici.timeout_seconds,
    )
    app.include_router(router)

    # Must be mounted last: "/" would otherwise shadow the API routes.
    static_dir = Path(config.server.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning("Static directory %s not found; frontend not served", static_dir)

    return app
