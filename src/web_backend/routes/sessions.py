"""
Session API routes.

The presentation views of the question flow: start a session, answer or
skip questions, accept or refine results, and save them to history.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from prompt_framework.exceptions import SessionStateError
from prompt_framework.session.controller import PromptSessionController

from ..database.connection import get_db
from ..schemas.session import (
    SessionCreate,
    AnswerSubmit,
    TweakRequest,
    EditRequest,
    SessionView,
    VersionOut,
    SummaryEntry,
    SummaryResponse,
    SaveResponse,
)
from ..services.auth import CurrentUser, get_current_user
from ..services.prompt_service import PromptService
from ..services.session_registry import (
    SessionRegistry,
    SessionNotFoundError,
    get_session_registry,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_controller(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> PromptSessionController:
    """Dependency resolving a live session."""
    try:
        return registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")


def get_prompt_service(db: AsyncSession = Depends(get_db)) -> PromptService:
    """Dependency to get prompt service."""
    return PromptService(db)


def _view(controller: PromptSessionController) -> SessionView:
    return SessionView.from_session(controller.id, controller.session)


@router.post("", response_model=SessionView, status_code=201)
async def start_session(
    data: SessionCreate,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Start a session.

    Super lazy sessions come back with a result; question flows come back
    with their first question batch.
    """
    controller = registry.create()
    try:
        await controller.start(data.original_input, data.mode, data.language)
    except Exception:
        # Nothing to retry against; the client starts over
        registry.remove(controller.id)
        raise
    return _view(controller)


@router.get("/{session_id}", response_model=SessionView)
async def get_session(controller: PromptSessionController = Depends(get_controller)):
    """Get the current view state of a session."""
    return _view(controller)


@router.post("/{session_id}/answers", response_model=SessionView)
async def submit_answer(
    data: AnswerSubmit,
    controller: PromptSessionController = Depends(get_controller),
):
    """Answer the current question."""
    await controller.submit_answer(data.value, data.custom)
    return _view(controller)


@router.post("/{session_id}/skip", response_model=SessionView)
async def skip_question(controller: PromptSessionController = Depends(get_controller)):
    """Skip the current question."""
    await controller.skip()
    return _view(controller)


@router.post("/{session_id}/previous", response_model=SessionView)
async def previous_question(controller: PromptSessionController = Depends(get_controller)):
    """Go back to the previous question."""
    await controller.previous()
    return _view(controller)


@router.post("/{session_id}/confirm", response_model=SessionView)
async def confirm_round(controller: PromptSessionController = Depends(get_controller)):
    """Complete the current round once enough questions are answered."""
    await controller.confirm_round()
    return _view(controller)


@router.post("/{session_id}/continue", response_model=SessionView)
async def continue_refinement(controller: PromptSessionController = Depends(get_controller)):
    """Go on to the next round or iteration."""
    await controller.continue_refinement()
    return _view(controller)


@router.post("/{session_id}/finish", response_model=SessionView)
async def finish_session(controller: PromptSessionController = Depends(get_controller)):
    """Accept the current result."""
    await controller.finish()
    return _view(controller)


@router.post("/{session_id}/tweak", response_model=SessionView)
async def tweak_result(
    data: TweakRequest,
    controller: PromptSessionController = Depends(get_controller),
):
    """Apply a lazy tweak to the current result."""
    await controller.tweak(data.tweak)
    return _view(controller)


@router.post("/{session_id}/edit", response_model=SessionView)
async def edit_result(
    data: EditRequest,
    controller: PromptSessionController = Depends(get_controller),
):
    """Replace the current result text by hand."""
    await controller.edit_result(data.text)
    return _view(controller)


@router.post("/{session_id}/reset", response_model=SessionView)
async def reset_session(controller: PromptSessionController = Depends(get_controller)):
    """Start over. The session id stays valid."""
    controller.reset()
    return _view(controller)


@router.get("/{session_id}/summary", response_model=SummaryResponse)
async def get_summary(controller: PromptSessionController = Depends(get_controller)):
    """Answered questions, ready to copy."""
    entries = [
        SummaryEntry(key=e.key, label=e.label, value=e.value, round=e.round)
        for e in controller.session.answers.entries(answered_only=True)
    ]
    return SummaryResponse(summary=controller.summary(), entries=entries)


@router.get("/{session_id}/versions", response_model=List[VersionOut])
async def list_versions(controller: PromptSessionController = Depends(get_controller)):
    """Versions generated in this session, oldest first."""
    return [VersionOut.from_version(v) for v in controller.versions()]


@router.post("/{session_id}/versions/{version_id}/revert", response_model=SessionView)
async def revert_to_version(
    version_id: str,
    controller: PromptSessionController = Depends(get_controller),
):
    """Make an earlier version the current result."""
    await controller.revert_to(version_id)
    return _view(controller)


@router.post("/{session_id}/save", response_model=SaveResponse)
async def save_result(
    controller: PromptSessionController = Depends(get_controller),
    user: Optional[CurrentUser] = Depends(get_current_user),
    service: PromptService = Depends(get_prompt_service),
):
    """
    Save the current result to the user's history.

    Anonymous visitors get saved=false. The first save of a session starts
    a new prompt family; later saves add versions to it.
    """
    if user is None:
        return SaveResponse(saved=False)

    session = controller.session
    if not session.has_result:
        raise SessionStateError("Nothing to save yet")

    record = await service.save(
        user_id=user.id,
        original_input=session.original_input,
        generated_prompt=session.current_text,
        mode=session.mode.value,
        questions_snapshot=session.answers.snapshot() or None,
        parent_id=controller.saved_prompt_id,
    )
    if controller.saved_prompt_id is None:
        controller.saved_prompt_id = record.id

    return SaveResponse(saved=True, id=record.id, version=record.version)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Drop a live session."""
    if not registry.remove(session_id):
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return Response(status_code=204)
