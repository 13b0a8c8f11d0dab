from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.collaborations.schemas import (
    CollaborationCreate, CollaborationResponse, CollaborationFilter
)
from app.modules.collaborations.service import CollaborationService
from app.modules.profiles.schemas import ProfileResponse, ProfileSummary
from app.core.dependencies import get_current_user_id, require_role
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/collaborations", tags=["collaborations"])


def get_collaboration_service(supabase: Client = Depends(get_supabase)) -> CollaborationService:
    return CollaborationService(supabase)


@router.get("", response_model=List[CollaborationResponse])
async def list_collaborations(
    filter: CollaborationFilter = "all",
    user_data: Dict = Depends(get_current_user_id),
    service: CollaborationService = Depends(get_collaboration_service)
):
    return service.list_collaborations(filter, user_data["id"])


@router.post("", response_model=CollaborationResponse, status_code=201)
async def create_collaboration(
    collaboration_data: CollaborationCreate,
    profile: ProfileResponse = Depends(require_role("student")),
    service: CollaborationService = Depends(get_collaboration_service)
):
    """Post a mentorship/collaboration request (students)"""
    return service.create_collaboration(collaboration_data, profile.id)


@router.get("/{collaboration_id}", response_model=CollaborationResponse)
async def get_collaboration(
    collaboration_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: CollaborationService = Depends(get_collaboration_service)
):
    return service.get_collaboration(collaboration_id)


@router.post("/{collaboration_id}/accept", response_model=CollaborationResponse)
async def accept_collaboration(
    collaboration_id: str,
    profile: ProfileResponse = Depends(require_role("faculty")),
    service: CollaborationService = Depends(get_collaboration_service)
):
    """Become the mentor of an open request (faculty)"""
    return service.accept_collaboration(collaboration_id, profile.id)


@router.post("/{collaboration_id}/complete", response_model=CollaborationResponse)
async def complete_collaboration(
    collaboration_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: CollaborationService = Depends(get_collaboration_service)
):
    return service.complete_collaboration(collaboration_id, user_data["id"])


@router.get("/{collaboration_id}/members", response_model=List[ProfileSummary])
async def list_collaboration_members(
    collaboration_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: CollaborationService = Depends(get_collaboration_service)
):
    return service.list_members(collaboration_id)
