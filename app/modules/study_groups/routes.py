from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.study_groups.schemas import (
    StudyGroupCreate, StudyGroupResponse, StudyGroupMembershipResponse
)
from app.modules.study_groups.service import StudyGroupService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import get_current_user_id, require_role
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/study-groups", tags=["study-groups"])


def get_study_group_service(supabase: Client = Depends(get_supabase)) -> StudyGroupService:
    return StudyGroupService(supabase)


@router.get("", response_model=List[StudyGroupResponse])
async def list_study_groups(
    user_data: Dict = Depends(get_current_user_id),
    service: StudyGroupService = Depends(get_study_group_service)
):
    return service.list_active()


@router.post("", response_model=StudyGroupResponse, status_code=201)
async def create_study_group(
    group_data: StudyGroupCreate,
    profile: ProfileResponse = Depends(require_role("student")),
    service: StudyGroupService = Depends(get_study_group_service)
):
    """Create a study group (students). The creator joins as admin."""
    return service.create_group(group_data, profile.id)


@router.get("/joined", response_model=List[str])
async def list_joined_groups(
    user_data: Dict = Depends(get_current_user_id),
    service: StudyGroupService = Depends(get_study_group_service)
):
    """Ids of groups the caller belongs to"""
    return service.joined_group_ids(user_data["id"])


@router.get("/{group_id}", response_model=StudyGroupResponse)
async def get_study_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: StudyGroupService = Depends(get_study_group_service)
):
    return service.get_group(group_id)


@router.post("/{group_id}/join", response_model=StudyGroupMembershipResponse, status_code=201)
async def join_study_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: StudyGroupService = Depends(get_study_group_service)
):
    """Join a group; open to students and faculty"""
    return service.join(group_id, user_data["id"])


@router.delete("/{group_id}/join", response_model=StudyGroupMembershipResponse)
async def leave_study_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: StudyGroupService = Depends(get_study_group_service)
):
    return service.leave(group_id, user_data["id"])
