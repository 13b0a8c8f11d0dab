"""
Core dependencies for route protection and role checking
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.modules.profiles.schemas import ProfileResponse
from app.modules.profiles.service import ProfileService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_current_profile(
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> ProfileResponse:
    """Profile row of the authenticated user; 404 until the profile exists"""
    return ProfileService(supabase).get_profile(user_data["id"])


def require_role(required_role: str):
    """Factory function to create a role check dependency (student | faculty)"""
    def check_role(profile: ProfileResponse = Depends(get_current_profile)) -> ProfileResponse:
        if profile.role != required_role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {required_role} accounts can perform this action"
            )
        return profile
    return check_role


def is_room_participant(room_id: str, user_id: str, supabase: Client) -> bool:
    result = supabase.table("chat_participants")\
        .select("id")\
        .eq("room_id", room_id)\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    return bool(result.data)


def check_room_participant(room_id: str, user_data: dict, supabase: Client) -> dict:
    """Check the chat room exists and the user is one of its participants"""
    room_result = supabase.table("chat_rooms")\
        .select("id")\
        .eq("id", room_id)\
        .limit(1)\
        .execute()
    if not room_result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chat room not found"
        )
    if not is_room_participant(room_id, user_data["id"], supabase):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a participant of this chat room"
        )
    return user_data
