from supabase import Client
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from app.core.utils import sanitize_filter_term
from typing import List, Optional
from fastapi import HTTPException


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get profile by ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            return ProfileResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Partial profile update; year_of_study only sticks for students"""
        current = self.get_profile(user_id)
        update_data = profile_data.model_dump(exclude_unset=True)
        if "portfolio_url" in update_data and not update_data["portfolio_url"]:
            update_data["portfolio_url"] = None
        if current.role != "student" and "year_of_study" in update_data:
            update_data["year_of_study"] = None
        if not update_data:
            return current
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_profiles(
        self,
        exclude_id: Optional[str] = None,
        search: Optional[str] = None,
        skill: Optional[str] = None,
        role: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[ProfileResponse]:
        """User directory: everyone but the caller, optionally narrowed by name/department, skill or role"""
        try:
            query = self.supabase.table("profiles").select("*")
            if exclude_id:
                query = query.neq("id", exclude_id)
            if role:
                query = query.eq("role", role)
            if skill:
                query = query.contains("skills", [skill])
            term = sanitize_filter_term(search) if search else ""
            if term:
                query = query.or_(f"full_name.ilike.%{term}%,department.ilike.%{term}%")
            result = query.order("full_name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProfileResponse(**row) for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_summaries(self, user_ids: List[str]) -> dict:
        """Map of id -> profile row for the given ids (used to attach people to other records)"""
        if not user_ids:
            return {}
        try:
            result = self.supabase.table("profiles")\
                .select("id, full_name, role, department, profile_image_url")\
                .in_("id", list(set(user_ids)))\
                .execute()
            return {row["id"]: row for row in (result.data or [])}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
