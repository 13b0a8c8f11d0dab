from supabase import Client
from app.modules.study_groups.schemas import (
    StudyGroupCreate, StudyGroupResponse, StudyGroupMembershipResponse
)
from app.modules.profiles.service import ProfileService
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class StudyGroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _with_creators(self, rows: List[dict]) -> List[StudyGroupResponse]:
        people = ProfileService(self.supabase).get_summaries([r["created_by"] for r in rows])
        return [StudyGroupResponse(**r, creator=people.get(r["created_by"])) for r in rows]

    def get_group(self, group_id: str) -> StudyGroupResponse:
        try:
            result = self.supabase.table("study_groups")\
                .select("*")\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Study group not found")
            return self._with_creators(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_active(self) -> List[StudyGroupResponse]:
        """Active groups, newest first"""
        try:
            result = self.supabase.table("study_groups")\
                .select("*")\
                .eq("is_active", True)\
                .order("created_at", desc=True)\
                .execute()
            return self._with_creators(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_group(self, data: StudyGroupCreate, creator_id: str) -> StudyGroupResponse:
        """Insert the group and add its creator as admin member"""
        try:
            result = self.supabase.table("study_groups").insert({
                "name": data.name,
                "description": data.description,
                "subject": data.subject,
                "created_by": creator_id,
                "max_members": data.max_members,
                "meeting_schedule": data.meeting_schedule or None,
                "tags": data.tags,
                "is_active": True,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create study group")
            group = result.data[0]

            self.supabase.table("study_group_members").insert({
                "group_id": group["id"],
                "user_id": creator_id,
                "is_admin": True,
            }).execute()
            self._refresh_member_count(group["id"])

            logger.info(f"Study group {group['id']} created by {creator_id}")
            return self.get_group(group["id"])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def join(self, group_id: str, user_id: str) -> StudyGroupMembershipResponse:
        try:
            group = self.get_group(group_id)
            if not group.is_active:
                raise HTTPException(status_code=400, detail="Study group is no longer active")
            if group_id in self.joined_group_ids(user_id):
                raise HTTPException(status_code=400, detail="You are already a member of this group")
            if group.is_full:
                raise HTTPException(status_code=400, detail="Study group is full")

            result = self.supabase.table("study_group_members").insert({
                "group_id": group_id,
                "user_id": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to join study group")

            count = self._refresh_member_count(group_id)
            return StudyGroupMembershipResponse(group_id=group_id, user_id=user_id, joined=True, current_members=count)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def leave(self, group_id: str, user_id: str) -> StudyGroupMembershipResponse:
        try:
            result = self.supabase.table("study_group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="You are not a member of this group")

            count = self._refresh_member_count(group_id)
            return StudyGroupMembershipResponse(group_id=group_id, user_id=user_id, joined=False, current_members=count)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def joined_group_ids(self, user_id: str) -> List[str]:
        try:
            result = self.supabase.table("study_group_members")\
                .select("group_id")\
                .eq("user_id", user_id)\
                .execute()
            return [r["group_id"] for r in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _refresh_member_count(self, group_id: str) -> int:
        """Recount memberships and store the result on the group row"""
        result = self.supabase.table("study_group_members")\
            .select("id", count="exact")\
            .eq("group_id", group_id)\
            .execute()
        count = result.count or 0
        self.supabase.table("study_groups")\
            .update({"current_members": count})\
            .eq("id", group_id)\
            .execute()
        return count
