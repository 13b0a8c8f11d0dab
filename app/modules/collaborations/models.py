# Supabase table: collaborations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

collaborations:
- id: uuid (primary key)
- title: text (not null)
- description: text (not null)
- type: text (not null) - e.g. mentorship, project, research
- requester_id: uuid (foreign key to profiles.id, not null) - student who posted it
- mentor_id: uuid (foreign key to profiles.id, nullable) - faculty who accepted it
- status: text (not null, default: 'open') - values: open, in_progress, completed
- skills_required: text[] (nullable)
- duration_weeks: integer (nullable)
- chat_room_id: uuid (foreign key to chat_rooms.id, nullable) - created on accept
- created_at: timestamp (default: now())

Members of a collaboration are its requester and, once accepted, its mentor.
"""
