# Supabase tables: study_groups, study_group_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

study_groups:
- id: uuid (primary key)
- name: text (not null)
- description: text (not null)
- subject: text (not null)
- created_by: uuid (foreign key to profiles.id, not null)
- max_members: integer (not null, default: 10)
- current_members: integer (not null, default: 0)
- meeting_schedule: text (nullable) - free text, e.g. "Tue 18:00, Library 2F"
- is_active: boolean (not null, default: true)
- tags: text[] (nullable)
- created_at: timestamp (default: now())

study_group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to study_groups.id, not null)
- user_id: uuid (foreign key to profiles.id, not null)
- is_admin: boolean (not null, default: false) - true for the creator
- created_at: timestamp (default: now())

current_members is rewritten from a count of study_group_members after each
join/leave; the capacity check before a join is not atomic with the insert.
"""
