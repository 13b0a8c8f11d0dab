# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (unique, not null)
- full_name: text (not null)
- role: text (not null) - values: student, faculty
- department: text (nullable)
- year_of_study: integer (nullable) - students only
- bio: text (nullable)
- skills: text[] (nullable)
- profile_image_url: text (nullable)
- portfolio_url: text (nullable)
- is_online: boolean (default: false)
- last_seen: timestamp (nullable)
- created_at: timestamp (default: now())

Note: Authentication data (password, tokens) is stored in auth.users, managed
by Supabase Auth. This table only stores the application-level profile.
"""
