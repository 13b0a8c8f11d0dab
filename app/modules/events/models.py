# Supabase tables: events, event_registrations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

events:
- id: uuid (primary key)
- title: text (not null)
- description: text (not null)
- event_type: text (not null) - e.g. workshop, seminar, hackathon
- created_by: uuid (foreign key to profiles.id, not null) - faculty organiser
- start_date: timestamp (not null)
- end_date: timestamp (not null)
- location: text (nullable)
- max_participants: integer (nullable) - null means unlimited
- current_participants: integer (not null, default: 0)
- status: text (not null, default: 'upcoming') - values: upcoming, ongoing, completed, cancelled
- tags: text[] (nullable)
- image_url: text (nullable)
- created_at: timestamp (default: now())

event_registrations:
- id: uuid (primary key)
- event_id: uuid (foreign key to events.id, not null)
- user_id: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())

current_participants is rewritten from a count of event_registrations after
each register/unregister. Capacity is checked before the insert, so two
concurrent registrations for the last seat can both succeed.
"""
