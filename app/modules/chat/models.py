# Supabase tables: messages, chat_rooms, chat_participants
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

messages:
- id: uuid (primary key)
- sender_id: uuid (foreign key to profiles.id, not null)
- receiver_id: uuid (foreign key to profiles.id, nullable) - set for direct messages
- room_id: uuid (foreign key to chat_rooms.id, nullable) - set for room messages
- content: text (not null)
- created_at: timestamp (default: now())

chat_rooms:
- id: uuid (primary key)
- name: text (not null)
- created_by: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())

chat_participants:
- id: uuid (primary key)
- room_id: uuid (foreign key to chat_rooms.id, not null)
- user_id: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())

Realtime must be enabled for the messages table (supabase_realtime publication)
for the /chat/ws subscription to receive INSERT events.
"""
