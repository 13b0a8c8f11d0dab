# Supabase table: connection_requests
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

connection_requests:
- id: uuid (primary key)
- sender_id: uuid (foreign key to profiles.id, not null)
- receiver_id: uuid (foreign key to profiles.id, not null)
- status: text (not null, default: 'pending') - values: pending, accepted, rejected
- created_at: timestamp (default: now())

Lifecycle: none -> pending -> accepted | rejected, one status write per step.
There is no unique constraint on (sender_id, receiver_id): the duplicate check
in ConnectionService.send_request is a read followed by an insert and can race.
A rejected pair may be requested again.
"""
