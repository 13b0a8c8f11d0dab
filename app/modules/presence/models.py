# Presence lives on the profiles table (see app/modules/profiles/models.py):
# - is_online: boolean
# - last_seen: timestamp
#
# Clients call POST /presence/online when they connect, POST /presence/heartbeat
# every 30 seconds while connected, and POST /presence/offline on unload.
# Users whose heartbeat stops are flipped offline by the presence sweeper.
