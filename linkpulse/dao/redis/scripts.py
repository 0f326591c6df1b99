"""Lua scripts executed server-side by the link DAO.

Each script runs atomically in Redis, so the existence/ownership check and the
writes that depend on it can never be interleaved with another client's
commands.
"""

# KEYS[1]: links:<shortcode>
# KEYS[2]: links:<shortcode>:visits
# ARGV[1]: JSON-encoded visit record
# Returns the new click count, or -1 if the link does not exist.
APPEND_VISIT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return -1
end
redis.call('RPUSH', KEYS[2], ARGV[1])
return redis.call('HINCRBY', KEYS[1], 'total_clicks', 1)
"""

# KEYS[1]: links:<shortcode>
# ARGV[1]: owner id
# ARGV[2]: '1' (active) or '0' (inactive)
# Returns 1 on success, 0 if the link is missing or owned by someone else.
SET_ACTIVE = """
if redis.call('HGET', KEYS[1], 'owner_id') ~= ARGV[1] then
    return 0
end
redis.call('HSET', KEYS[1], 'is_active', ARGV[2])
return 1
"""

# KEYS[1]: links:<shortcode>
# KEYS[2]: links:<shortcode>:visits
# KEYS[3]: users:<owner>:links
# ARGV[1]: owner id
# ARGV[2]: shortcode
# Returns 1 on success, 0 if the link is missing or owned by someone else.
DELETE_LINK = """
if redis.call('HGET', KEYS[1], 'owner_id') ~= ARGV[1] then
    return 0
end
redis.call('DEL', KEYS[1], KEYS[2])
redis.call('SREM', KEYS[3], ARGV[2])
return 1
"""

# KEYS[1]: links:<shortcode>
# Returns 1 if this call flipped an active link to inactive, 0 if it was
# already inactive or doesn't exist.
DEACTIVATE = """
if redis.call('HGET', KEYS[1], 'is_active') ~= '1' then
    return 0
end
redis.call('HSET', KEYS[1], 'is_active', '0')
return 1
"""
