# Log events / error codes
INVALID_JSON = 'INVALID_JSON'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
INVALID_TARGET_URL = 'INVALID_TARGET_URL'
MISSING_USER_ID = 'MISSING_USER_ID'
SHORTCODE_ALLOCATION_FAILED = 'SHORTCODE_ALLOCATION_FAILED'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
LINK_CREATED = 'LINK_CREATED'
