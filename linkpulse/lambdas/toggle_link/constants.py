# Log events / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
MISSING_USER_ID = 'MISSING_USER_ID'
INVALID_JSON = 'INVALID_JSON'
INVALID_IS_ACTIVE = 'INVALID_IS_ACTIVE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
TOGGLE_SUCCESS = 'TOGGLE_SUCCESS'
