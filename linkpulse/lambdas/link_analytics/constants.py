# Log events / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
MISSING_USER_ID = 'MISSING_USER_ID'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
ANALYTICS_SUCCESS = 'ANALYTICS_SUCCESS'
