# Log events / error codes
MISSING_USER_ID = 'MISSING_USER_ID'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
LIST_SUCCESS = 'LIST_SUCCESS'
