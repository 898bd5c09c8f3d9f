"""
Wire Constants
--------------
Header names and values used on every Airtable request.
"""

CONTENT_TYPE_HEADER = "Content-Type"
AUTHORIZATION_HEADER = "Authorization"
BEARER_FORMAT = "Bearer {}"

JSON_CONTENT_TYPE = "application/json"
UTF8_CHARSET = "charset=UTF-8"
JSON_UTF8 = f"{JSON_CONTENT_TYPE}; {UTF8_CHARSET}"

FILTER_QUERY_STRING = "?filterByFormula="

# HTTP status at or above which a response is an error
ERROR_STATUS_THRESHOLD = 300
