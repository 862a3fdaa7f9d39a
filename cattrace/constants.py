# Keys of the JSON documents carried in cross application header values.
# These are shared with every other agent speaking the protocol.
CAT_ID_KEY = "NewRelicID"
CAT_TRANSACTION_KEY = "NewRelicTransaction"
CAT_SYNTHETICS_KEY = "NewRelicSynthetics"
CAT_APP_DATA_KEY = "NewRelicAppData"

# HTTP header names carrying the obfuscated values
HTTP_HEADER_CAT_ID = "X-NewRelic-ID"
HTTP_HEADER_CAT_TRANSACTION = "X-NewRelic-Transaction"
HTTP_HEADER_CAT_APP_DATA = "X-NewRelic-App-Data"
HTTP_HEADER_CAT_SYNTHETICS = "X-NewRelic-Synthetics"

# Fifth element of the app data tuple. It used to be the response content
# length and is no longer meaningful, but consumers expect it.
CAT_APP_DATA_CONTENT_LENGTH = -1

ROOT_SEGMENT_NAME = "ROOT"
