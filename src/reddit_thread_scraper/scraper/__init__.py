"""Reddit thread fetch-and-clean service.

Sub-modules:
- ``config``             : constants (headers, sentinels, phrases)
- ``url_normalizer``     : thread URL → ``.json`` endpoint URL
- ``http_fetcher``       : async httpx fetch with one retry
- ``response_validator`` : status/body checks and JSON decoding
- ``cleaner``            : nested listing → post summary + flat comments
- ``service``            : the full pipeline (``scrape_thread``)
- ``router``             : FastAPI router (``/api/scrape``)
"""
