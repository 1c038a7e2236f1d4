"""
Data access for the forecast backend.

Modules
-------
payloads   : parse_forecasts() / parse_resolutions() / parse_accuracy() and
             load_payload_file() for offline JSON snapshots.
api_client : TrackerApiClient — httpx client for the /weather endpoints.
"""
