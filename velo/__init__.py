"""
Velo Altitude data orchestration: cached access to nutrition, training,
Strava and AI assistant data over a mock or remote data source.
"""
