"""
Weather module – OpenWeatherMap client, location fallback chain and the
aggregation pipeline behind the farmer weather screen.
"""
