"""
Constants and default configuration values for quiet-hn.
"""

# Upstream API
HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
HN_TOP_STORIES_PATH = "/topstories.json"
HN_ITEM_PATH = "/item/{id}.json"
HN_HTTP_TIMEOUT = 15.0
HN_HTTP_CONNECT_TIMEOUT = 10.0

# Server
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_NUM_STORIES = 30

# Story Filtering
STORY_TYPE = "story"
OVERFETCH_RATIO = 1.25  # Extra lookups per round to cover comments, jobs, self-posts
WWW_PREFIX = "www."

# Result Cache
STORY_CACHE_TTL = 10.0  # seconds

# Concurrency
ITEM_FETCH_TIMEOUT = 10.0  # Per-lookup deadline in seconds (0 = wait forever)
ITEM_FETCH_CONCURRENCY = 0  # Max simultaneous lookups (0 = one task per ID, unbounded)

# Logging
DEFAULT_LOG_LEVEL = "INFO"
