# Search Adapters
# NewsAPI and Google Custom Search integrations

from .google_search_adapter import GoogleSearchAdapter, GoogleSearchError
from .news_api_adapter import NewsAPIAdapter, NewsAPIError

__all__ = [
    "NewsAPIAdapter",
    "NewsAPIError",
    "GoogleSearchAdapter",
    "GoogleSearchError",
]
