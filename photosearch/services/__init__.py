from photosearch.services.debounce import SearchInputDebouncer
from photosearch.services.photo_search import PhotoSearchClient, SearchSubscription
from photosearch.services.renderers import ConsoleRenderer, PhotoRenderer
from photosearch.services.screen import PhotoSearchScreen

__all__ = [
    "ConsoleRenderer",
    "PhotoRenderer",
    "PhotoSearchClient",
    "PhotoSearchScreen",
    "SearchInputDebouncer",
    "SearchSubscription",
]
