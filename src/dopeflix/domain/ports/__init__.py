from .page_fetcher import PageFetcherPort, PageResponse
from .site import SitePort
from .video_extractor import VideoExtractorPort

__all__ = [
    "PageFetcherPort",
    "PageResponse",
    "SitePort",
    "VideoExtractorPort",
]
