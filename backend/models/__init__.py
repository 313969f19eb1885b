from models.ad_archive import FacebookAdArchive, NewsBreakAdArchive, TikTokAdArchive
from models.order_archive import OrderArchive
from models.pixel_event import PixelEvent

__all__ = [
    "FacebookAdArchive",
    "TikTokAdArchive",
    "NewsBreakAdArchive",
    "OrderArchive",
    "PixelEvent",
]
