"""ページャモジュール。"""

from superops.pager.cursor_pager import (
    CursorPagerState,
    CursorPaginator,
    PageFetcher,
    collect_all,
    paginate,
    take,
)
from superops.pager.page_pager import PagePaginator, paginate_pages

__all__ = [
    "CursorPagerState",
    "CursorPaginator",
    "PageFetcher",
    "PagePaginator",
    "collect_all",
    "paginate",
    "paginate_pages",
    "take",
]
