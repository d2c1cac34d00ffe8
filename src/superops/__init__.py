"""superops 公開API。"""

from superops.client import AsyncSuperOpsClient
from superops.config import ClientConfig, RateLimitConfig, RetryConfig
from superops.enums import (
    AlertSeverity,
    DateHandling,
    ErrorCategory,
    OrderDirection,
    Region,
    SessionType,
    TicketPriority,
    TicketStatus,
    Vertical,
)
from superops.errors import (
    SuperOpsAuthenticationError,
    SuperOpsError,
    SuperOpsNetworkError,
    SuperOpsNotFoundError,
    SuperOpsRateLimitError,
    SuperOpsServerError,
    SuperOpsTimeoutError,
    SuperOpsValidationError,
)
from superops.errors_catalog import ErrorClassifier, error_from_graphql
from superops.http import RateLimiter, retry_with_backoff
from superops.pager import CursorPaginator, PagePaginator, collect_all, paginate, paginate_pages, take
from superops.types import GraphQLResponse, Page, PageInfo, RateLimitStatus

__all__ = [
    "AlertSeverity",
    "AsyncSuperOpsClient",
    "ClientConfig",
    "CursorPaginator",
    "DateHandling",
    "ErrorCategory",
    "ErrorClassifier",
    "GraphQLResponse",
    "OrderDirection",
    "Page",
    "PageInfo",
    "PagePaginator",
    "RateLimitConfig",
    "RateLimitStatus",
    "RateLimiter",
    "Region",
    "RetryConfig",
    "SessionType",
    "SuperOpsAuthenticationError",
    "SuperOpsError",
    "SuperOpsNetworkError",
    "SuperOpsNotFoundError",
    "SuperOpsRateLimitError",
    "SuperOpsServerError",
    "SuperOpsTimeoutError",
    "SuperOpsValidationError",
    "TicketPriority",
    "TicketStatus",
    "Vertical",
    "collect_all",
    "error_from_graphql",
    "paginate",
    "paginate_pages",
    "retry_with_backoff",
    "take",
]
