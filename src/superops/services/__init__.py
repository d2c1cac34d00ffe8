"""サービス層モジュール。"""

from superops.services._base import BaseService
from superops.services._transport import GraphQLExecutor
from superops.services.alerts import AlertsService
from superops.services.assets import AssetsService
from superops.services.clients import ClientsService
from superops.services.contracts import ContractsService
from superops.services.knowledge_base import KnowledgeBaseService
from superops.services.patches import PatchesService
from superops.services.remote_sessions import RemoteSessionsService
from superops.services.reports import ReportsService
from superops.services.runbooks import RunbooksService
from superops.services.sites import SitesService
from superops.services.technicians import TechniciansService
from superops.services.tickets import TicketsService

__all__ = [
    "AlertsService",
    "AssetsService",
    "BaseService",
    "ClientsService",
    "ContractsService",
    "GraphQLExecutor",
    "KnowledgeBaseService",
    "PatchesService",
    "RemoteSessionsService",
    "ReportsService",
    "RunbooksService",
    "SitesService",
    "TechniciansService",
    "TicketsService",
]
