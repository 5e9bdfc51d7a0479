"""Per-domain Bitrix24 request builders."""

from bitrix_proxy.infrastructure.builders.activities import ActivityRequestBuilder
from bitrix_proxy.infrastructure.builders.base import BaseRequestBuilder
from bitrix_proxy.infrastructure.builders.companies import CompanyRequestBuilder
from bitrix_proxy.infrastructure.builders.contacts import ContactRequestBuilder
from bitrix_proxy.infrastructure.builders.deals import DealRequestBuilder
from bitrix_proxy.infrastructure.builders.items import ItemRequestBuilder
from bitrix_proxy.infrastructure.builders.leads import LeadRequestBuilder
from bitrix_proxy.infrastructure.builders.misc import MiscRequestBuilder
from bitrix_proxy.infrastructure.builders.tasks import TaskRequestBuilder
from bitrix_proxy.infrastructure.builders.users import UserRequestBuilder

__all__ = [
    "ActivityRequestBuilder",
    "BaseRequestBuilder",
    "CompanyRequestBuilder",
    "ContactRequestBuilder",
    "DealRequestBuilder",
    "ItemRequestBuilder",
    "LeadRequestBuilder",
    "MiscRequestBuilder",
    "TaskRequestBuilder",
    "UserRequestBuilder",
]
