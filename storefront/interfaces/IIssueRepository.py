from abc import ABC, abstractmethod
from typing import Optional

from storefront.domain.models import SupportIssue

class IIssueRepository(ABC):
    @abstractmethod
    async def create_issue(self, issue: SupportIssue, access_token: Optional[str] = None) -> None:
        pass
