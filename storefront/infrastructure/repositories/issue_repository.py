from typing import Optional

from storefront.domain.models import SupportIssue
from storefront.infrastructure.supabase_client import PostgrestClient
from storefront.interfaces.IIssueRepository import IIssueRepository

class SupabaseIssueRepository(IIssueRepository):

    def __init__(self, client: PostgrestClient):
        self.client = client

    async def create_issue(self, issue: SupportIssue, access_token: Optional[str] = None) -> None:
        await self.client.insert("issues", issue.model_dump(mode="json"), access_token=access_token)
