from typing import Optional

from agrinexus.models import FarmerIdentity, FarmSettings
from agrinexus.orchestrators.base import BaseFlow

IDENTITY_TASK_LABEL = "Synthesizing Farmer Identity Layer..."


class IdentityFlow(BaseFlow):
    def __init__(self, gateway, tracker):
        super().__init__("identity", gateway, tracker)
        self.identity: Optional[FarmerIdentity] = None
        self.generating = False

    async def generate(self, settings: FarmSettings) -> Optional[FarmerIdentity]:
        self.generating = True
        try:
            identity = await self.run_task(
                IDENTITY_TASK_LABEL, lambda: self.gateway.generate_identity(settings)
            )
        finally:
            self.generating = False
        self.identity = identity
        return identity
