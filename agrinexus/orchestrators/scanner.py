import logging
from typing import Optional

from agrinexus.models import DiagnosisResult
from agrinexus.orchestrators.base import BaseFlow

logger = logging.getLogger(__name__)

SCAN_TASK_LABEL = "Vision Diagnosis + MCP Context Linkage"


class ScannerFlow(BaseFlow):
    def __init__(self, gateway, tracker):
        super().__init__("scanner", gateway, tracker)
        self.result: Optional[DiagnosisResult] = None
        self.analyzing = False

    async def scan(self, image_bytes: bytes) -> Optional[DiagnosisResult]:
        """Diagnose a JPEG image; the previous result is discarded first"""
        self.result = None
        self.analyzing = True
        try:
            self.result = await self.run_task(
                SCAN_TASK_LABEL, lambda: self.gateway.diagnose(image_bytes)
            )
        finally:
            self.analyzing = False
        return self.result

    def reset(self):
        self.result = None
        self.alert = None
