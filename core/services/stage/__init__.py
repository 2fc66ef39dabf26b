from core.services.stage.models import StageProgress
from core.services.stage.service import StageLifecycleService

__all__ = ["StageLifecycleService", "StageProgress"]
