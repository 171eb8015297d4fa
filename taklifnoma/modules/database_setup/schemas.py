from pydantic import BaseModel
from typing import Dict, List, Optional


class SetupResult(BaseModel):
    success: bool
    message: str
    completed_steps: List[str] = []
    failed_step: Optional[str] = None


class DatabaseStatus(BaseModel):
    status: Dict[str, bool]
    all_tables_exist: bool
    message: str
