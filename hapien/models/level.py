"""Level models"""
from pydantic import BaseModel, ConfigDict


class LevelUnlock(BaseModel):
    """Feature unlocked on reaching a level"""
    model_config = ConfigDict(frozen=True)

    level: int
    feature: str
    description: str
    icon: str
