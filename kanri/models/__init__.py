from kanri.models.setting import AppSetting
from kanri.models.user import User

__all__ = [
    "AppSetting",
    "User",
]
