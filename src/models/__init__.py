from .base import Base
from .user import SysUserModel

__all__ = ["Base", "SysUserModel"]
