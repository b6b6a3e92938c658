from .base import Base, BaseModel
from .user import User
from .skill import Skill
from .chat import Message
from .exchange import Exchange
from .review import Review

__all__ = ["Base", "BaseModel", "User", "Skill", "Message", "Exchange", "Review"]
