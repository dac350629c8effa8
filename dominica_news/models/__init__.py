# Import in dependency order
from .base import BaseModel
from .auth import User
from .content import Category, Article, Image
