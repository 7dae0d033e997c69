from .database import SqlAlchemyEventRepository, SqlAlchemyUserRepository
from .memory import InMemoryEventRepository, InMemoryUserRepository

__all__ = [
    'SqlAlchemyEventRepository', 'SqlAlchemyUserRepository',
    'InMemoryEventRepository', 'InMemoryUserRepository',
]
