"""Database package exports."""

from carteira.db.base import Base
from carteira.db.models import AreaDB, ClienteDB, ContratoDB, ProdutoDB, ServicoDB

__all__ = ["AreaDB", "Base", "ClienteDB", "ContratoDB", "ProdutoDB", "ServicoDB"]
