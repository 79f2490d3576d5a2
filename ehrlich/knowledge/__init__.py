"""
EHRLICH — Модуль бази знань (knowledge)

Компоненти:
- KnowledgeProvider: абстрактний контракт, який читає движок
- CatalogKnowledgeProvider: каталог у пам'яті з YAML / JSON / dict

Приклад використання:
    from ehrlich.knowledge import CatalogKnowledgeProvider
    
    provider = CatalogKnowledgeProvider.from_file("data/knowledge_base.yaml")
    print(provider.disease_count())
    print(provider.cf_conclude())
"""

from .provider import KnowledgeProvider
from .catalog import CatalogKnowledgeProvider


__all__ = [
    "KnowledgeProvider",
    "CatalogKnowledgeProvider",
]
