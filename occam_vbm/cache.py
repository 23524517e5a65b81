"""Canonical relation and model stores keyed by name"""

import logging
from typing import Optional, Tuple

from .definitions import Model, ModelCache, Relation, RelationCache

logger = logging.getLogger(__name__)


class CacheImplementation:
    """
    Implementation class for RelationCache and ModelCache operations.

    At most one instance per canonical name is ever published. publish()
    does the lookup and the insert in a single dict.setdefault call.
    """

    @staticmethod
    def add(store: dict, name: str, item) -> bool:
        """Store item under name; False if the name is already taken"""
        if name in store:
            return False
        store[name] = item
        return True

    @staticmethod
    def publish(store: dict, name: str, item) -> Tuple[object, bool]:
        """
        Publish item unless an entry with the same name exists.

        Returns:
            The canonical instance and whether it came from the cache
        """
        cached = store.setdefault(name, item)
        from_cache = cached is not item
        if from_cache:
            logger.debug("Cache hit for %s", name)
        return cached, from_cache


# Add implementation methods to cache classes
def _relation_cache_add(self, relation: Relation) -> bool:
    """Add relation"""
    return CacheImplementation.add(self.relations, relation.get_print_name(), relation)


def _relation_cache_find(self, name: str) -> Optional[Relation]:
    """Find relation by name"""
    return self.relations.get(name)


def _relation_cache_publish(self, relation: Relation) -> Tuple[Relation, bool]:
    """Publish relation or fetch the cached one"""
    return CacheImplementation.publish(self.relations, relation.get_print_name(), relation)


def _model_cache_add(self, model: Model) -> bool:
    """Add model"""
    return CacheImplementation.add(self.models, model.get_name(), model)


def _model_cache_find(self, name: str) -> Optional[Model]:
    """Find model by name"""
    return self.models.get(name)


def _model_cache_publish(self, model: Model) -> Tuple[Model, bool]:
    """Publish model or fetch the cached one"""
    return CacheImplementation.publish(self.models, model.get_name(), model)


def _cache_len_relations(self):
    return len(self.relations)


def _cache_len_models(self):
    return len(self.models)


RelationCache.add_relation = _relation_cache_add
RelationCache.find_relation = _relation_cache_find
RelationCache.publish = _relation_cache_publish
RelationCache.__len__ = _cache_len_relations
ModelCache.add_model = _model_cache_add
ModelCache.find_model = _model_cache_find
ModelCache.publish = _model_cache_publish
ModelCache.__len__ = _cache_len_models
