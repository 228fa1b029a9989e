"""
Taxonomy - classification schema, search and facet filtering.
Version: 1.0

    catalog = await TaxonomyCatalog.load("config/taxonomy.json")
    engine = FilterEngine(catalog)
    visible = engine.apply(tools, FilterState(types=["GPT"]))
"""

from .loader import TaxonomyLoader, TaxonomyLoadError, TaxonomyLoadResult
from .catalog import TaxonomyCatalog, FilterOptions, Category
from .search_ranker import SearchRanker, local_search
from .filter_engine import FilterEngine
from .synchronizer import TaxonomySynchronizer, ConsistencyReport

__all__ = [
    'TaxonomyLoader',
    'TaxonomyLoadError',
    'TaxonomyLoadResult',
    'TaxonomyCatalog',
    'FilterOptions',
    'Category',
    'SearchRanker',
    'local_search',
    'FilterEngine',
    'TaxonomySynchronizer',
    'ConsistencyReport',
]
