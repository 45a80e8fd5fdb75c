from .registry import Registry, BUILTINS, constructor, data_dictionary
from .extractor import Extractor, extract, interpret

__all__ = [
    'Registry', 'BUILTINS', 'constructor', 'data_dictionary',
    'Extractor', 'extract', 'interpret',
]
