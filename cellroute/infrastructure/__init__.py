"""Infrastructure adapters: layout document I/O."""
from .serialization import (
    LayoutDocument, load_layout, load_rules, parse_layout, layout_to_dict,
    route_result_to_dict, export_route_result
)

__all__ = [
    'LayoutDocument', 'load_layout', 'load_rules', 'parse_layout', 'layout_to_dict',
    'route_result_to_dict', 'export_route_result'
]
