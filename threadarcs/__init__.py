from .graph import (
    CycleError,
    GraphError,
    GraphIndex,
    Link,
    compute_depths,
    from_parents,
    invert,
    normalize_adjacency,
    to_signed,
)
from .validate import ValidationError, validate_permutation
from .options import ThreadArcsOptions, get_default_options, set_default_options
from .layout import (
    BY_GENERATION,
    DEPTH_ZERO_FIRST,
    ArcGeometry,
    LayoutEngine,
    order_by_generation,
    order_depth_zero_first,
)
from .surface import DrawingSurface, SvgSurface, path_data
from .scene import Arc, Point, SceneError, SceneModel
from .scheduler import ManualScheduler, Scheduler
from .highlight import HighlightController
from .tooltip import TooltipController
from .diagram import ThreadArcs

__all__ = [
    'CycleError',
    'GraphError',
    'GraphIndex',
    'Link',
    'compute_depths',
    'from_parents',
    'invert',
    'normalize_adjacency',
    'to_signed',
    'ValidationError',
    'validate_permutation',
    'ThreadArcsOptions',
    'get_default_options',
    'set_default_options',
    'BY_GENERATION',
    'DEPTH_ZERO_FIRST',
    'ArcGeometry',
    'LayoutEngine',
    'order_by_generation',
    'order_depth_zero_first',
    'DrawingSurface',
    'SvgSurface',
    'path_data',
    'Arc',
    'Point',
    'SceneError',
    'SceneModel',
    'ManualScheduler',
    'Scheduler',
    'HighlightController',
    'TooltipController',
    'ThreadArcs',
]
