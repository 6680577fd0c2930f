from .errors import (
    VisError,
    CrumbMissingForId,
    GroupMissingForId,
    LayerMissingForId,
    GroupReuseAttempt,
    CrumbMismatch,
    CrumbsOfAGroupOverflow,
    GroupsOfAGroupOverflow,
    BuilderOverflow,
    JointRejected,
    GradientMissingForName,
)
from .geometry import (
    IDENTITY,
    Arc,
    BezPath,
    Circle,
    Line,
    PathEl,
    Rect,
    RoundedRect,
    TranslateScale,
)
from .text import Font, TextLabel
from .crumb import Crumb, CrumbId, CrumbItem, DrawItem, GroupId, StyleId
from .group import Group, GroupItem
from .scene import Layer, Scene
from .style import (
    BLACK,
    WHITE,
    Color,
    Fill,
    GradientStop,
    LinearGradient,
    Marker,
    MarkerSuite,
    RadialGradient,
    Stroke,
    Style,
    UnitPoint,
)
from .theme import Theme, Variation
from .tweener import LinearEasing, Tweener
from .anchor import Anchor, AnchorRef, BuildResult
from .joint import (
    JointBuilder,
    arc_between,
    arc_joint,
    cubic_joint,
    curve_joint,
    line_joint,
    polyline_joint,
    quad_joint,
    trim_cubic,
    trim_line,
    trim_polyline,
    trim_quad,
)
from .builder import NodeLabelBuilder, PinBuilder
from .config import VisConfig, get_vis_config, set_vis_config
from .tikz_codegen import generate_tikz_code, generate_tikz_document, latex_escape_keep_math

__all__ = [
    'VisError',
    'CrumbMissingForId',
    'GroupMissingForId',
    'LayerMissingForId',
    'GroupReuseAttempt',
    'CrumbMismatch',
    'CrumbsOfAGroupOverflow',
    'GroupsOfAGroupOverflow',
    'BuilderOverflow',
    'JointRejected',
    'GradientMissingForName',
    'IDENTITY',
    'Arc',
    'BezPath',
    'Circle',
    'Line',
    'PathEl',
    'Rect',
    'RoundedRect',
    'TranslateScale',
    'Font',
    'TextLabel',
    'Crumb',
    'CrumbId',
    'CrumbItem',
    'DrawItem',
    'GroupId',
    'StyleId',
    'Group',
    'GroupItem',
    'Layer',
    'Scene',
    'BLACK',
    'WHITE',
    'Color',
    'Fill',
    'GradientStop',
    'LinearGradient',
    'Marker',
    'MarkerSuite',
    'RadialGradient',
    'Stroke',
    'Style',
    'UnitPoint',
    'Theme',
    'Variation',
    'LinearEasing',
    'Tweener',
    'Anchor',
    'AnchorRef',
    'BuildResult',
    'JointBuilder',
    'arc_between',
    'arc_joint',
    'cubic_joint',
    'curve_joint',
    'line_joint',
    'polyline_joint',
    'quad_joint',
    'trim_cubic',
    'trim_line',
    'trim_polyline',
    'trim_quad',
    'NodeLabelBuilder',
    'PinBuilder',
    'VisConfig',
    'get_vis_config',
    'set_vis_config',
    'generate_tikz_code',
    'generate_tikz_document',
    'latex_escape_keep_math',
]
