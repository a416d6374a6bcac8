"""Top-level public API for the ``inlineplot`` package.

``inlineplot`` renders the ``[PLOT: expression, min, max]`` directives that a
math tutor embeds in its replies, for example:

>>> from inlineplot import render_plot  # doctest: +SKIP
>>> render_plot("sin(x), -3.14, 3.14").kind  # doctest: +SKIP
'plot'

It exposes both the one-call rendering boundary and the building blocks
(directive parsing, compilation, sampling, coordinate mapping) for hosts that
want to draw with something other than SVG. The notebook turn view and the
hosted-model client live in their own modules (``inlineplot.turn_view``,
``inlineplot.tutor_client``) so importing the renderer stays light.
"""

from .InputConvert import InputConvert
from .NumericExpression import NumericExpression
from .ParseExpression import (
    CompileError,
    LatexParseError,
    normalize_expression,
    parse_expression,
)
from .PlotDirective import InvalidDomainError, ParseError, PlotDirective, parse_directive
from .PlotRenderResult import (
    PlotFailure,
    PlotNothing,
    PlotRenderResult,
    PlotSuccess,
    evaluate_directive,
)
from .directive_segments import PlotSegment, TextSegment, accent_color, split_segments
from .message_parts import ChatMessage, MediaPart, MessagePart, Sender, TextPart
from .numpify import NumpifiedFunction, numpify, numpify_cached
from .plot_coordinates import CoordinateMapper, ViewBounds, compute_view_bounds
from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions
from .plot_renderer import PlotView, render_plot
from .plot_sampling import SamplePoint, sample_expression
from .plot_svg import assemble_svg, error_panel_html
from .tutor_config import ConfigError, TutorConfig

__all__ = [
    "InputConvert",
    "NumericExpression",
    "CompileError",
    "LatexParseError",
    "normalize_expression",
    "parse_expression",
    "InvalidDomainError",
    "ParseError",
    "PlotDirective",
    "parse_directive",
    "PlotFailure",
    "PlotNothing",
    "PlotRenderResult",
    "PlotSuccess",
    "evaluate_directive",
    "PlotSegment",
    "TextSegment",
    "accent_color",
    "split_segments",
    "ChatMessage",
    "MediaPart",
    "MessagePart",
    "Sender",
    "TextPart",
    "NumpifiedFunction",
    "numpify",
    "numpify_cached",
    "CoordinateMapper",
    "ViewBounds",
    "compute_view_bounds",
    "DEFAULT_PLOT_OPTIONS",
    "PlotOptions",
    "PlotView",
    "render_plot",
    "SamplePoint",
    "sample_expression",
    "assemble_svg",
    "error_panel_html",
    "ConfigError",
    "TutorConfig",
]
