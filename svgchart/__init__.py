from svgchart.chart import Chart
from svgchart.colors import CATEGORY20, CategoryColors
from svgchart.config import ChartStyle, LayoutMetrics, LegendSpec, Margins
from svgchart.coordinator import ScaleCoordinator, ScaleState, pinned
from svgchart.errors import ChartDataError, ChartError, ContractViolation
from svgchart.kinds import boxplot, contour, scatter, time_series
from svgchart.scales import LinearScale, PointScale
from svgchart.scene import Node, reconcile
from svgchart.timescale import TimeScale

__all__ = [
    "CATEGORY20",
    "CategoryColors",
    "Chart",
    "ChartDataError",
    "ChartError",
    "ChartStyle",
    "ContractViolation",
    "LayoutMetrics",
    "LegendSpec",
    "LinearScale",
    "Margins",
    "Node",
    "PointScale",
    "ScaleCoordinator",
    "ScaleState",
    "TimeScale",
    "boxplot",
    "contour",
    "pinned",
    "reconcile",
    "scatter",
    "time_series",
]
