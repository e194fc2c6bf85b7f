from .boxplot import boxplot
from .contour import contour
from .scatter import scatter
from .timeseries import time_series

__all__ = ["boxplot", "contour", "scatter", "time_series"]
