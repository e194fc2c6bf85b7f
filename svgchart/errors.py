from __future__ import annotations


class ChartError(Exception):
    """Base class for errors raised by svgchart."""


class ContractViolation(ChartError):
    """A chart was rendered with a required accessor still at its unset default."""


class ChartDataError(ChartError, ValueError):
    """Input data or layout that the chart cannot place."""
