"""Console rendering components."""

from signalset.visualization.console import ConsoleVisualizer

__all__ = ["ConsoleVisualizer"]
