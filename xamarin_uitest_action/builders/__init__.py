"""Solution builder module."""

from xamarin_uitest_action.builders.base import (
    BuildCallback,
    BuildCommandEvent,
    SolutionBuilder,
)
from xamarin_uitest_action.builders.xamarin import XamarinSolutionBuilder

__all__ = [
    "BuildCallback",
    "BuildCommandEvent",
    "SolutionBuilder",
    "XamarinSolutionBuilder",
]
