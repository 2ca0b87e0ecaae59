"""Command line tools for ISHNE Holter files."""

from .convert_ishne import main as convert_main
from .plot_ishne import IshneDataPlotter, main as plot_main

__all__ = ["convert_main", "IshneDataPlotter", "plot_main"]
