"""
Reporting Module - console output of simulation results.
"""

from .console import results_table, end_use_table, print_results

__all__ = [
    'results_table',
    'end_use_table',
    'print_results',
]
