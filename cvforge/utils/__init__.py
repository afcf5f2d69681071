"""
Shared utilities for cvforge.

Common functionality used across contexts:
- LaTeX escaping and text helpers
- Logger setup
- PDF inspection
- Timestamps
"""

from cvforge.utils.text_processing import escape_latex
from cvforge.utils.timestamp import now, now_exact

__all__ = ["escape_latex", "now", "now_exact"]
