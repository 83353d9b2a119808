"""
Funcbench

Benchmarks a Go repository against a comparison target and reports the
deltas either on the console or as a GitHub pull request comment.
"""

__version__ = "0.1.0"
__description__ = "Go benchmark comparison notifier for GitHub pull requests"
