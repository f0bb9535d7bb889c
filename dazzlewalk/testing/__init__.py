"""Testing utilities for DazzleWalk consumers.

This module provides fixtures that record what a Walker does, so that
projects building adapters can assert on traversal behaviour.
"""

from .fixtures import RecordingAdapter, Visit

__all__ = ['RecordingAdapter', 'Visit']
