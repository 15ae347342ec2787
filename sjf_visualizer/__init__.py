"""
SJF visualizer package.

Simulates non-preemptive Shortest-Job-First CPU scheduling over a set of
processes and plays the resulting timeline back with a scrubbable cursor.
"""

__all__ = ["cli", "session", "simulator", "metrics", "playback"]
