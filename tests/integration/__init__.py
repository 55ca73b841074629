"""
Integration tests for m8build.

These tests run the complete build flow against real child processes: a
stand-in compiler and linker written in Python, spawned through the same
subprocess path the CLI uses.
"""
