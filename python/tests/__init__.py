"""
Test suite for ccconfig.

This package contains tests for all modules in the ccconfig project,
including unit tests for the archive components and end-to-end tests that
drive the command-line interface against temporary directory trees.
"""
