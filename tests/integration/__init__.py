# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Integration tests that load, edit and write back whole project files."""
