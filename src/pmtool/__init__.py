# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/__init__.py

"""pm-tool: batch management of the git repositories under a directory."""
