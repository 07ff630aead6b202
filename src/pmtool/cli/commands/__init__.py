# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/cli/commands/__init__.py

"""Command handlers called by the typer dispatcher in pmtool.cli.main."""
