# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.01.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/cli/__init__.py

from pmtool.cli.main import app

__all__ = ["app"]
