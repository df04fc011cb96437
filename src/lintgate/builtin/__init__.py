# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bundled plugin artifacts loaded through the regular plugin path mechanism."""
