# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bundled reporter plugins; each module defines ``register_reporters``."""
