# SPDX-License-Identifier: MIT
"""Configuration layer: build options and defaults."""
