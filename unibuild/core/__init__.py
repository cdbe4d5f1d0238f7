# SPDX-License-Identifier: MIT
"""Core data structures: errors, build variables, artifacts and actions."""
