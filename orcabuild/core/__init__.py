# SPDX-License-Identifier: MIT
"""Core data model, errors and compiler invocation."""
