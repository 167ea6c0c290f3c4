# SPDX-License-Identifier: MIT
"""Platform and toolchain detection."""
