# SPDX-License-Identifier: MIT
"""Flag policy and composition."""

from orcabuild.toolchains.composer import compose, sources_for
from orcabuild.toolchains.policy import POLICY, PolicyContext, Rule

__all__ = [
    "compose",
    "sources_for",
    "POLICY",
    "PolicyContext",
    "Rule",
]
