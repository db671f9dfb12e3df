# SPDX-License-Identifier: MIT
"""Core data model: file trees, filters, targets and the identifier registry."""
