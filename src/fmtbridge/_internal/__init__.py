# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Internal helpers shared across fmtbridge modules. Not part of the public API."""

from __future__ import annotations
