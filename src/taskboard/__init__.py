# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Taskboard: a multi-user task list with owner-scoped editing."""

__version__ = "0.1.0"
