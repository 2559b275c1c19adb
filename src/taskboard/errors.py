# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the credential store, task service and routes."""

from __future__ import annotations


class TaskboardError(Exception):
    """Base class for every error raised by taskboard itself."""


class ConfigError(TaskboardError):
    pass


class InvalidInput(TaskboardError):
    pass


class AlreadyExists(TaskboardError):
    pass


class NotFound(TaskboardError):
    pass


class BadCredential(TaskboardError):
    pass


class NotOwnedOrMissing(TaskboardError):
    """The task does not exist, or it belongs to someone else.

    Both cases share this single error so callers cannot probe for tasks
    owned by other users.
    """


class StoreUnavailable(TaskboardError):
    pass
