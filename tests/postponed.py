from __future__ import annotations

from typing import Optional

from dummies import Logger, Session


def handler(logger: Logger, audit: app.AuditLog):  # noqa: F821
    return logger, audit


def nullable_handler(logger: Logger, missing: Unknown | None):  # noqa: F821
    return logger, missing


def optional_handler(missing: Optional[Unknown], logger: Optional[Logger]):  # noqa: F821
    return missing, logger


class Consumer:
    def __init__(self, logger: Logger, session: Session | None = None):
        self.logger = logger
        self.session = session


class Report:
    def __init__(self, session: Session, audit: app.AuditLog):  # noqa: F821
        self.session = session
        self.audit = audit


def make_local_handler():
    class Local: ...

    def local_handler(value: Local):
        return value

    return Local, local_handler
