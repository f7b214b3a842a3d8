import unittest

import pytest

import postponed
from dummies import Logger, Session
from zapinject import Injector, Parameter, UnknownDependencyError
from zapinject._reflection import reflect_callable, reflect_constructor


class TestPostponedAnnotations(unittest.TestCase):
    injector: Injector
    logger: Logger
    audit: Logger

    def setUp(self):
        self.injector = Injector()
        self.logger = Logger()
        self.audit = Logger()
        self.injector.add_instance(self.logger)
        self.injector.add_instance(self.audit, token="app.AuditLog")

    def test_resolvable_annotations_keep_qualified_keys(self):
        _, params = reflect_callable(postponed.handler)

        assert params == [
            Parameter("logger", "dummies.Logger"),
            Parameter("audit", "app.AuditLog"),
        ]

    def test_mixed_annotations_are_injected(self):
        assert self.injector.invoke(postponed.handler) == (self.logger, self.audit)

    def test_unresolved_union_with_none_is_nullable(self):
        _, params = reflect_callable(postponed.nullable_handler)

        assert params[1] == Parameter("missing", "Unknown", nullable=True)
        assert self.injector.invoke(postponed.nullable_handler) == (self.logger, None)

    def test_unresolved_optional_is_nullable(self):
        assert self.injector.invoke(postponed.optional_handler) == (None, self.logger)

    def test_constructor_with_postponed_annotations(self):
        session = Session()
        self.injector.add_instance(session)

        consumer = self.injector.create(postponed.Consumer)
        report = self.injector.create(postponed.Report)

        assert consumer.logger is self.logger
        assert consumer.session is session
        assert report.session is session
        assert report.audit is self.audit

    def test_constructor_descriptors_with_unresolved_annotation(self):
        _, params = reflect_constructor(postponed.Report)

        assert params == [
            Parameter("session", "dummies.Session"),
            Parameter("audit", "app.AuditLog"),
        ]


def test_local_class_under_postponed_annotations_needs_explicit_token():
    injector = Injector()
    local_cls, local_handler = postponed.make_local_handler()
    value = local_cls()
    injector.add_instance(value)

    # the annotation is the bare string "Local", which is not the class's qualified key
    with pytest.raises(UnknownDependencyError) as ctx:
        injector.invoke(local_handler)
    assert ctx.value.token == "Local"

    injector.add_instance(value, token="Local")
    assert injector.invoke(local_handler) is value
