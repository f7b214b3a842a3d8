from dataclasses import dataclass


class Logger: ...


class Session: ...


class Request:
    def __init__(self, session: Session):
        self.session = session


class DummyFactory:
    def __call__(self, session: Session) -> Request:
        return Request(session)


class DummyClass:
    def __init__(self, logger: Logger):
        self.logger = logger

    def method(self, logger: Logger) -> Logger:
        return logger

    @staticmethod
    def static_method(logger: Logger) -> Logger:
        return logger

    @classmethod
    def class_method(cls, logger: Logger):
        return cls, logger


class InheritsInit(DummyClass): ...


class NoArgs: ...


@dataclass
class Service:
    logger: Logger
    session: Session


class Chicken:
    def __init__(self, egg: "Egg"):
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken):
        self.chicken = chicken


def global_function(logger: Logger) -> Logger:
    return logger


not_callable = 42
