from abc import ABC, abstractmethod

import pytest

from favactors.di.container import Container
from favactors.errors import CircularDependencyError, ResolutionError


class IService(ABC):
    @abstractmethod
    def do_something(self):
        pass


class ServiceImpl(IService):
    def do_something(self):
        return "done"


class ServiceWithArgs(IService):
    def __init__(self, value):
        self.value = value

    def do_something(self):
        return self.value


def test_register_resolve_singleton():
    container = Container()
    container.register_singleton(IService, ServiceImpl)

    assert not container.is_resolved(IService)
    s1 = container.resolve(IService)
    assert isinstance(s1, ServiceImpl)
    assert container.resolve(IService) is s1
    assert container.is_resolved(IService)


def test_factory_receives_the_container_and_runs_once():
    container = Container()
    calls = []
    container.register_instance(str, "configured")

    def factory(c):
        calls.append(c)
        return ServiceWithArgs(c.resolve(str))

    container.register_factory(IService, factory)

    assert container.resolve(IService).do_something() == "configured"
    assert container.resolve(IService) is container.resolve(IService)
    assert calls == [container]


def test_registered_instances_count_as_resolved():
    container = Container()
    service = ServiceImpl()
    container.register_instance(IService, service)

    assert container.is_resolved(IService)
    assert container.resolve(IService) is service


def test_resolve_unregistered():
    with pytest.raises(ResolutionError):
        Container().resolve(IService)


def test_circular_dependency_is_detected():
    container = Container()
    container.register_factory(IService, lambda c: c.resolve(IService))

    with pytest.raises(CircularDependencyError):
        container.resolve(IService)


def test_failed_creation_can_be_retried():
    container = Container()
    attempts = []

    def factory(c):
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("not yet")
        return ServiceImpl()

    container.register_factory(IService, factory)

    with pytest.raises(RuntimeError):
        container.resolve(IService)
    assert not container.is_resolved(IService)
    assert isinstance(container.resolve(IService), ServiceImpl)
