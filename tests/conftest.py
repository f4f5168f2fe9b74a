# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from types import SimpleNamespace

import pytest


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def machine_class():
    """A fresh machine class with states w, x, y, z and x as the initial state."""
    from eventfsm.core.events import Events
    from eventfsm.core.machine import Machine

    class TestMachine(Events, Machine):
        pass

    TestMachine.state("w")
    TestMachine.state("x", initial=True)
    TestMachine.state("y")
    TestMachine.state("z")
    return TestMachine


@pytest.fixture
def event_machine_class(machine_class):
    """machine_class with the four events used throughout the event tests."""
    machine_class.define_event("event_1", [("x", ["y"])])
    machine_class.define_event("event_2", [("y", ["z"])])
    machine_class.define_event("event_3", [("x", ["y", "z"])])
    machine_class.define_event("event_4", [("x", ["w", "x"])])
    return machine_class


@pytest.fixture
def model():
    """A plain model object handed to guards and callbacks."""
    return SimpleNamespace(name="order")


@pytest.fixture
def instance(event_machine_class, model):
    return event_machine_class(model)


@pytest.fixture
def registry():
    from eventfsm.core.registry import EventRegistry

    return EventRegistry()
