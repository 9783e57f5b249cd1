# Shared fixtures: the default device list expanded once, plus a sizes plan
# over it that several modules reuse.

import logging

import pytest

from config.devices import DEFAULT_DEVICES
from domain.device import Device
from planning.device_sizes import DeviceSizes


@pytest.fixture(scope="session")
def default_devices():
    return Device.sort(Device.from_definitions(DEFAULT_DEVICES))


@pytest.fixture
def full_width_plan(default_devices):
    return DeviceSizes("100vw", default_devices)


@pytest.fixture(autouse=True)
def _quiet_planner_logs(caplog):
    caplog.set_level(logging.WARNING)
    yield
