import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import random
import pytest

from device_random import DeviceRegistry, DriverConfig, RandomDevice, RandomDriver


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def device(rng):
    return RandomDevice(rng=rng)


@pytest.fixture
def driver():
    return RandomDriver(DriverConfig(seed=1234))


@pytest.fixture
def registry(rng):
    return DeviceRegistry(rng=rng)
