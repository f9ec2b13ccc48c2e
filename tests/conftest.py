from datetime import datetime

import pytest

from tzresolve import tzfile
from tzresolve.resolver import Resolver
from tzresolve.zones import FixedTimeZone, Transition, VariableTimeZone


def variable_zone(name, std_offset, std_abbrev, dst_abbrev, year=2020):
    """Zone with one summer of DST, starting in 1900."""
    std = FixedTimeZone(std_abbrev, std_offset, 0)
    dst = FixedTimeZone(dst_abbrev, std_offset, 3600)
    return VariableTimeZone(name, [
        Transition(datetime(1900, 1, 1), std),
        Transition(datetime(year, 3, 29, 1), dst),
        Transition(datetime(year, 10, 25, 1), std),
    ])


class CountingDecoder:
    """tzfile.read wrapper remembering which names were decoded."""

    def __init__(self):
        self.calls = []

    def __call__(self, path, name):
        self.calls.append(name)
        return tzfile.read(path, name)


@pytest.fixture
def warsaw():
    return variable_zone('Europe/Warsaw', 3600, 'CET', 'CEST')


@pytest.fixture
def database(tmp_path, warsaw):
    root = tmp_path / 'compiled'
    tzfile.write(root / 'Europe' / 'Warsaw', warsaw, ['europe'])
    tzfile.write(
        root / 'America' / 'Los_Angeles',
        variable_zone('America/Los_Angeles', -8 * 3600, 'PST', 'PDT'),
        ['northamerica'],
    )
    tzfile.write(
        root / 'US' / 'Pacific',
        variable_zone('US/Pacific', -8 * 3600, 'PST', 'PDT'),
        ['backward'],
    )
    tzfile.write(root / 'Etc' / 'GMT+5', FixedTimeZone('Etc/GMT+5', -5 * 3600), ['etcetera'])
    tzfile.write(root / 'Etc' / 'UTC', FixedTimeZone('Etc/UTC', 0), ['etcetera'])
    (root / tzfile.DATABASE_MARKER).touch()
    return root


@pytest.fixture
def decoder():
    return CountingDecoder()


@pytest.fixture
def resolver(database, decoder):
    return Resolver(database, decoder=decoder, workers=2)
