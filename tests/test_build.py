from datetime import datetime

import pytest
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzresolve import build, tzfile
from tzresolve.classes import Class
from tzresolve.errors import DisallowedClass
from tzresolve.resolver import Resolver
from tzresolve.zones import FixedTimeZone, VariableTimeZone

try:
    ZoneInfo('Europe/Warsaw')
except ZoneInfoNotFoundError:
    pytestmark = pytest.mark.skip(reason='no IANA time zone data available')


@pytest.fixture
def source_dir(tmp_path):
    source = tmp_path / 'tzdata'
    source.mkdir()
    (source / 'europe').write_text(
        "# Zone\tFake/Commented\t0:00\t-\tXXX\n"
        "Zone\tEurope/Warsaw\t1:24:00 -\tLMT\t1880\n"
        "\t\t\t1:00\tPoland\tCE%sT\n"
    )
    (source / 'northamerica').write_text(
        "Zone America/Los_Angeles -7:52:58 - LMT 1883 Nov 18 20:00u\n"
        "\t\t\t-8:00\tUS\tP%sT\n"
    )
    (source / 'backward').write_text(
        "Link\tAmerica/Los_Angeles\tUS/Pacific\t# comment\n"
        "L Europe/Warsaw Poland\n"
    )
    (source / 'etcetera').write_text("Zone\tEtc/GMT+5\t-5\t-\t-05\n")
    (source / 'factory').write_text("Zone\tFactory\t0\t-\t-00\n")
    return source


def test_load_sources(source_dir):
    assert build.load_sources(source_dir) == {
        'Europe/Warsaw': ['europe'],
        'America/Los_Angeles': ['northamerica'],
        'US/Pacific': ['backward'],
        'Poland': ['backward'],
        'Etc/GMT+5': ['etcetera'],
    }


def test_name_declared_in_several_files(source_dir):
    (source_dir / 'backward').write_text("Zone\tEurope/Warsaw\t1:00\t-\tCET\n")
    assert build.load_sources(source_dir)['Europe/Warsaw'] == ['europe', 'backward']


def test_compile_variable_zone():
    zone = build.compile_zone('Europe/Warsaw', 2020, 2022)

    assert isinstance(zone, VariableTimeZone)
    assert len(zone.transitions) == 5
    assert zone.transitions[0].utc_datetime == datetime(2020, 1, 1)
    assert zone.transitions[0].zone == FixedTimeZone('CET', 3600, 0)
    assert zone.transitions[1].utc_datetime == datetime(2020, 3, 29, 1)
    assert zone.transitions[1].zone == FixedTimeZone('CEST', 3600, 3600)
    assert zone.transitions[2].utc_datetime == datetime(2020, 10, 25, 1)


def test_compile_fixed_zone():
    assert build.compile_zone('Etc/GMT+5', 2020, 2021) == FixedTimeZone('Etc/GMT+5', -18000)


def test_compile_unknown_zone():
    with pytest.raises(ValueError):
        build.compile_zone('Mars/Olympus_Mons')


def test_build(tmp_path, source_dir, capsys):
    output = tmp_path / 'compiled'
    output.mkdir()
    (output / tzfile.DATABASE_MARKER).touch()
    (output / 'stale').write_text('left over')
    declared = build.load_sources(source_dir)

    compiled = build.build(
        output, declared, ['US/Pacific', 'Etc/GMT+5', 'Europe/Warsaw', 'Nowhere'],
        start_year=2020, end_year=2021,
    )

    assert compiled == ['Etc/GMT+5', 'Europe/Warsaw', 'US/Pacific']
    assert not (output / 'stale').exists()
    assert (output / tzfile.DATABASE_MARKER).is_file()
    assert 'Nowhere' in capsys.readouterr().err

    resolver = Resolver(output, workers=1)
    assert isinstance(resolver.resolve('Europe/Warsaw'), VariableTimeZone)
    assert resolver.resolve('Etc/GMT+5') == FixedTimeZone('Etc/GMT+5', -18000)
    with pytest.raises(DisallowedClass):
        resolver.resolve('US/Pacific')
    assert resolver.resolve('US/Pacific', Class.LEGACY).name == 'US/Pacific'


def test_main(tmp_path, source_dir, capsys):
    output = tmp_path / 'compiled'
    status = build.main([
        '--source', str(source_dir), '-o', str(output),
        '--start-year', '2020', '--end-year', '2021', 'Europe/Warsaw',
    ])

    assert status == 0
    assert (output / 'Europe' / 'Warsaw').is_file()
    assert 'Compiled 1 timezone(s)' in capsys.readouterr().out


def test_main_list(source_dir, capsys):
    assert build.main(['--source', str(source_dir), '--list']) == 0
    out = capsys.readouterr().out
    assert 'backward:\n  Poland\n  US/Pacific\n' in out
    assert 'Factory' not in out


def test_main_missing_source(tmp_path, capsys):
    assert build.main(['--source', str(tmp_path / 'nope')]) == 1
    assert 'Source directory not found' in capsys.readouterr().err


def test_main_nothing_compiled(tmp_path, source_dir, capsys):
    status = build.main([
        '--source', str(source_dir), '-o', str(tmp_path / 'compiled'), 'Nowhere',
    ])
    assert status == 1
    assert 'No timezones compiled' in capsys.readouterr().err


def test_build_into_empty_directory(tmp_path, source_dir):
    output = tmp_path / 'compiled'
    output.mkdir()
    declared = build.load_sources(source_dir)

    assert build.build(output, declared, ['Etc/GMT+5'], 2020, 2021) == ['Etc/GMT+5']
    assert (output / tzfile.DATABASE_MARKER).is_file()
    # A second build replaces the first
    assert build.build(output, declared, ['Europe/Warsaw'], 2020, 2021) == ['Europe/Warsaw']
    assert not (output / 'Etc' / 'GMT+5').exists()


def test_build_refuses_unrelated_directory(tmp_path, source_dir):
    output = tmp_path / 'home'
    output.mkdir()
    (output / 'notes.txt').write_text('keep me')

    with pytest.raises(ValueError, match='Refusing to replace'):
        build.build(output, build.load_sources(source_dir), ['Etc/GMT+5'])
    assert (output / 'notes.txt').read_text() == 'keep me'


def test_build_refuses_file(tmp_path, source_dir):
    output = tmp_path / 'compiled'
    output.write_text('not a directory')

    with pytest.raises(ValueError, match='not a directory'):
        build.build(output, build.load_sources(source_dir), ['Etc/GMT+5'])
    assert output.read_text() == 'not a directory'


def test_main_refuses_unrelated_directory(tmp_path, source_dir, capsys):
    output = tmp_path / 'home'
    output.mkdir()
    (output / 'notes.txt').write_text('keep me')

    status = build.main(['--source', str(source_dir), '-o', str(output), 'Etc/GMT+5'])

    assert status == 1
    assert 'Refusing to replace' in capsys.readouterr().err
    assert (output / 'notes.txt').is_file()
