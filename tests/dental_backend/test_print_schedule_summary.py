import json

import pytest

from dental_backend import print_schedule_summary
from dental_backend.core import config


def test_main_prints_week_as_json(monkeypatch, capsys, fake_store) -> None:
    fake_store.add_weekly('doc-1', 1, '08:00', '12:00')
    fake_store.add_doctor('doc-1', 'Dr. One')
    monkeypatch.setattr(print_schedule_summary, 'SqlAlchemyBookingStore', lambda: fake_store)

    exit_code = print_schedule_summary.main(['Cabugao', '2026-01-04'])

    week = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert [day['day_name'] for day in week] == ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
    assert week[0]['is_open'] is False
    assert week[1]['provider_count'] == 1
    assert week[1]['providers'] == [{'id': 'doc-1', 'name': 'Dr. One'}]
    assert week[2]['provider_count'] == 0


def test_main_requires_branch(capsys) -> None:
    assert print_schedule_summary.main([]) == 1
    assert 'Usage' in capsys.readouterr().err


def test_main_rejects_bad_start_date(monkeypatch, capsys, fake_store) -> None:
    monkeypatch.setattr(print_schedule_summary, 'SqlAlchemyBookingStore', lambda: fake_store)

    assert print_schedule_summary.main(['Cabugao', 'next monday']) == 1
    assert 'Invalid start date' in capsys.readouterr().err


def test_validate_runtime_config_rejects_default_secret_in_production(monkeypatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'AUTH_JWT_SECRET', 'change-me')

    with pytest.raises(RuntimeError, match='AUTH_JWT_SECRET'):
        config.validate_runtime_config()


@pytest.mark.parametrize('interval', [0, 25, 45])
def test_validate_runtime_config_rejects_uneven_slot_interval(monkeypatch, interval: int) -> None:
    monkeypatch.setattr(config, 'SLOT_INTERVAL_MINUTES', interval)

    with pytest.raises(RuntimeError, match='SLOT_INTERVAL_MINUTES'):
        config.validate_runtime_config()


def test_validate_runtime_config_accepts_defaults() -> None:
    config.validate_runtime_config()
