from __future__ import annotations

from unittest.mock import patch

import pytest

from credhelper import mfa
from credhelper.errors import CryptoInputError, NotFoundError, ValidationError
from credhelper.settings import Settings


SECRET = "gezd gnbv gy3t qojq gezd gnbv gy3t qojq"


def test_setup_then_list_round_trip(settings: Settings) -> None:
    assert mfa.setup("google", "dummy@gmail.com", SECRET, 30, settings=settings) is False

    entries = mfa.list_entries(settings=settings)
    assert len(entries) == 1
    entry = entries[0]
    assert (entry.account, entry.name, entry.period) == ("google", "dummy@gmail.com", 30)
    # stored as given, not normalized
    assert entry.secret == SECRET


def test_setup_replaces_existing_in_place(settings: Settings) -> None:
    mfa.setup("a", "one", SECRET, settings=settings)
    mfa.setup("b", "two", SECRET, settings=settings)
    assert mfa.setup("a", "one", "JBSWY3DPEHPK3PXP", 60, settings=settings) is True

    entries = mfa.list_entries(settings=settings)
    assert [(e.account, e.name) for e in entries] == [("a", "one"), ("b", "two")]
    assert entries[0].secret == "JBSWY3DPEHPK3PXP"
    assert entries[0].period == 60


def test_setup_rejects_bad_secret_without_writing(settings: Settings) -> None:
    with pytest.raises(CryptoInputError):
        mfa.setup("google", "me", "0189 0189", settings=settings)
    assert not settings.mfa_path.exists()


@pytest.mark.parametrize("period", [0, -30])
def test_setup_rejects_non_positive_period(settings: Settings, period: int) -> None:
    with pytest.raises(ValidationError):
        mfa.setup("google", "me", SECRET, period, settings=settings)
    assert not settings.mfa_path.exists()


@pytest.mark.parametrize("account, name", [("", "me"), ("google", "")])
def test_setup_requires_identifiers(settings: Settings, account: str, name: str) -> None:
    with pytest.raises(ValidationError):
        mfa.setup(account, name, SECRET, settings=settings)


def test_generate_known_code(settings: Settings) -> None:
    mfa.setup("google", "me", SECRET, 30, settings=settings)
    result = mfa.generate("google", "me", now=59, settings=settings)
    assert result.code == "287082"
    assert result.remaining == 1
    assert result.counter == 1


def test_generate_uses_wall_clock(settings: Settings) -> None:
    mfa.setup("google", "me", SECRET, 30, settings=settings)
    with patch("credhelper.mfa.time.time", return_value=59.9):
        assert mfa.generate("google", "me", settings=settings).code == "287082"


def test_generate_with_offset(settings: Settings) -> None:
    mfa.setup("google", "me", SECRET, 30, settings=settings)
    assert mfa.generate("google", "me", now=59, offset=-30, settings=settings).code == "755224"


def test_generate_unknown_entry(settings: Settings) -> None:
    mfa.setup("google", "me", SECRET, settings=settings)
    with pytest.raises(NotFoundError):
        mfa.generate("google", "someone-else", now=59, settings=settings)


def test_generate_window(settings: Settings) -> None:
    mfa.setup("google", "me", SECRET, 30, settings=settings)
    codes = mfa.generate_window("google", "me", steps=1, now=59, settings=settings)
    assert [c.code for c in codes] == ["755224", "287082", "359152"]


def test_generate_does_not_log_secret(settings: Settings, caplog: pytest.LogCaptureFixture) -> None:
    mfa.setup("google", "me", SECRET, 30, settings=settings)
    with caplog.at_level("DEBUG", logger="credhelper"):
        mfa.generate("google", "me", now=59, settings=settings)
    assert "counter=1" in caplog.text
    assert "GEZD" not in caplog.text.upper().replace(" ", "")
    assert "287082" not in caplog.text


def test_generate_window_with_offset(settings: Settings) -> None:
    mfa.setup("google", "me", SECRET, 30, settings=settings)
    codes = mfa.generate_window("google", "me", steps=1, now=89, offset=-30, settings=settings)
    assert [c.code for c in codes] == ["755224", "287082", "359152"]
    assert [c.counter for c in codes] == [0, 1, 2]
