from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from docbot.configuration.schedule_settings import DEFAULT_SUPPORTED_COMMANDS
from docbot.datatypes.errors import BotError, ErrorKind
from docbot.datatypes.schedule_datatypes import SCHEDULED_COMMAND_KIND
from docbot.scheduler.schedule_service import ScheduleService, parse_add_arguments, parse_duration_ms

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(store) -> ScheduleService:
    return ScheduleService(store, DEFAULT_SUPPORTED_COMMANDS, clock=lambda: NOW)


@pytest.mark.parametrize(
    "timer, expected",
    [
        ("30s", 30_000),
        ("5m", 300_000),
        ("2h", 7_200_000),
        ("1d", 86_400_000),
        ("2H", 7_200_000),
    ],
)
def test_parse_duration_ms(timer, expected):
    assert parse_duration_ms(timer) == expected


def test_parse_duration_without_unit_letter_uses_minutes():
    assert parse_duration_ms("7") == 7 * 60_000


def test_parse_duration_rejects_garbage():
    with pytest.raises(BotError) as excinfo:
        parse_duration_ms("soon")

    assert excinfo.value.kind is ErrorKind.MISSING_TIMER


def test_parse_add_arguments_keeps_parameters_verbatim():
    assert parse_add_arguments("10M Timeout 123456789012345678 15 spamming  links") == (
        "10m",
        "timeout",
        "123456789012345678 15 spamming  links",
    )


def test_parse_add_arguments_without_parameters():
    assert parse_add_arguments("  1d unban ") == ("1d", "unban", None)


@pytest.mark.parametrize("raw", ["", "ban 123", "7 ban 123", "x5m ban"])
def test_parse_add_arguments_missing_timer(raw):
    with pytest.raises(BotError) as excinfo:
        parse_add_arguments(raw)

    assert excinfo.value.kind is ErrorKind.MISSING_TIMER


@pytest.mark.parametrize("raw", ["5m", "5m   ", "5m !!"])
def test_parse_add_arguments_missing_command(raw):
    with pytest.raises(BotError) as excinfo:
        parse_add_arguments(raw)

    assert excinfo.value.kind is ErrorKind.MISSING_COMMAND


@pytest.mark.asyncio
async def test_add_writes_job_due_after_timer(service, store):
    job = await service.add("2h unban 123456789012345678 appeal accepted", "<@1>", 10, 20)

    assert job.kind == SCHEDULED_COMMAND_KIND
    assert job.command_text == "unban"
    assert job.parameters == "123456789012345678 appeal accepted"
    assert job.next_run_at == NOW + timedelta(hours=2)
    assert job.moderator == "<@1>"
    assert await store.find_by_id(job.job_id) == [job]


@pytest.mark.asyncio
async def test_add_unsupported_command_writes_nothing(service, store):
    with pytest.raises(BotError) as excinfo:
        await service.add("5m kick 123456789012345678", "<@1>", 10, 20)

    assert excinfo.value.kind is ErrorKind.UNSUPPORTED_COMMAND
    assert await store.find(SCHEDULED_COMMAND_KIND) == []


@pytest.mark.asyncio
async def test_add_respects_configured_allow_list(store):
    service = ScheduleService(store, ["warn"], clock=lambda: NOW)

    with pytest.raises(BotError) as excinfo:
        await service.add("5m ban 123456789012345678", "<@1>", 10, 20)

    assert excinfo.value.kind is ErrorKind.UNSUPPORTED_COMMAND


@pytest.mark.asyncio
async def test_delete_returns_removed_job(service, store):
    job = await service.add("1d warn 123456789012345678 last warning", "<@1>", 10, 20)

    removed = await service.delete(job.job_id, "<@2>")

    assert removed == job
    assert await store.find_by_id(job.job_id) == []


@pytest.mark.asyncio
async def test_delete_unknown_id_is_not_found(service):
    with pytest.raises(BotError) as excinfo:
        await service.delete(999, "<@2>")

    assert excinfo.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_lost_race_is_not_found(service, store, monkeypatch):
    job = await service.add("1d warn 123456789012345678", "<@1>", 10, 20)
    monkeypatch.setattr(store, "remove", AsyncMock(return_value=False))

    with pytest.raises(BotError) as excinfo:
        await service.delete(job.job_id, "<@2>")

    assert excinfo.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_list_filters_by_command_and_sorts_ascending(service):
    late_ban = await service.add("3h ban 123456789012345678", "<@1>", 10, 20)
    await service.add("1h warn 123456789012345678", "<@1>", 10, 20)
    early_ban = await service.add("30m ban 223456789012345678", "<@1>", 10, 20)

    bans = await service.list("ban")
    everything = await service.list()

    assert [job.job_id for job in bans] == [early_ban.job_id, late_ban.job_id]
    assert all(job.command_text == "ban" for job in bans)
    assert [job.next_run_at for job in everything] == sorted(job.next_run_at for job in everything)
    assert len(everything) == 3


@pytest.mark.asyncio
async def test_audit_records_add_in_mod_log(service):
    job = await service.add("5m warn 123456789012345678", "<@1>", 10, 20)
    sink = MagicMock()
    sink.record = AsyncMock()

    await ScheduleService.audit(sink, "Add", job, "<@1>")

    sink.record.assert_awaited_once_with("Schedule Command - Add", job, "<@1>", job.next_run_at)


@pytest.mark.asyncio
async def test_delete_job_of_another_guild_is_not_found(service, store):
    job = await service.add("1d ban 123456789012345678", "<@1>", 10, 20)

    with pytest.raises(BotError) as excinfo:
        await service.delete(job.job_id, "<@99>", guild_id=99)

    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert await store.find_by_id(job.job_id) == [job]
    assert await service.delete(job.job_id, "<@1>", guild_id=10) == job


@pytest.mark.asyncio
async def test_list_only_shows_jobs_of_the_guild(service):
    ours = await service.add("1h warn 123456789012345678", "<@1>", 10, 20)
    await service.add("2h ban 223456789012345678", "<@99>", 99, 98)

    assert await service.list(guild_id=10) == [ours]
    assert await service.list("ban", guild_id=10) == []
    assert len(await service.list()) == 2
