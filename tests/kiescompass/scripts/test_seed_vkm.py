from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kiescompass.db.models import Vkm
from kiescompass.scripts import seed_vkm
from kiescompass.scripts.seed_vkm import parse_int, parse_vkm_row, seed_vkms

HEADER = "id,name,shortdescription,description,content,studycredit,location,contact_id,level,learningoutcomes\n"


def test_parse_int_tolerates_blanks_and_decimal_commas() -> None:
    assert parse_int(" 15 ") == 15
    assert parse_int("7,5") == 7
    assert parse_int("") is None
    assert parse_int("n/a") is None
    assert parse_int(None) is None


def test_parse_vkm_row_applies_defaults_for_missing_cells() -> None:
    data = parse_vkm_row(["159", "Kennismaking met Psychologie", "", "desc", "content", "15"])

    assert data is not None
    assert data["legacy_id"] == 159
    assert data["study_credit"] == 15
    assert data["location"] == "Unknown"
    assert data["level"] == "NLQF5"
    assert data["learning_outcomes"] == ""


def test_parse_vkm_row_skips_empty_rows_and_clamps_credits() -> None:
    assert parse_vkm_row(["", " ", ""]) is None

    data = parse_vkm_row(["1", "Module", "s", "d", "c", "-3", "Breda", "58", "NLQF6", "lo"])
    assert data is not None
    assert data["study_credit"] == 0
    assert data["location"] == "Breda"


@pytest.fixture
def patched_session(
    session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> AsyncSession:
    @asynccontextmanager
    async def _session_context() -> AsyncIterator[AsyncSession]:
        yield session

    monkeypatch.setattr(seed_vkm, "get_session_context", _session_context)
    return session


@pytest.mark.asyncio
async def test_seed_vkms_imports_rows_and_skips_known_ids(
    tmp_path: Path, patched_session: AsyncSession
) -> None:
    csv_path = tmp_path / "vkm.csv"
    csv_path.write_text(
        HEADER
        + '159,Psychology,"Intro, basics",Long text,Content,15,Den Bosch,58,NLQF5,Outcomes\n'
        + "160,Data Science,Short,Long,Content,30,Breda,12,NLQF6,Outcomes\n"
        + "\n",
        encoding="utf-8",
    )

    loaded, skipped = await seed_vkms(csv_path)
    assert (loaded, skipped) == (2, 0)

    reloaded, reskipped = await seed_vkms(csv_path)
    assert (reloaded, reskipped) == (0, 2)

    total = await patched_session.scalar(select(func.count()).select_from(Vkm))
    assert total == 2
    psychology = await patched_session.scalar(select(Vkm).where(Vkm.legacy_id == 159))
    assert psychology.short_description == "Intro, basics"
    assert psychology.is_active is True


@pytest.mark.asyncio
async def test_seed_vkms_dry_run_writes_nothing(
    tmp_path: Path, patched_session: AsyncSession
) -> None:
    csv_path = tmp_path / "vkm.csv"
    csv_path.write_text(HEADER + "1,Module,s,d,c,5,Tilburg,3,NLQF5,lo\n", encoding="utf-8")

    loaded, skipped = await seed_vkms(csv_path, dry_run=True)

    assert (loaded, skipped) == (1, 0)
    total = await patched_session.scalar(select(func.count()).select_from(Vkm))
    assert total == 0


@pytest.mark.asyncio
async def test_seed_vkms_missing_file(tmp_path: Path) -> None:
    assert await seed_vkms(tmp_path / "missing.csv") == (0, 0)


@pytest.mark.asyncio
async def test_seed_vkms_respects_limit(
    tmp_path: Path, patched_session: AsyncSession
) -> None:
    csv_path = tmp_path / "vkm.csv"
    csv_path.write_text(
        HEADER
        + "1,First,s,d,c,5,Tilburg,3,NLQF5,lo\n"
        + "2,Second,s,d,c,5,Tilburg,3,NLQF5,lo\n",
        encoding="utf-8",
    )

    assert await seed_vkms(csv_path, limit=0) == (0, 0)
    assert await seed_vkms(csv_path, limit=1) == (1, 0)

    total = await patched_session.scalar(select(func.count()).select_from(Vkm))
    assert total == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["0", "-5", "many"])
async def test_main_rejects_non_positive_limit(value: str, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        await seed_vkm.main([str(tmp_path / "vkm.csv"), "--limit", value])

    assert excinfo.value.code == 2
