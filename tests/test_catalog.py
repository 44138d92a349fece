from sqlalchemy import update

from scenario_sim.models.scenario import Scenario
from scenario_sim.services.catalog import ScenarioCatalog
from scenario_sim.services.seeding import DEFAULT_SCENARIOS, seed_scenarios
from tests.conftest import make_scenario


async def test_fetch_returns_snapshot(db, scenario):
    snapshot = await ScenarioCatalog(db).fetch_scenario(scenario.id)

    assert snapshot.id == scenario.id
    assert snapshot.total_steps == 5
    assert snapshot.narrative_text == scenario.narrative_text


async def test_fetch_is_cached_for_running_sessions(db, scenario):
    catalog = ScenarioCatalog(db)
    before = await catalog.fetch_scenario(scenario.id)

    await db.execute(update(Scenario).where(Scenario.id == scenario.id).values(total_steps=9))
    await db.commit()

    after = await catalog.fetch_scenario(scenario.id)
    assert after == before
    assert after.total_steps == 5


async def test_fetch_unknown(db):
    assert await ScenarioCatalog(db).fetch_scenario(42) is None


async def test_list_filters(db):
    db.add_all(
        [
            make_scenario(title="A", category="Administrative Actions", difficulty="beginner", branch="Army"),
            make_scenario(title="B", category="Security Clearances", difficulty="intermediate", branch="Navy"),
            make_scenario(title="C", category="Security Clearances", difficulty="advanced", branch="All"),
            make_scenario(title="D", category="Security Clearances", difficulty="advanced", is_active=False),
        ]
    )
    await db.commit()
    catalog = ScenarioCatalog(db)

    assert {s.title for s in await catalog.list_scenarios()} == {"A", "B", "C"}
    assert {s.title for s in await catalog.list_scenarios(category="Security Clearances")} == {"B", "C"}
    assert {s.title for s in await catalog.list_scenarios(difficulty="advanced")} == {"C"}
    assert {s.title for s in await catalog.list_scenarios(branch="Army")} == {"A", "C"}


async def test_seed_only_into_empty_catalog(db):
    assert await seed_scenarios(db) == len(DEFAULT_SCENARIOS)
    assert await seed_scenarios(db) == 0

    scenarios = await ScenarioCatalog(db).list_scenarios()
    assert len(scenarios) == len(DEFAULT_SCENARIOS)
    assert all(s.total_steps == 5 for s in scenarios)


async def test_seed_uses_configured_step_count(db, monkeypatch):
    monkeypatch.setenv("DEFAULT_TOTAL_STEPS", "3")

    await seed_scenarios(db)

    scenarios = await ScenarioCatalog(db).list_scenarios()
    assert {s.total_steps for s in scenarios} == {3}


async def test_step_count_defaults_from_settings(db, monkeypatch):
    monkeypatch.setenv("DEFAULT_TOTAL_STEPS", "4")
    db.add(Scenario(**DEFAULT_SCENARIOS[0]))
    await db.commit()

    (snapshot,) = await ScenarioCatalog(db).list_scenarios()
    assert snapshot.total_steps == 4


async def test_scenarios_without_steps_are_not_playable(db):
    empty = make_scenario(title="Empty", total_steps=0)
    db.add_all([make_scenario(title="Playable"), empty])
    await db.commit()
    catalog = ScenarioCatalog(db)

    assert await catalog.fetch_scenario(empty.id) is None
    assert [s.title for s in await catalog.list_scenarios()] == ["Playable"]
