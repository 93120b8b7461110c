import pytest
from datetime import date

from okr_app.services import CycleService, ObjectiveService
from okr_app.schemas import CycleCreate, ObjectiveCreate
from okr_app.exceptions import NotFoundError, ValidationError


class TestCycleService:
    """Test CycleService business logic."""

    @pytest.fixture
    def cycle_service(self, test_db):
        return CycleService(test_db)

    @pytest.fixture
    def q1(self):
        return CycleCreate(name="Q1 2026", start_date=date(2026, 1, 1), end_date=date(2026, 3, 31))

    def test_create_cycle_status_from_dates(self, cycle_service, q1):
        assert cycle_service.create_cycle(q1, today=date(2025, 12, 1)).status == "planning"
        assert cycle_service.create_cycle(q1, today=date(2026, 2, 1)).status == "active"
        assert cycle_service.create_cycle(q1, today=date(2026, 5, 1)).status == "completed"

    def test_create_cycle_end_before_start(self, cycle_service):
        with pytest.raises(ValidationError) as exc_info:
            cycle_service.create_cycle(
                CycleCreate(name="Broken", start_date=date(2026, 3, 1), end_date=date(2026, 2, 1))
            )

        assert "end date must not be before its start date" in str(exc_info.value)

    def test_create_cycle_empty_name(self, cycle_service):
        with pytest.raises(ValidationError):
            cycle_service.create_cycle(
                CycleCreate(name="", start_date=date(2026, 1, 1), end_date=date(2026, 1, 31))
            )

    def test_list_cycles_most_recent_first(self, cycle_service, q1):
        cycle_service.create_cycle(q1)
        cycle_service.create_cycle(
            CycleCreate(name="Q2 2026", start_date=date(2026, 4, 1), end_date=date(2026, 6, 30))
        )

        assert [c.name for c in cycle_service.list_cycles()] == ["Q2 2026", "Q1 2026"]

    def test_refresh_statuses(self, cycle_service, q1):
        created = cycle_service.create_cycle(q1, today=date(2025, 12, 1))

        changes = cycle_service.refresh_statuses(today=date(2026, 1, 15))

        assert len(changes) == 1
        assert changes[0].id == created.id
        assert changes[0].old_status == "planning"
        assert changes[0].new_status == "active"
        assert changes[0].reason == "Cycle started"
        assert cycle_service.get_cycle(created.id).status == "active"

        assert cycle_service.refresh_statuses(today=date(2026, 1, 16)) == []

        ended = cycle_service.refresh_statuses(today=date(2026, 4, 1))
        assert ended[0].reason == "Cycle ended"

    def test_delete_cycle_keeps_objectives(self, cycle_service, test_db, q1):
        cycle = cycle_service.create_cycle(q1)
        objective_service = ObjectiveService(test_db)
        objective = objective_service.create_objective(ObjectiveCreate(title="Survivor", cycle_id=cycle.id))

        assert cycle_service.delete_cycle(cycle.id) is True

        assert objective_service.get_objective(objective.id).cycle_id is None
        with pytest.raises(NotFoundError):
            cycle_service.get_cycle(cycle.id)
