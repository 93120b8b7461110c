import pytest
from datetime import date

from okr_app.services import ObjectiveService, CycleService, KeyResultService
from okr_app.schemas import (
    ObjectiveCreate, ObjectiveUpdate, ObjectiveOut, ObjectiveDetail, KRCreate, KROut,
    CycleCreate, CheckInCreate, InitiativeCreate,
)
from okr_app.exceptions import NotFoundError, ValidationError, InvalidMeasurableError


class TestObjectiveService:
    """Test ObjectiveService business logic."""

    @pytest.fixture
    def objective_service(self, test_db):
        return ObjectiveService(test_db)

    @pytest.fixture
    def past_cycle(self, test_db):
        """A cycle that ended long ago, so time progress is 100%."""
        return CycleService(test_db).create_cycle(
            CycleCreate(name="Q1 2020", start_date=date(2020, 1, 1), end_date=date(2020, 3, 31))
        )

    def test_create_objective_success(self, objective_service, sample_objective_data):
        result = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))

        assert isinstance(result, ObjectiveOut)
        assert result.title == "Grow the customer base"
        assert result.status == "not_started"
        assert result.id.startswith("obj_")

    def test_create_objective_empty_title_fails(self, objective_service):
        with pytest.raises(ValidationError) as exc_info:
            objective_service.create_objective(ObjectiveCreate(title="   "))

        assert "Objective title cannot be empty" in str(exc_info.value)

    def test_create_objective_unknown_cycle_fails(self, objective_service):
        with pytest.raises(NotFoundError):
            objective_service.create_objective(ObjectiveCreate(title="Orphan", cycle_id="cycle_missing"))

    def test_get_objective_not_found(self, objective_service):
        with pytest.raises(NotFoundError) as exc_info:
            objective_service.get_objective("obj_missing")

        assert "Objective with id 'obj_missing' not found" in str(exc_info.value)

    def test_list_objectives_limit_validation(self, objective_service):
        with pytest.raises(ValidationError) as exc_info:
            objective_service.list_objectives(limit=1001)

        assert "Limit cannot exceed 1000" in str(exc_info.value)

    def test_list_objectives_by_cycle(self, objective_service, past_cycle):
        objective_service.create_objective(ObjectiveCreate(title="In cycle", cycle_id=past_cycle.id))
        objective_service.create_objective(ObjectiveCreate(title="No cycle"))

        in_cycle = objective_service.list_objectives(cycle_id=past_cycle.id)
        assert [o.title for o in in_cycle] == ["In cycle"]
        assert len(objective_service.list_objectives()) == 2

    def test_update_objective_status(self, objective_service, sample_objective_data):
        created = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))

        updated = objective_service.update_objective(created.id, ObjectiveUpdate(status="paused"))

        assert updated.status == "paused"
        assert updated.title == sample_objective_data["title"]

    def test_update_objective_self_parent_fails(self, objective_service):
        created = objective_service.create_objective(ObjectiveCreate(title="Loop"))

        with pytest.raises(ValidationError) as exc_info:
            objective_service.update_objective(created.id, ObjectiveUpdate(parent_id=created.id))

        assert "cannot be its own parent" in str(exc_info.value)

    def test_update_objective_hierarchy_cycle_fails(self, objective_service):
        parent = objective_service.create_objective(ObjectiveCreate(title="Parent"))
        child = objective_service.create_objective(ObjectiveCreate(title="Child", parent_id=parent.id))

        with pytest.raises(ValidationError) as exc_info:
            objective_service.update_objective(parent.id, ObjectiveUpdate(parent_id=child.id))

        assert "would create a cycle" in str(exc_info.value)

    def test_delete_objective(self, objective_service, sample_objective_data, sample_kr_data):
        created = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))
        objective_service.create_key_result(created.id, KRCreate(**sample_kr_data))

        assert objective_service.delete_objective(created.id) is True

        with pytest.raises(NotFoundError):
            objective_service.get_objective(created.id)

    def test_delete_objective_keeps_children_as_roots(self, objective_service, test_db, sample_kr_data):
        parent = objective_service.create_objective(ObjectiveCreate(title="Company"))
        child = objective_service.create_objective(ObjectiveCreate(title="Team", parent_id=parent.id))
        kr = objective_service.create_key_result(parent.id, KRCreate(**sample_kr_data))

        objective_service.delete_objective(parent.id)

        assert objective_service.get_objective(child.id).parent_id is None
        assert [node.title for node in objective_service.get_tree()] == ["Team"]
        with pytest.raises(NotFoundError):
            KeyResultService(test_db).get_key_result(kr.id)

    def test_update_objective_null_status_fails(self, objective_service, sample_objective_data):
        created = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))

        with pytest.raises(ValidationError) as exc_info:
            objective_service.update_objective(created.id, ObjectiveUpdate(status=None))

        assert "status cannot be null" in str(exc_info.value)
        assert objective_service.get_objective(created.id).status == "not_started"

    def test_update_objective_clears_parent(self, objective_service):
        parent = objective_service.create_objective(ObjectiveCreate(title="Company"))
        child = objective_service.create_objective(ObjectiveCreate(title="Team", parent_id=parent.id))

        updated = objective_service.update_objective(child.id, ObjectiveUpdate(parent_id=None))

        assert updated.parent_id is None

    def test_create_key_result_progress(self, objective_service, sample_objective_data, sample_kr_data):
        objective = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))

        kr = objective_service.create_key_result(objective.id, KRCreate(**sample_kr_data))

        assert isinstance(kr, KROut)
        assert kr.id.startswith("kr_")
        assert kr.progress.percentage == 25
        assert kr.progress.status_label == "behind"
        assert kr.progress.timeline_status is None
        assert kr.display_target == "100"

    def test_create_key_result_defaults_current_to_base(self, objective_service, sample_objective_data):
        objective = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))

        kr = objective_service.create_key_result(objective.id, KRCreate(
            title="Cut churn", key_result_type="decrease_to", base_value=20, target_value=5, unit="percentage",
        ))

        assert kr.current_value == 20
        assert kr.progress.percentage == 0
        assert kr.progress.status_label == "not_started"
        assert kr.display_current == "20%"

    def test_create_key_result_invalid_config(self, objective_service, sample_objective_data):
        objective = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))

        with pytest.raises(InvalidMeasurableError) as exc_info:
            objective_service.create_key_result(objective.id, KRCreate(
                title="Backwards", key_result_type="increase_to", base_value=100, target_value=50,
            ))

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["type"] == "increase_to"

    def test_create_key_result_unknown_objective(self, objective_service, sample_kr_data):
        with pytest.raises(NotFoundError):
            objective_service.create_key_result("obj_missing", KRCreate(**sample_kr_data))

    def test_objective_detail_rollup(self, objective_service, test_db, past_cycle):
        objective = objective_service.create_objective(ObjectiveCreate(title="Ship v2", cycle_id=past_cycle.id))
        objective_service.create_key_result(objective.id, KRCreate(
            title="Features", base_value=0, current_value=100, target_value=100,
        ))
        objective_service.create_key_result(objective.id, KRCreate(
            title="Launch", key_result_type="achieve_or_not", current_value=0, target_value=1,
        ))

        detail = objective_service.get_objective_detail(objective.id)

        assert isinstance(detail, ObjectiveDetail)
        assert detail.overall_progress == 50
        assert detail.time_progress == 100
        assert detail.objective_status == "partially_achieved"
        assert [kr.progress.timeline_status for kr in detail.key_results] == ["completed", "behind"]

    def test_objective_detail_without_key_results(self, objective_service, sample_objective_data):
        objective = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))

        detail = objective_service.get_objective_detail(objective.id)

        assert detail.overall_progress == 0
        assert detail.objective_status == "not_started"
        assert detail.key_results == []

    def test_paused_objective_status_wins(self, objective_service, past_cycle, sample_kr_data):
        objective = objective_service.create_objective(ObjectiveCreate(title="On hold", cycle_id=past_cycle.id))
        objective_service.create_key_result(objective.id, KRCreate(**sample_kr_data))
        objective_service.update_objective(objective.id, ObjectiveUpdate(status="paused"))

        assert objective_service.get_objective_detail(objective.id).objective_status == "paused"

    def test_tree_nests_children_with_initiative_scores(self, objective_service, test_db, sample_kr_data):
        parent = objective_service.create_objective(ObjectiveCreate(title="Company"))
        child = objective_service.create_objective(ObjectiveCreate(title="Team", parent_id=parent.id))
        kr = objective_service.create_key_result(child.id, KRCreate(**sample_kr_data))
        KeyResultService(test_db).create_initiative(kr.id, InitiativeCreate(title="Referral program"))

        tree = objective_service.get_tree()

        assert [node.title for node in tree] == ["Company"]
        assert [node.title for node in tree[0].children] == ["Team"]
        team = tree[0].children[0]
        assert team.overall_progress == 25
        assert team.key_results[0].initiatives[0].status_label == "no_metrics"

    def test_check_in_changes_detail(self, objective_service, test_db, sample_objective_data, sample_kr_data):
        objective = objective_service.create_objective(ObjectiveCreate(**sample_objective_data))
        kr = objective_service.create_key_result(objective.id, KRCreate(**sample_kr_data))

        KeyResultService(test_db).check_in(kr.id, CheckInCreate(value=80))
        detail = objective_service.get_objective_detail(objective.id)

        assert detail.key_results[0].progress.percentage == 80
        assert detail.key_results[0].progress.status_label == "on_track"
