from typing import List
from sqlalchemy.orm import Session

from okr_app.repositories import KeyResultRepository, InitiativeRepository
from okr_app.repositories.base import enum_value
from okr_app.schemas import (
    KRUpdate, KROut, CheckInCreate, CheckInOut, CheckInResult,
    InitiativeCreate, InitiativeOut,
)
from .base import BaseService


class KeyResultService(BaseService):
    """Service for key results: edits, check-ins and initiatives."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.kr_repo = KeyResultRepository(db)
        self.initiative_repo = InitiativeRepository(db)

    def _get(self, kr_id: str):
        return self.require(self.kr_repo.get(kr_id), "Key result", kr_id)

    def get_key_result(self, kr_id: str) -> KROut:
        self.logger.debug(f"Fetching key result: {kr_id}")
        kr = self._get(kr_id)
        return self.kr_repo.to_schema(kr, cycle=kr.objective.cycle)

    def update_key_result(self, kr_id: str, kr_update: KRUpdate) -> KROut:
        """Update a key result definition. The merged configuration must stay valid."""
        try:
            self.logger.info(f"Updating key result: {kr_id}")

            kr = self._get(kr_id)
            changes = kr_update.model_dump(exclude_unset=True)
            self.require_present(changes, ("key_result_type", "target_value", "unit"))
            if "title" in changes:
                self.require_text(changes["title"], "Key result title")

            self.check_measurable(
                changes.get("key_result_type", enum_value(kr.key_result_type)),
                changes.get("target_value", kr.target_value),
                changes.get("base_value", kr.base_value),
            )

            kr = self.kr_repo.update(kr, changes)
            self.commit()

            self.logger.info(f"Key result updated successfully: {kr_id}")
            return self.kr_repo.to_schema(kr, cycle=kr.objective.cycle)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to update key result {kr_id}: {str(e)}")
            raise

    def delete_key_result(self, kr_id: str) -> bool:
        try:
            self.logger.info(f"Deleting key result: {kr_id}")
            self._get(kr_id)

            deleted = self.kr_repo.delete(kr_id)
            self.commit()

            self.logger.info(f"Key result deleted successfully: {kr_id}")
            return deleted

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to delete key result {kr_id}: {str(e)}")
            raise

    def check_in(self, kr_id: str, check_in_in: CheckInCreate) -> CheckInResult:
        """Record a new observed value for a key result."""
        try:
            self.logger.info(f"Recording check-in for key result: {kr_id}")

            kr = self._get(kr_id)
            previous = kr.current_value
            check_in = self.kr_repo.add_check_in(kr, check_in_in.value, check_in_in.notes)
            self.commit()

            kr_out = self.kr_repo.to_schema(kr, cycle=kr.objective.cycle)
            self.logger.info(
                f"Check-in {check_in.id} moved key result {kr_id} from {previous} to {check_in.value} "
                f"({kr_out.progress.percentage}%)"
            )
            return CheckInResult(
                check_in=self.kr_repo.check_in_to_schema(check_in),
                key_result=kr_out,
            )

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to record check-in for key result {kr_id}: {str(e)}")
            raise

    def list_check_ins(self, kr_id: str) -> List[CheckInOut]:
        self.logger.debug(f"Listing check-ins for key result: {kr_id}")
        self._get(kr_id)
        return [self.kr_repo.check_in_to_schema(c) for c in self.kr_repo.list_check_ins(kr_id)]

    def create_initiative(self, kr_id: str, initiative_in: InitiativeCreate) -> InitiativeOut:
        """Create an initiative under a key result."""
        try:
            self.logger.info(f"Creating initiative for key result: {kr_id}")

            self._get(kr_id)
            self.require_text(initiative_in.title, "Initiative title")

            initiative = self.initiative_repo.create(initiative_in, key_result_id=kr_id)
            self.commit()

            self.logger.info(f"Initiative created successfully: {initiative.id}")
            return self.initiative_repo.to_schema(initiative)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to create initiative for key result {kr_id}: {str(e)}")
            raise

    def list_initiatives(self, kr_id: str) -> List[InitiativeOut]:
        kr = self._get(kr_id)
        return [self.initiative_repo.to_schema(i) for i in kr.initiatives]
