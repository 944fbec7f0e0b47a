from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from loguru import logger

from core.cache import epoch_millis
from core.exceptions import AuthenticationExpiredError, NoSessionError, PhotoAnalysisError, UserServiceError, WorkoutValidationError
from core.infra.local_store import LocalStore
from core.schemas import ResultSubmission, Workout, WorkoutSuggestion
from core.services.internal.workout_service import WorkoutService


@dataclass(frozen=True)
class WorkoutOutcome:
    workout: Workout
    submitted: bool


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutFlow:
    """Photo analysis and the end-of-workout save/submit sequence."""

    def __init__(
        self,
        workout_service: WorkoutService,
        local_store: LocalStore,
        *,
        clock: Callable[[], int] = epoch_millis,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.workout_service = workout_service
        self.local_store = local_store
        self.clock = clock
        self.now = now

    async def analyze_photo(self, image: bytes) -> WorkoutSuggestion:
        if not image:
            raise WorkoutValidationError("image", "No photo captured")
        try:
            suggestion = await self.workout_service.suggest_scale(image)
        except (NoSessionError, AuthenticationExpiredError):
            raise
        except UserServiceError as exc:
            logger.error(f"Workout photo analysis failed: {exc}")
            raise PhotoAnalysisError(str(exc)) from exc
        logger.info(f"Photo analyzed, workout_id={suggestion.workout_id}")
        return suggestion

    async def end_workout(
        self,
        suggestion: WorkoutSuggestion,
        result: str,
        user_feedback: str | None = None,
    ) -> WorkoutOutcome:
        if not result or not result.strip():
            raise WorkoutValidationError("result", "Please enter your workout result")

        workout = Workout(
            id=str(self.clock()),
            date=self.now().isoformat(),
            description=suggestion.workout,
            weights=suggestion.suggested_weights,
            result=result,
            goal=suggestion.goal,
            strategy=suggestion.strategy,
            user_feedback=user_feedback or None,
        )
        await self.local_store.save_workout(workout)

        if suggestion.workout_id is None:
            logger.debug(f"Workout {workout.id} has no backend id, skipping result submission")
            return WorkoutOutcome(workout, submitted=False)

        submission = ResultSubmission(workout_id=suggestion.workout_id, result=result, user_feedback=user_feedback)
        try:
            await self.workout_service.submit_result(submission)
        except (NoSessionError, AuthenticationExpiredError):
            raise
        except UserServiceError as exc:
            logger.error(f"Result submission failed for workout_id={suggestion.workout_id}: {exc}")
            return WorkoutOutcome(workout, submitted=False)
        return WorkoutOutcome(workout, submitted=True)
