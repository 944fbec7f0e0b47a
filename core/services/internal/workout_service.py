import base64
from typing import Any

from loguru import logger
from pydantic import ValidationError

from core.exceptions import MalformedResponseError
from core.schemas import ResultSubmission, WorkoutPage, WorkoutSuggestion
from core.services.internal.api_client import read_json
from core.services.internal.session_manager import SessionManager


class WorkoutService:
    def __init__(self, session: SessionManager) -> None:
        self._session = session

    async def fetch_page(self, page: int, page_size: int) -> WorkoutPage:
        response = await self._session.authenticated_request(
            "get", "/workouts", params={"page": page, "page_size": page_size}
        )
        data = read_json(response)
        try:
            return WorkoutPage.from_payload(data, page=page, page_size=page_size)
        except ValueError as exc:
            logger.error(f"Unexpected workouts payload for page={page}: {exc}")
            raise MalformedResponseError(f"Invalid workouts payload for page {page}", str(exc)) from exc

    async def suggest_scale(self, image: bytes) -> WorkoutSuggestion:
        encoded = base64.b64encode(image).decode("ascii")
        response = await self._session.authenticated_request("post", "/suggest-scale", json=encoded)
        data: Any = read_json(response)
        if not isinstance(data, dict):
            raise MalformedResponseError("Photo analysis returned no object", repr(data)[:200])
        try:
            return WorkoutSuggestion.from_analysis(data)
        except ValidationError as exc:
            raise MalformedResponseError("Photo analysis payload is incomplete", str(exc)) from exc

    async def submit_result(self, submission: ResultSubmission) -> None:
        response = await self._session.authenticated_request(
            "post", "/submit-result", json=submission.to_payload()
        )
        read_json(response)
        logger.info(f"Result submitted for workout_id={submission.workout_id}")
