"""Single-shot ingredient substitute lookup.

States: IDLE -> LOADING -> {FOUND, FAILED}. A FOUND result with no
substitutes is its own render branch, separate from FAILED and from the
never-searched IDLE screen.
"""

from enum import Enum
from typing import Optional

from eatmate.api.spoonacular import SpoonacularClient
from eatmate.controllers.base import ScreenController
from eatmate.models.models import SubstituteResult
from eatmate.prompts.prompts import SUBSTITUTE_EXAMPLES, SUBSTITUTE_FAILED_MESSAGE


class LookupState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    FOUND = "found"
    FAILED = "failed"


class SubstituteView(str, Enum):
    """What the screen renders below the input."""

    IDLE = "idle"
    LOADING = "loading"
    SUBSTITUTES = "substitutes"
    NO_SUBSTITUTES = "no_substitutes"
    ERROR = "error"


class SubstituteController(ScreenController[LookupState]):
    screen_name = "substitutes"

    examples = SUBSTITUTE_EXAMPLES

    def __init__(self, client: SpoonacularClient) -> None:
        super().__init__()
        self._client = client
        self.state = LookupState.IDLE
        self.result: Optional[SubstituteResult] = None
        self.error_message: Optional[str] = None

    @property
    def view(self) -> SubstituteView:
        if self.state is LookupState.LOADING:
            return SubstituteView.LOADING
        if self.state is LookupState.FAILED:
            return SubstituteView.ERROR
        if self.state is LookupState.FOUND and self.result is not None:
            if self.result.substitutes:
                return SubstituteView.SUBSTITUTES
            return SubstituteView.NO_SUBSTITUTES
        return SubstituteView.IDLE

    def can_lookup(self, name: str) -> bool:
        return bool(name.strip()) and self.state is not LookupState.LOADING and not self.closed

    async def lookup(self, name: str) -> bool:
        """Look up substitutes for ``name``.

        Returns:
            False if the name was blank or the screen is closed.
        """
        ingredient = name.strip()
        if not ingredient or self.closed:
            return False

        request_id = self._next_request()
        self.error_message = None
        self._set_state(LookupState.LOADING)

        try:
            result = await self._client.get_ingredient_substitutes(ingredient)
        except Exception as e:
            if not self._is_current(request_id):
                return True
            self._log("error", f"Error getting substitutes for {ingredient!r}: {e}", request_id)
            self.result = None
            self.error_message = SUBSTITUTE_FAILED_MESSAGE
            self._set_state(LookupState.FAILED)
            return True

        if not self._is_current(request_id):
            return True

        self.result = result
        self._log("info", f"Found {len(result.substitutes)} substitutes for {ingredient!r}", request_id)
        self._set_state(LookupState.FOUND)
        return True

    def _set_state(self, state: LookupState) -> None:
        self.state = state
        self._notify(state)
