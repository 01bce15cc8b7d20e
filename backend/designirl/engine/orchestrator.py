"""WorkflowOrchestrator: the single owner of a session's workflow state.

State only changes through the named operations below. Every async operation
takes a fresh request token before its first await and applies its result
only if that token is still the latest. Starting another async operation,
``start_over``, ``change_credentials`` and a forced credential re-entry all
supersede the token, so the most recent request wins and a response that
resolves late is dropped instead of overwriting newer state.

    Welcome → CredentialEntry → PathwaySelection → Search
      Generate: Search → Analyzing → Generating → Editing
      Edit:     Search → Editing
      TryOn:    Search → TryOnSetup → Editing  (add_more_inspiration: TryOnSetup → Search)
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from typing import Any

from designirl.config import settings
from designirl.engine.selection import SelectionSet
from designirl.engine.taste import synthesize_profile
from designirl.errors import (
    CredentialInvalid,
    CredentialMissing,
    DesignIRLError,
    FetchFailure,
    InvalidTransition,
    NoSuccessfulAnalyses,
    ValidationFailure,
)
from designirl.models.domain import (
    AestheticDescription,
    Credentials,
    EncodedImage,
    ImageRecord,
    Pathway,
    TasteProfile,
    WorkflowState,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

GENERATE_MESSAGES = (
    "Brewing up your design...",
    "Arranging the virtual furniture...",
    "Applying the color palette...",
    "Adjusting the lighting...",
    "Almost there, adding the final touches...",
)

EDIT_MESSAGES = (
    "Understanding your changes...",
    "Repainting the pixels...",
    "Making the magic happen...",
    "Finalizing the new look...",
)

# States in which the user has passed credential entry
_PAST_CREDENTIALS = frozenset({
    WorkflowState.PATHWAY_SELECTION,
    WorkflowState.SEARCH,
    WorkflowState.ANALYZING,
    WorkflowState.TRY_ON_SETUP,
    WorkflowState.GENERATING,
    WorkflowState.EDITING,
})


class WorkflowOrchestrator:
    """Client-side state machine for the generate / edit / try-on journeys."""

    def __init__(
        self,
        services: Any,
        max_selections: int | None = None,
        max_selections_limit: int | None = None,
    ) -> None:
        self._services = services
        self._max_limit = max_selections_limit or settings.max_selections_limit
        self._token = 0

        self._state = WorkflowState.WELCOME
        self._pathway: Pathway | None = None
        self._credentials: Credentials | None = None

        self._search_query = ""
        self._results: list[ImageRecord] = []
        self._continuation_token: str | None = None
        self._selection = SelectionSet(max_selections or settings.default_max_selections)

        self._profile: TasteProfile | None = None
        self._room_description = ""
        self._artifact: EncodedImage | None = None
        self._edit_prompt = ""
        self._user_image: EncodedImage | None = None
        self._try_on_prompt = ""

        self._error: DesignIRLError | None = None
        self._loading = False
        self._loading_message = ""
        self._progress: tuple[int, int] | None = None

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def pathway(self) -> Pathway | None:
        return self._pathway

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def results(self) -> list[ImageRecord]:
        return list(self._results)

    @property
    def continuation_token(self) -> str | None:
        return self._continuation_token

    @property
    def selection(self) -> list[ImageRecord]:
        return self._selection.items()

    @property
    def max_selections(self) -> int:
        return self._selection.max_size

    @property
    def profile(self) -> TasteProfile | None:
        return self._profile

    @property
    def room_description(self) -> str:
        return self._room_description

    @property
    def artifact(self) -> EncodedImage | None:
        return self._artifact

    @property
    def edit_prompt(self) -> str:
        return self._edit_prompt

    @property
    def user_image(self) -> EncodedImage | None:
        return self._user_image

    @property
    def try_on_prompt(self) -> str:
        return self._try_on_prompt

    @property
    def error(self) -> str | None:
        return self._error.message if self._error else None

    @property
    def error_kind(self) -> str | None:
        return self._error.kind if self._error else None

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def loading_message(self) -> str:
        return self._loading_message

    @property
    def progress(self) -> tuple[int, int] | None:
        return self._progress

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    # Derived predicates

    @property
    def has_credentials(self) -> bool:
        return self._credentials is not None

    @property
    def can_change_credentials(self) -> bool:
        return self._state in _PAST_CREDENTIALS

    @property
    def can_start_over(self) -> bool:
        return self.has_credentials

    @property
    def is_max_selected(self) -> bool:
        return self._selection.is_full

    @property
    def can_select(self) -> bool:
        return self._selection.radio or not self._selection.is_full

    @property
    def has_artifact(self) -> bool:
        return self._artifact is not None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, operation: str, *states: WorkflowState) -> None:
        if self._state not in states:
            raise InvalidTransition(f"Cannot {operation} from state '{self._state.value}'")

    def _require_pathway(self, operation: str, pathway: Pathway) -> None:
        if self._pathway is not pathway:
            current = self._pathway.value if self._pathway else "none"
            raise InvalidTransition(f"Cannot {operation} on the '{current}' pathway")

    def _keys(self) -> Credentials:
        if self._credentials is None:
            raise CredentialMissing("Please enter both Scrape Creators and Gemini API keys.")
        return self._credentials

    def _begin(self, message: str) -> int:
        """Start a request. Any request still in flight becomes stale."""
        self._token += 1
        self._error = None
        self._loading = True
        self._loading_message = message
        self._progress = None
        return self._token

    def _is_current(self, token: int) -> bool:
        return token == self._token

    def _rotate_messages(self, token: int, messages: tuple[str, ...]) -> asyncio.Task:
        """Cycle ``messages`` as the loading message while ``token`` is current."""

        async def tick() -> None:
            for message in itertools.islice(itertools.cycle(messages), 1, None):
                await asyncio.sleep(settings.loading_message_interval_s)
                if not (self._is_current(token) and self._loading):
                    return
                self._loading_message = message

        return asyncio.create_task(tick())

    def _finish(self, token: int) -> None:
        if self._is_current(token):
            self._loading = False
            self._loading_message = ""
            self._progress = None

    def _invalidate(self) -> None:
        self._token += 1
        self._loading = False
        self._loading_message = ""
        self._progress = None

    def _force_credential_entry(self, error: CredentialInvalid) -> None:
        logger.info("Search backend rejected the API key, returning to credential entry")
        self._invalidate()
        self._credentials = None
        self._results = []
        self._continuation_token = None
        self._state = WorkflowState.CREDENTIAL_ENTRY
        self._error = error

    def _fail(self, token: int, exc: Exception, fallback: str) -> bool:
        """Record ``exc`` as the current error. Returns False if the result is stale."""
        if not self._is_current(token):
            logger.info("Discarding stale failure: %s", exc)
            return False
        if isinstance(exc, CredentialInvalid):
            self._force_credential_entry(exc)
        elif isinstance(exc, DesignIRLError):
            self._error = exc
        else:
            logger.error("%s (%s: %s)", fallback, type(exc).__name__, exc)
            self._error = DesignIRLError(fallback)
        return True

    def _find_record(self, image_id: str) -> ImageRecord | None:
        for record in self._results:
            if record.id == image_id:
                return record
        for record in self._selection:
            if record.id == image_id:
                return record
        return None

    # ------------------------------------------------------------------
    # Entry, credentials, pathway
    # ------------------------------------------------------------------

    def begin(self) -> None:
        self._require("begin", WorkflowState.WELCOME)
        self._state = WorkflowState.CREDENTIAL_ENTRY

    def submit_credentials(self, search_api_key: str, gemini_api_key: str) -> None:
        self._require("submit credentials", WorkflowState.CREDENTIAL_ENTRY)
        search_api_key = (search_api_key or "").strip()
        gemini_api_key = (gemini_api_key or "").strip()
        if not search_api_key or not gemini_api_key:
            self._error = CredentialMissing("Please enter both Scrape Creators and Gemini API keys.")
            return
        self._credentials = Credentials(search_api_key=search_api_key, gemini_api_key=gemini_api_key)
        self._error = None
        self._state = WorkflowState.PATHWAY_SELECTION

    def change_credentials(self) -> None:
        """Demand fresh API keys. Session data is kept."""
        if not self.can_change_credentials:
            raise InvalidTransition(f"Cannot change credentials from state '{self._state.value}'")
        self._invalidate()
        self._credentials = None
        self._error = None
        self._state = WorkflowState.CREDENTIAL_ENTRY

    def choose_pathway(self, pathway: Pathway) -> None:
        self._require("choose a pathway", WorkflowState.PATHWAY_SELECTION)
        if pathway is not self._pathway:
            self._selection.clear()
        self._pathway = pathway
        self._selection.radio = pathway is Pathway.EDIT
        self._error = None
        self._state = WorkflowState.SEARCH

    def start_over(self) -> None:
        """Back to PathwaySelection, dropping everything downstream of the credentials."""
        if not self.can_start_over:
            raise InvalidTransition("Cannot start over before credentials are entered")
        self._invalidate()
        self._pathway = None
        self._selection.clear()
        self._selection.radio = False
        self._search_query = ""
        self._results = []
        self._continuation_token = None
        self._profile = None
        self._room_description = ""
        self._artifact = None
        self._edit_prompt = ""
        self._user_image = None
        self._try_on_prompt = ""
        self._error = None
        self._state = WorkflowState.PATHWAY_SELECTION

    # ------------------------------------------------------------------
    # Search and selection
    # ------------------------------------------------------------------

    async def search(self, query: str, load_more: bool = False) -> None:
        """Run a fresh search, or append the next page when ``load_more``."""
        self._require("search", WorkflowState.SEARCH)
        query = (query or "").strip()
        if not query:
            self._error = ValidationFailure("Please enter a search query.")
            return
        if load_more and self._continuation_token is None:
            self._error = ValidationFailure("There are no more results to load.")
            return

        cursor = self._continuation_token if load_more else None
        keys = self._keys()
        token = self._begin("Searching for inspiration...")
        self._search_query = query
        try:
            page = await self._services.search(query, keys.search_api_key, cursor)
        except Exception as e:
            self._fail(token, e, "Failed to fetch pins. Please try again.")
            return
        else:
            if not self._is_current(token):
                logger.info("Discarding stale search results for %r", query)
                return
            if load_more:
                known = {r.id for r in self._results}
                self._results.extend(r for r in page.items if r.id not in known)
            else:
                self._results = list(page.items)
                if not page.items:
                    self._error = ValidationFailure("No results found. Try a different keyword.")
            self._continuation_token = page.continuation_token
        finally:
            self._finish(token)

    def reset_search(self) -> None:
        self._require("reset the search", WorkflowState.SEARCH)
        self._results = []
        self._selection.clear()
        self._continuation_token = None
        self._error = None

    def toggle_selection(self, image_id: str) -> bool:
        """Click on an image. Returns True if the selection changed."""
        self._require("change the selection", WorkflowState.SEARCH)
        record = self._find_record(image_id)
        if record is None:
            self._error = ValidationFailure("That image is no longer available.")
            return False
        return self._selection.toggle(record)

    def set_max_selections(self, value: int) -> None:
        if not 1 <= value <= self._max_limit:
            self._error = ValidationFailure(f"You can select between 1 and {self._max_limit} images.")
            return
        self._selection.max_size = value

    # ------------------------------------------------------------------
    # Generate pathway
    # ------------------------------------------------------------------

    async def analyze_taste(self, on_progress: ProgressCallback | None = None) -> None:
        """Analyze every selected image in order, then synthesize the profile.

        Per-image failures are logged and skipped. If none succeed the step
        fails with NoSuccessfulAnalyses and the workflow returns to Search.
        """
        self._require("analyze taste", WorkflowState.SEARCH)
        self._require_pathway("analyze taste", Pathway.GENERATE)
        records = self._selection.items()
        if not records:
            self._error = ValidationFailure("Select at least one image to analyze.")
            return

        keys = self._keys()
        token = self._begin("Analyzing your inspiration...")
        self._state = WorkflowState.ANALYZING
        total = len(records)
        successes: list[AestheticDescription] = []

        try:
            for index, record in enumerate(records, start=1):
                if not self._is_current(token):
                    return
                self._loading_message = f"Analyzing {index}/{total} pins..."
                self._progress = (index, total)
                if on_progress is not None:
                    on_progress(index, total)
                try:
                    image = await self._services.fetch_image(record.image_url)
                    analysis = await self._services.analyze(image, keys.gemini_api_key)
                except Exception as e:
                    logger.warning("Could not analyze image %s, skipping: %s", record.id, e)
                    continue
                successes.append(analysis)

            if not self._is_current(token):
                logger.info("Discarding stale taste analysis (%d results)", len(successes))
                return

            if not successes:
                self._error = NoSuccessfulAnalyses(
                    "Analysis failed for all selected images. Please try different pins."
                )
                self._state = WorkflowState.SEARCH
                return

            logger.info("Analyzed %d/%d images", len(successes), total)
            self._loading_message = "Synthesizing your TasteDNA Profile..."
            self._profile = synthesize_profile(successes)
            self._state = WorkflowState.GENERATING
        finally:
            self._finish(token)

    async def generate_room(self, room_description: str) -> None:
        self._require("generate a room", WorkflowState.GENERATING)
        self._room_description = room_description or ""
        description = self._room_description.strip()
        if self._profile is None or not description:
            self._error = ValidationFailure("Please describe the space you want to create.")
            return

        keys = self._keys()
        profile = self._profile
        token = self._begin(GENERATE_MESSAGES[0])
        ticker = self._rotate_messages(token, GENERATE_MESSAGES)
        try:
            image = await self._services.generate_room(profile, description, keys.gemini_api_key)
        except Exception as e:
            self._fail(token, e, "Failed to generate mockup. Please try again.")
            return
        else:
            if not self._is_current(token):
                logger.info("Discarding stale room generation")
                return
            self._artifact = image
            self._state = WorkflowState.EDITING
        finally:
            ticker.cancel()
            self._finish(token)

    # ------------------------------------------------------------------
    # Edit pathway
    # ------------------------------------------------------------------

    async def start_editing(self) -> None:
        """Load the single selected image as the working artifact (no AI call)."""
        self._require("start editing", WorkflowState.SEARCH)
        self._require_pathway("start editing", Pathway.EDIT)
        records = self._selection.items()
        if len(records) != 1:
            self._error = ValidationFailure("Select exactly one image to edit.")
            return

        token = self._begin("Preparing image for editing...")
        try:
            image = await self._services.fetch_image(records[0].image_url)
        except Exception as e:
            logger.warning("Could not load image %s for editing: %s", records[0].id, e)
            self._fail(token, FetchFailure("Failed to load image for editing. Please try again."), "")
            return
        else:
            if not self._is_current(token):
                return
            self._artifact = image
            self._state = WorkflowState.EDITING
        finally:
            self._finish(token)

    async def edit_image(self, instruction: str) -> None:
        """Apply one edit instruction to the current artifact. Stays in Editing."""
        self._require("edit the image", WorkflowState.EDITING)
        self._edit_prompt = instruction or ""
        text = self._edit_prompt.strip()
        if self._artifact is None or not text:
            self._error = ValidationFailure("Please enter an edit instruction.")
            return

        keys = self._keys()
        current = self._artifact
        token = self._begin(EDIT_MESSAGES[0])
        ticker = self._rotate_messages(token, EDIT_MESSAGES)
        try:
            image = await self._services.edit_image(current, text, keys.gemini_api_key)
        except Exception as e:
            self._fail(token, e, "Failed to edit image. Please try again.")
            return
        else:
            if not self._is_current(token):
                logger.info("Discarding stale edit")
                return
            self._artifact = image
            self._edit_prompt = ""
        finally:
            ticker.cancel()
            self._finish(token)

    # ------------------------------------------------------------------
    # TryOn pathway
    # ------------------------------------------------------------------

    def proceed_to_try_on(self) -> None:
        self._require("set up the try-on", WorkflowState.SEARCH)
        self._require_pathway("set up the try-on", Pathway.TRY_ON)
        if not len(self._selection):
            self._error = ValidationFailure("Select at least one inspiration image.")
            return
        self._error = None
        self._state = WorkflowState.TRY_ON_SETUP

    def add_more_inspiration(self) -> None:
        """Return to Search to adjust the inspiration. Selection and photo are kept."""
        self._require("add more inspiration", WorkflowState.TRY_ON_SETUP)
        self._error = None
        self._state = WorkflowState.SEARCH

    def set_user_image(self, image: EncodedImage) -> None:
        self._require("upload a photo", WorkflowState.TRY_ON_SETUP)
        if not image.data or not image.mime_type.startswith("image/"):
            self._error = ValidationFailure("Please upload an image file.")
            return
        self._user_image = image
        self._error = None

    def clear_user_image(self) -> None:
        self._require("remove the photo", WorkflowState.TRY_ON_SETUP)
        self._user_image = None

    async def run_try_on(self, prompt: str) -> None:
        self._require("run the try-on", WorkflowState.TRY_ON_SETUP)
        self._try_on_prompt = prompt or ""
        text = self._try_on_prompt.strip()
        records = self._selection.items()
        if self._user_image is None or not records or not text:
            self._error = ValidationFailure(
                "Please upload your photo, select at least one inspiration, and provide a prompt."
            )
            return

        keys = self._keys()
        user_image = self._user_image
        token = self._begin("Preparing your virtual try-on...")
        try:
            self._loading_message = f"Converting {len(records)} inspiration images..."
            inspirations = await asyncio.gather(
                *(self._services.fetch_image(r.image_url) for r in records)
            )
            if not self._is_current(token):
                return
            self._loading_message = "Applying styles with AI..."
            image = await self._services.virtual_try_on(user_image, inspirations, text, keys.gemini_api_key)
        except Exception as e:
            self._fail(token, e, "Failed to perform virtual try-on. Please try again.")
            return
        else:
            if not self._is_current(token):
                logger.info("Discarding stale try-on result")
                return
            self._artifact = image
            self._state = WorkflowState.EDITING
        finally:
            self._finish(token)
