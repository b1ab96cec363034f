"""
ESI client used to turn character IDs into names and back.

Lookups are cached for the lifetime of the client; one client is created per
CLI command, so the caches are never evicted.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Iterable, Optional

import requests

from evesettings.core.config import (
    ESI_BASE_URL,
    ESI_MAX_CONCURRENCY,
    ESI_TIMEOUT,
    ESI_USER_AGENT,
)
from evesettings.core.errors import (
    CharacterNotFoundError,
    ESIDecodeError,
    ESIRemoteError,
    ESITransportError,
    EveSettingsError,
)
from evesettings.core.settings import FALLBACK_NAME_TEMPLATE, MAX_CHARACTER_ID
from evesettings.esi.schemas import CharacterInfo, UniverseIDsResult
from evesettings.utils.locks import ReadWriteLock

logger = logging.getLogger(__name__)


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class ESIClient:
    """ESI API client with an in-memory cache and bounded batch lookups."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: ESI root, e.g. https://esi.evetech.net/latest
            timeout: Seconds allowed for each request
            max_concurrency: Most requests in flight during a batch lookup
            session: HTTP session to use; a new one is created if omitted
        """
        self._base_url = (base_url or ESI_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else ESI_TIMEOUT
        self._max_concurrency = max_concurrency or ESI_MAX_CONCURRENCY

        if session is None:
            session = requests.Session()
            session.headers.update({
                "User-Agent": ESI_USER_AGENT,
                "Accept": "application/json",
            })
        self._session = session

        self._cache: Dict[int, CharacterInfo] = {}
        self._name_cache: Dict[str, int] = {}
        self._cache_lock = ReadWriteLock()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "ESIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, target: Any, **kwargs) -> requests.Response:
        url = f"{self._base_url}/{path}"
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.Timeout as e:
            raise ESITransportError(f"request for '{target}' timed out after {self._timeout}s", target) from e
        except requests.RequestException as e:
            raise ESITransportError(f"failed to reach ESI for '{target}': {e}", target) from e

    def get_character(self, character_id: int) -> CharacterInfo:
        """Fetch public character information by ID.

        Raises:
            CharacterNotFoundError: ESI does not know the ID
            ESIRemoteError: ESI answered with another non-success status
            ESITransportError: ESI could not be reached in time
            ESIDecodeError: The response body was not valid character info
        """
        with self._cache_lock.read_locked():
            info = self._cache.get(character_id)
        if info is not None:
            logger.debug(f"Cache hit for character {character_id}")
            return info

        logger.debug(f"Fetching character {character_id} from ESI")
        response = self._request("GET", f"characters/{character_id}/", target=character_id)

        if response.status_code == 404:
            raise CharacterNotFoundError(character_id)
        if not _is_success(response.status_code):
            raise ESIRemoteError(response.status_code, character_id)

        try:
            info = CharacterInfo.model_validate(response.json())
        except ValueError as e:
            raise ESIDecodeError(f"failed to decode character info for {character_id}: {e}", character_id) from e

        with self._cache_lock.write_locked():
            self._cache[character_id] = info
        return info

    def get_character_name(self, character_id: int) -> str:
        return self.get_character(character_id).name

    def get_character_name_or_fallback(self, character_id: int) -> str:
        """Return the character name, or "Unknown (<id>)" if the lookup fails. Never raises."""
        try:
            return self.get_character_name(character_id)
        except EveSettingsError as e:
            logger.debug(f"Name lookup for {character_id} failed, using fallback: {e}")
            return FALLBACK_NAME_TEMPLATE.format(character_id=character_id)

    def batch_get_character_names(self, character_ids: Iterable[int]) -> Dict[int, str]:
        """Fetch names for many characters concurrently.

        At most max_concurrency requests run at once. Every distinct ID is
        present in the result, with a fallback name where the lookup failed.
        """
        unique_ids = list(dict.fromkeys(character_ids))
        results: Dict[int, str] = {}
        if not unique_ids:
            return results

        results_lock = threading.Lock()

        def fetch(character_id: int) -> None:
            name = self.get_character_name_or_fallback(character_id)
            with results_lock:
                results[character_id] = name

        workers = min(self._max_concurrency, len(unique_ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(fetch, cid) for cid in unique_ids]
            for future in as_completed(futures):
                future.result()

        return results

    def search_character_by_name(self, name: str) -> int:
        """Look up a character ID by exact name.

        When several characters share the name, the first match ESI returns
        is used.

        Raises:
            CharacterNotFoundError: No character has this name
            ESIRemoteError: ESI answered with a non-success status
            ESITransportError: ESI could not be reached in time
            ESIDecodeError: The response body could not be decoded
        """
        with self._cache_lock.read_locked():
            character_id = self._name_cache.get(name)
        if character_id is not None:
            logger.debug(f"Cache hit for name '{name}'")
            return character_id

        logger.debug(f"Searching ESI for character '{name}'")
        response = self._request("POST", "universe/ids/", target=name, json=[name])

        if not _is_success(response.status_code):
            raise ESIRemoteError(response.status_code, name)

        try:
            result = UniverseIDsResult.model_validate(response.json())
        except ValueError as e:
            raise ESIDecodeError(f"failed to decode search result for '{name}': {e}", name) from e

        if not result.characters:
            raise CharacterNotFoundError(name)

        character_id = result.characters[0].id
        if len(result.characters) > 1:
            logger.debug(f"'{name}' matched {len(result.characters)} characters, using {character_id}")

        with self._cache_lock.write_locked():
            self._name_cache[name] = character_id
        return character_id

    def resolve_character(self, identifier: str) -> int:
        """Resolve a character identifier (ID or name) to a character ID.

        A positive integer is taken as the ID without asking ESI; anything
        else, including "0" and negative numbers, is searched by name.
        """
        text = identifier.strip()
        if text.isascii() and text.isdigit():
            value = int(text)
            if 0 < value <= MAX_CHARACTER_ID:
                return value

        return self.search_character_by_name(identifier)
