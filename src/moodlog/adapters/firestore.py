"""Cloud Firestore REST adapter - HTTP client for mood entries."""

import asyncio
import logging
import re
import secrets
import string
from datetime import datetime, timezone

import requests

from moodlog.config import Config
from moodlog.core.entries import MoodEntry
from moodlog.ports.mood_store import StoreError

logger = logging.getLogger(__name__)

API_BASE = "https://firestore.googleapis.com/v1"
AUTO_ID_ALPHABET = string.ascii_letters + string.digits
AUTO_ID_LENGTH = 20
TIMESTAMP_FIELD = "date"

_FRACTION_RE = re.compile(r"\.(\d+)")


def generate_id() -> str:
    """Generate a Firestore-style 20 character document id."""
    return "".join(secrets.choice(AUTO_ID_ALPHABET) for _ in range(AUTO_ID_LENGTH))


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, truncating nanoseconds to microseconds."""
    value = value.replace("Z", "+00:00")
    value = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _decode_value(value: dict):
    """Decode a Firestore typed value into a Python value."""
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return parse_timestamp(value["timestampValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return value["booleanValue"]
    return None


def document_to_entry(document: dict) -> MoodEntry:
    """Convert a Firestore document resource to a MoodEntry."""
    entry_id = document["name"].rsplit("/", 1)[-1]
    fields = {k: _decode_value(v) for k, v in document.get("fields", {}).items()}
    ts = fields.pop(TIMESTAMP_FIELD, None)
    return MoodEntry.from_document(
        entry_id,
        fields,
        timestamp=ts if isinstance(ts, datetime) else None,
    )


class FirestoreMoodStore:
    """
    Firestore REST adapter.

    Implements MoodStore protocol. Blocking HTTP calls run in a worker
    thread so the event loop stays responsive. No retries - every failure
    is raised as StoreError.
    """

    def __init__(
        self,
        project_id: str,
        api_key: str = "",
        database: str = "(default)",
        collection: str = "moodEntries",
        emulator_host: str = "",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        if not project_id:
            raise ValueError("FIRESTORE_PROJECT_ID not configured. Add it to moodlog.conf")
        self.project_id = project_id
        self.api_key = api_key
        self.database = database
        self.collection = collection
        self.timeout = timeout
        self.base_url = f"http://{emulator_host}/v1" if emulator_host else API_BASE
        self._emulator = bool(emulator_host)
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Config) -> "FirestoreMoodStore":
        return cls(
            project_id=config.firestore_project_id,
            api_key=config.firestore_api_key,
            database=config.firestore_database,
            collection=config.firestore_collection,
            emulator_host=config.firestore_emulator_host,
            timeout=config.request_timeout,
        )

    @property
    def database_path(self) -> str:
        return f"projects/{self.project_id}/databases/{self.database}"

    @property
    def documents_path(self) -> str:
        return f"{self.database_path}/documents"

    def document_name(self, entry_id: str) -> str:
        return f"{self.documents_path}/{self.collection}/{entry_id}"

    def _request(self, method: str, path: str, **kwargs) -> dict | list:
        """Make an API request, translating every failure into StoreError."""
        params = dict(kwargs.pop("params", {}))
        if self.api_key:
            params["key"] = self.api_key
        headers = {"Authorization": "Bearer owner"} if self._emulator else {}

        try:
            resp = self._session.request(
                method,
                f"{self.base_url}/{path}",
                params=params,
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as e:
            raise StoreError(f"Firestore request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise StoreError(f"Firestore request failed: {e}") from e

        if resp.status_code >= 400:
            raise StoreError(f"Firestore {method} failed ({resp.status_code}): {_error_message(resp)}")

        try:
            return resp.json() if resp.content else {}
        except ValueError as e:
            raise StoreError(f"Invalid JSON from Firestore: {e}") from e

    def _insert(self, mood: str, note: str) -> str:
        entry_id = generate_id()
        body = {
            "writes": [
                {
                    "update": {
                        "name": self.document_name(entry_id),
                        "fields": {
                            "mood": {"stringValue": mood},
                            "note": {"stringValue": note},
                        },
                    },
                    "currentDocument": {"exists": False},
                    "updateTransforms": [
                        {"fieldPath": TIMESTAMP_FIELD, "setToServerValue": "REQUEST_TIME"},
                    ],
                }
            ]
        }
        self._request("POST", f"{self.documents_path}:commit", json=body)
        logger.info(f"Created entry {entry_id} ({mood})")
        return entry_id

    def _list_ordered(self) -> list[MoodEntry]:
        body = {
            "structuredQuery": {
                "from": [{"collectionId": self.collection}],
                "orderBy": [
                    {"field": {"fieldPath": TIMESTAMP_FIELD}, "direction": "DESCENDING"},
                ],
            }
        }
        results = self._request("POST", f"{self.documents_path}:runQuery", json=body)
        if not isinstance(results, list):
            raise StoreError("Unexpected runQuery response from Firestore")

        entries = []
        for result in results:
            document = result.get("document")
            if not document:
                continue
            try:
                entries.append(document_to_entry(document))
            except (KeyError, ValueError) as e:
                raise StoreError(f"Malformed document in {self.collection}: {e}") from e
        return entries

    def _delete_by_id(self, entry_id: str) -> None:
        self._request(
            "DELETE",
            self.document_name(entry_id),
            params={"currentDocument.exists": "true"},
        )
        logger.info(f"Deleted entry {entry_id}")

    async def insert(self, mood: str, note: str) -> str:
        """Create an entry with a server-assigned timestamp. Returns its id."""
        return await asyncio.to_thread(self._insert, mood, note)

    async def list_ordered(self) -> list[MoodEntry]:
        """Fetch all entries, newest first."""
        return await asyncio.to_thread(self._list_ordered)

    async def delete_by_id(self, entry_id: str) -> None:
        """Delete an entry. Fails if it does not exist."""
        await asyncio.to_thread(self._delete_by_id, entry_id)


def _error_message(resp: requests.Response) -> str:
    """Extract the error message from a Firestore error response."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        return data.get("error", {}).get("message", resp.text)
    return resp.text
