"""
Profile Store
=============
Long-term memory: a small key/value profile of the user that survives
across conversations and process restarts.

Flow per turn (driven by the chat loop, after the reply is printed):

    extract_and_merge(user_message)
        → ask the model which facts are worth remembering (JSON object)
        → merge non-blank values into the profile
        → save() if anything changed

Persistence goes through a repository object so tests can swap the file for
a fake. The on-disk document is:

    {"timestamp": "<iso8601>", "profile": {"name": "Alice", ...}}

Nothing here raises on bad model output or a bad file. Failures are logged
and the profile is left as it was.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_FILE = "ai_memory_profile.json"
MIN_MESSAGE_LENGTH = 3

Completer = Callable[[str], Awaitable[str]]

EXTRACTION_PROMPT = """Analyze this user message and extract any personal information worth remembering for future conversations.

User message: "{user_message}"

Current profile: {current_profile}

Extract ONLY factual information about the user (name, age, profession, preferences, hobbies, etc.).
Return as JSON format: {{"key": "value", "key2": "value2"}}
If nothing important, return empty: {{}}

Examples:
- "My name is Alice" → {{"name": "Alice"}}
- "I'm a teacher" → {{"profession": "teacher"}}
- "I love pizza and my favorite color is blue" → {{"favorite_food": "pizza", "favorite_color": "blue"}}
- "How are you?" → {{}}

Extract only NEW or UPDATED information. Be concise with values.
JSON only, no explanation:"""


class JsonFileProfileRepository:
    """Reads and writes the profile document as indented UTF-8 JSON."""

    def __init__(self, path: str | Path = DEFAULT_PROFILE_FILE):
        self.path = Path(path)

    def read(self) -> dict | None:
        """Return the parsed document, or None if the file doesn't exist."""
        if not self.path.exists():
            return None
        with self.path.open(encoding="utf-8") as f:
            return json.load(f)

    def write(self, document: dict) -> None:
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)


def parse_facts(reply: str) -> dict[str, str]:
    """
    Pull a flat {key: value} dict out of a model reply.

    The JSON object is cut from the first "{" to the last "}", so prose or
    code fences around it are ignored. Non-string values are stringified and
    blank values dropped. Raises ValueError if no object can be parsed.
    """
    start, end = reply.find("{"), reply.rfind("}")
    if start == -1 or end < start:
        raise ValueError("no JSON object in reply")

    data = json.loads(reply[start:end + 1])
    if not isinstance(data, dict):
        raise ValueError("reply JSON is not an object")

    facts = {}
    for key, value in data.items():
        if value is None:
            continue
        text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        if text.strip():
            facts[str(key)] = text
    return facts


class ProfileStore:
    """
    User profile with model-driven extraction and file persistence.

    Usage:
        store = ProfileStore(JsonFileProfileRepository(), complete)
        store.load()
        await store.extract_and_merge("My name is Alice")
        store.context()     # block for the system prompt
    """

    def __init__(self, repository: JsonFileProfileRepository, complete: Completer):
        self._repository = repository
        self._complete = complete
        self._profile: dict[str, str] = {}

    @property
    def profile(self) -> dict[str, str]:
        return dict(self._profile)

    def load(self) -> dict[str, str]:
        """Replace the in-memory profile with what the repository holds."""
        try:
            document = self._repository.read()
        except (OSError, ValueError) as exc:
            logger.warning("[memory] Could not load profile: %s", exc)
            self._profile = {}
            return self.profile

        if document is None:
            logger.info("[memory] No existing profile")
            self._profile = {}
        elif isinstance(document, dict) and isinstance(document.get("profile"), dict):
            self._profile = {str(k): str(v) for k, v in document["profile"].items()}
            logger.info("[memory] Loaded %d fact(s)", len(self._profile))
        else:
            logger.warning("[memory] Profile document has unexpected shape; starting empty")
            self._profile = {}
        return self.profile

    def merge(self, facts: Mapping[str, Any]) -> dict[str, str]:
        """
        Overwrite profile keys with the given non-blank values.

        Returns the pairs that were applied. Merging the same facts twice
        leaves the profile unchanged the second time.
        """
        applied = {}
        for key, value in facts.items():
            text = "" if value is None else str(value)
            if not text.strip():
                continue
            self._profile[str(key)] = text
            applied[str(key)] = text
        return applied

    def save(self) -> bool:
        """Persist the profile with a timestamp. Returns False if the write failed."""
        document = {"timestamp": datetime.now().isoformat(), "profile": dict(self._profile)}
        try:
            self._repository.write(document)
        except OSError as exc:
            logger.warning("[memory] Could not save profile: %s", exc)
            return False
        logger.info("[memory] Saved %d fact(s)", len(self._profile))
        return True

    async def extract_and_merge(self, user_message: str) -> dict[str, str]:
        """
        Ask the model for facts in user_message and merge them.

        Messages shorter than three characters are ignored. The profile is
        only saved when at least one fact was learned.
        """
        if not user_message or not user_message.strip() or len(user_message) < MIN_MESSAGE_LENGTH:
            return self.profile

        current = json.dumps(self._profile, ensure_ascii=False) if self._profile else "{}"
        prompt = EXTRACTION_PROMPT.format(user_message=user_message, current_profile=current)

        try:
            reply = await self._complete(prompt)
            facts = parse_facts(reply)
        except Exception as exc:
            logger.warning("[memory] Extraction failed: %s", exc)
            return self.profile

        learned = self.merge(facts)
        for key, value in learned.items():
            logger.info("[memory] Learned %s = %s", key, value)
        if learned:
            self.save()
        return self.profile

    def context(self) -> str:
        """Profile block for the system prompt, or "" when nothing is known."""
        if not self._profile:
            return ""
        lines = "\n".join(f"- {key}: {value}" for key, value in self._profile.items())
        return (
            f"[USER PROFILE - LONG-TERM MEMORY]:\n{lines}\n\n"
            "IMPORTANT: This is information about the user that persists across all conversations.\n"
            "Reference this naturally when relevant, and be enthusiastic when recognizing the user!"
        )
