"""DynamoDB implementation of ContentRepository."""

import logging
from typing import Any, Dict, Iterable, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

from ..domain.entities.content import (
    ActivityBreak,
    Challenge,
    Deck,
    Prompt,
    PromptPack,
    ReflectionPause,
    UnlockMetric,
)
from ..domain.errors import RepositoryUnavailable
from ..domain.interfaces.content_repository import ContentRepository

logger = logging.getLogger(__name__)


class DynamoDBContentRepository(ContentRepository):
    """DynamoDB implementation of the ContentRepository protocol.

    Each content kind lives in its own table keyed by a numeric ``id``.
    Level/intensity filters run server-side as scan filter expressions;
    ``exclude_ids`` is applied to the scanned items.
    """

    def __init__(
        self,
        prompts_table: str,
        challenges_table: str,
        activity_breaks_table: str,
        reflection_pauses_table: str,
        packs_table: str,
        region_name: str = "us-east-1",
    ):
        """Initialize the DynamoDB content repository.

        Args:
            prompts_table: Name of the prompts table.
            challenges_table: Name of the challenges table.
            activity_breaks_table: Name of the activity breaks table.
            reflection_pauses_table: Name of the reflection pauses table.
            packs_table: Name of the prompt packs table.
            region_name: AWS region name (default: us-east-1).
        """
        self.dynamodb = boto3.resource("dynamodb", region_name=region_name)
        self.prompts_table = self.dynamodb.Table(prompts_table)
        self.challenges_table = self.dynamodb.Table(challenges_table)
        self.activity_breaks_table = self.dynamodb.Table(activity_breaks_table)
        self.reflection_pauses_table = self.dynamodb.Table(reflection_pauses_table)
        self.packs_table = self.dynamodb.Table(packs_table)

    def _scan(self, table, filter_expression=None) -> list[Dict[str, Any]]:
        """Scan a whole table, following pagination.

        Raises:
            RepositoryUnavailable: If DynamoDB cannot be reached.
        """
        kwargs: Dict[str, Any] = {}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        items: list[Dict[str, Any]] = []
        try:
            while True:
                response = table.scan(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as e:
            logger.error(f"DynamoDB scan of {table.name} failed: {e}")
            raise RepositoryUnavailable(f"DynamoDB table {table.name} unavailable: {e}") from e
        return items

    def get_prompts(
        self, level: int, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Prompt]:
        excluded = set(exclude_ids)
        items = self._scan(
            self.prompts_table,
            Attr("level").eq(level) & Attr("intensity").eq(intensity),
        )
        prompts = [self._item_to_prompt(item) for item in items]
        return [p for p in prompts if p.id not in excluded]

    def get_challenges(
        self, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Challenge]:
        excluded = set(exclude_ids)
        items = self._scan(self.challenges_table, Attr("intensity").eq(intensity))
        challenges = [self._item_to_challenge(item) for item in items]
        return [c for c in challenges if c.id not in excluded]

    def get_activity_breaks(self) -> list[ActivityBreak]:
        items = self._scan(self.activity_breaks_table)
        return sorted((self._item_to_activity_break(i) for i in items), key=lambda a: a.id)

    def get_reflection_pauses(self) -> list[ReflectionPause]:
        items = self._scan(self.reflection_pauses_table)
        return sorted((self._item_to_reflection_pause(i) for i in items), key=lambda r: r.id)

    def get_packs(self) -> list[PromptPack]:
        items = self._scan(self.packs_table)
        # Scan order is arbitrary; the catalog order is by id
        return sorted((self._item_to_pack(i) for i in items), key=lambda p: p.id)

    # ===== Item conversion =====

    @staticmethod
    def _optional_int(value: Any) -> Optional[int]:
        return int(value) if value is not None else None

    def _item_to_prompt(self, item: Dict[str, Any]) -> Prompt:
        return Prompt(
            id=int(item["id"]),
            text=item["text"],
            level=int(item["level"]),
            intensity=int(item["intensity"]),
            category=item.get("category", "Icebreaker"),
            is_group=bool(item.get("is_group", False)),
            pack_id=self._optional_int(item.get("pack_id")),
        )

    def _item_to_challenge(self, item: Dict[str, Any]) -> Challenge:
        return Challenge(
            id=int(item["id"]),
            type=item.get("type", "Truth or Dare"),
            text=item["text"],
            intensity=int(item["intensity"]),
            is_custom=bool(item.get("is_custom", False)),
        )

    def _item_to_activity_break(self, item: Dict[str, Any]) -> ActivityBreak:
        return ActivityBreak(
            id=int(item["id"]),
            title=item["title"],
            description=item.get("description", ""),
            duration=int(item.get("duration", 60)),
            deck=_deck(item),
        )

    def _item_to_reflection_pause(self, item: Dict[str, Any]) -> ReflectionPause:
        return ReflectionPause(
            id=int(item["id"]),
            title=item["title"],
            description=item.get("description", ""),
            duration=int(item.get("duration", 120)),
            deck=_deck(item),
        )

    def _item_to_pack(self, item: Dict[str, Any]) -> PromptPack:
        return PromptPack(
            id=int(item["id"]),
            name=item["name"],
            description=item.get("description", ""),
            unlock_metric=UnlockMetric(item.get("unlock_metric", UnlockMetric.PROMPTS_ANSWERED.value)),
            unlock_threshold=int(item.get("unlock_threshold", 10)),
            prompt_ids=frozenset(int(pid) for pid in item.get("prompt_ids", ())),
        )


def _deck(item: Dict[str, Any]) -> Optional[Deck]:
    return Deck(item["deck"]) if item.get("deck") else None


def content_to_item(content: BaseModel) -> Dict[str, Any]:
    """Convert a content entity into a DynamoDB item.

    The ``kind`` discriminator is implied by the table and is dropped, as are
    unset optional attributes.
    """
    item = content.model_dump(mode="json", exclude={"kind"}, exclude_none=True)
    if "prompt_ids" in item:
        if item["prompt_ids"]:
            item["prompt_ids"] = set(item["prompt_ids"])
        else:
            # DynamoDB rejects empty sets
            del item["prompt_ids"]
    return item
