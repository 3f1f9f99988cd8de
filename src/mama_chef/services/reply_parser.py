"""Parsing of the tag-based reply contract."""

import json
import logging
import re

from pydantic import ValidationError

from mama_chef.domain.chat import ParsedReply
from mama_chef.domain.contract import StructuredReply

SHOPPING_LIST_TAG = "[SHOPPING_LIST_READY]"
NEEDS_SUBSCRIPTION_TAG = "[NEEDS_SUBSCRIPTION]"

_JSON_BLOCK_RE = re.compile(r"```json([\s\S]*?)```")

_logger = logging.getLogger(__name__)


def parse_reply(raw: str) -> ParsedReply:
    """Split a raw model reply into display text and control signals.

    Fenced ``json`` blocks are removed before the tags are scanned, so tags
    inside a block never count.
    """
    blocks = _JSON_BLOCK_RE.findall(raw)
    text = _JSON_BLOCK_RE.sub("", raw)

    shopping_list_ready = SHOPPING_LIST_TAG in text
    text = text.replace(SHOPPING_LIST_TAG, "")

    needs_subscription = NEEDS_SUBSCRIPTION_TAG in text
    text = text.replace(NEEDS_SUBSCRIPTION_TAG, "")

    return ParsedReply(
        display_text=text.strip(),
        shopping_list_ready=shopping_list_ready,
        needs_subscription=needs_subscription,
        structured=_first_structured(blocks),
    )


def _first_structured(blocks: list[str]) -> StructuredReply | None:
    """Return the first block that validates as a structured reply."""
    for block in blocks:
        try:
            payload = json.loads(block)
        except json.JSONDecodeError:
            _logger.debug("Skipping undecodable json block")
            continue
        if not isinstance(payload, dict):
            continue
        try:
            return StructuredReply.model_validate(payload)
        except ValidationError as exc:
            _logger.debug("Structured block did not validate: %s", exc)
    return None
