from typing import Optional

DRAFT = "draft"
PUBLISHED = "published"


def initial_status(requested: Optional[str]) -> str:
    return requested or DRAFT


def is_publishing(requested: Optional[str]) -> bool:
    """Only an explicit ``published`` publishes; anything else saves a draft."""
    return requested == PUBLISHED
