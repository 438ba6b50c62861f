"""Metadata stored in the ``description`` field of a bridge schedule.

The bridge keeps the description as opaque text of limited length, so the
payload is a JSON object with one-letter keys:

    {"t":"LF1.0","a":"Alice Lon","h":32767,"s":254}

``t`` tags the schedule as ours and is always present. ``a`` (author), ``h``
and ``s`` (hue and saturation in bridge units) are optional and left out
entirely when unset. New keys may be added later; decoding ignores keys it
does not know, and ``t`` is never renamed.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

APP_IDENTIFIER = "LF1.0"
AUTHOR_MAX_LENGTH = 9


class Descriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    type: str = Field(..., alias="t")
    author: Optional[str] = Field(None, alias="a")
    hue: Optional[int] = Field(None, alias="h")
    sat: Optional[int] = Field(None, alias="s")


def truncate_author(author: Optional[str]) -> Optional[str]:
    if author is None:
        return None
    return author[:AUTHOR_MAX_LENGTH]


def make_descriptor(author: Optional[str] = None,
                    hue: Optional[float] = None,
                    sat: Optional[float] = None) -> Descriptor:
    # hue and sat travel as a pair, one without the other is dropped
    if hue is not None and sat is not None:
        return Descriptor(type=APP_IDENTIFIER, author=truncate_author(author),
                          hue=int(hue), sat=int(sat))
    return Descriptor(type=APP_IDENTIFIER, author=truncate_author(author))


def encode(author: Optional[str] = None,
           hue: Optional[float] = None,
           sat: Optional[float] = None) -> str:
    return make_descriptor(author, hue, sat).model_dump_json(by_alias=True, exclude_none=True)


def decode(text: Optional[str]) -> Optional[Descriptor]:
    """Parse a schedule description, or return None if it is not one of ours.

    Descriptions written by other tools are plain text, so failures here are
    expected and never raised.
    """
    if not text:
        return None
    try:
        return Descriptor.model_validate_json(text)
    except ValidationError as e:
        logger.debug("Description %r is not a descriptor: %s", text, e.error_count())
        return None


def is_owned_by_this_application(descriptor: Optional[Descriptor]) -> bool:
    return descriptor is not None and descriptor.type == APP_IDENTIFIER
