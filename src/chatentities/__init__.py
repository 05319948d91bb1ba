"""Entity extraction for chat messages.

Parses a message against the configured emote/nick/tag vocabularies, merges
independently detected links into the parse tree and flattens the result
into category-indexed entities with bounds into the message.
"""

from .entities import Entities, Entity, EntityCategory, OffsetUnit
from .errors import EntityError, InvalidBounds, MalformedTree, RecursionLimitExceeded
from .links import find_links
from .merge import merge_links
from .parser import ParserContext, Vocabulary, parse_message
from .pipeline import EntityExtractor, extract_entities
from .walker import walk

__all__ = [
    "__version__",
    "Entities",
    "Entity",
    "EntityCategory",
    "OffsetUnit",
    "EntityError",
    "InvalidBounds",
    "MalformedTree",
    "RecursionLimitExceeded",
    "find_links",
    "merge_links",
    "ParserContext",
    "Vocabulary",
    "parse_message",
    "EntityExtractor",
    "extract_entities",
    "walk",
]
__version__ = "0.1.0"
