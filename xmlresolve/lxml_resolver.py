from __future__ import annotations

import logging
from typing import Optional

from lxml import etree

from .resolver import EntityResolver, EntityResolverProtocol

LOGGER = logging.getLogger(__name__)


class LxmlEntityResolver(etree.Resolver):
    """Plugs an entity resolver into an ``lxml`` parser.

    Declining returns ``None`` so lxml falls back to its own resolution, which
    with ``no_network=True`` refuses to fetch remote DTDs.
    """

    def __init__(
        self,
        resolver: Optional[EntityResolverProtocol] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self._resolver = resolver or EntityResolver()
        self.logger = logger or LOGGER

    @property
    def resolver(self) -> EntityResolverProtocol:
        return self._resolver

    def resolve(self, system_url, public_id, context):
        source = self._resolver.resolve(public_id, system_url)
        if source is None:
            self.logger.debug(
                "Deferring entity to parser default",
                extra={"systemId": system_url, "publicId": public_id},
            )
            return None
        return self.resolve_file(source.stream, context, base_url=source.system_id, close=True)

    def install(self, parser: etree.XMLParser) -> etree.XMLParser:
        parser.resolvers.add(self)
        return parser


def make_parser(
    resolver: Optional[EntityResolverProtocol] = None,
    *,
    logger: Optional[logging.Logger] = None,
    **parser_options,
) -> etree.XMLParser:
    """Build an offline ``XMLParser`` that loads DTDs through ``resolver``."""
    options = {"load_dtd": True, "no_network": True, "resolve_entities": False}
    options.update(parser_options)
    parser = etree.XMLParser(**options)
    return LxmlEntityResolver(resolver, logger=logger).install(parser)
