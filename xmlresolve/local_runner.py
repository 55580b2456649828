"""Local entry point to parse an XML document offline with bundled DTDs."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from lxml import etree

from .loader import ResourceLoader
from .lxml_resolver import make_parser
from .resolver import CompositeEntityResolver, EntityResolver, EntityResolverProtocol, MappedEntityResolver

RESOURCE_PATH_ENV = "XMLRESOLVE_RESOURCE_PATH"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse an XML document without network access")
    parser.add_argument("document", help="Path of the XML document to parse")
    parser.add_argument("--validate", action="store_true", help="Validate against the DOCTYPE's DTD")
    parser.add_argument(
        "--mapping",
        action="append",
        default=[],
        help="Properties file of systemId=location entries (repeatable)",
    )
    parser.add_argument(
        "--resource-path",
        action="append",
        default=None,
        help=f"Extra module root searched before the bundled DTDs (repeatable, default ${RESOURCE_PATH_ENV})",
    )
    parser.add_argument("--verbose", action="store_true", help="Log resolution at DEBUG level")
    return parser.parse_args(argv)


def build_resolver(
    mapping_files: Sequence[str],
    resource_path: Sequence[str],
    logger: logging.Logger,
) -> EntityResolverProtocol:
    loader = ResourceLoader(module_roots=resource_path or None, logger=logger)
    resolvers: List[EntityResolverProtocol] = [
        MappedEntityResolver.from_properties(path, loader=loader, logger=logger) for path in mapping_files
    ]
    if resource_path:
        resolvers.append(EntityResolver(loader=loader, anchor=None, logger=logger))
    resolvers.append(EntityResolver(logger=logger))
    return CompositeEntityResolver(resolvers)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    logger = logging.getLogger("xmlresolve.local-runner")

    resource_path = args.resource_path
    if resource_path is None:
        resource_path = [entry for entry in os.environ.get(RESOURCE_PATH_ENV, "").split(os.pathsep) if entry]

    try:
        resolver = build_resolver(args.mapping, resource_path, logger)
    except OSError as exc:
        logger.error("Unable to read entity mapping", extra={"error": str(exc)})
        return 1

    parser = make_parser(
        resolver,
        logger=logger,
        dtd_validation=args.validate,
        attribute_defaults=True,
    )
    try:
        tree = etree.parse(args.document, parser)
    except (etree.XMLSyntaxError, OSError) as exc:
        logger.error("Failed to parse document", extra={"document": args.document, "error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"root: {tree.getroot().tag}")
    print(f"doctype: {tree.docinfo.system_url or '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
