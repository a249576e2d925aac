import logging
from typing import Any, Dict, Union

from errors import ConversionError, DecodeFailure, StructureNotFound, UnexpectedShape
from mt103 import build_mt103
from normalizer import normalize
from xmltree import decode

logger = logging.getLogger(__name__)

ROOT_ELEMENT = "FIToFICstmrCdtTrf"


def locate_credit_transfer(tree: Dict[str, Any]) -> Any:
    tree = tree if isinstance(tree, dict) else {}
    document = tree.get("Document")
    wrapped = document.get(ROOT_ELEMENT) if isinstance(document, dict) else None
    data = wrapped or tree.get(ROOT_ELEMENT)
    if not data:
        logger.warning("%s not found; available keys: %s", ROOT_ELEMENT, list(tree.keys()))
        raise StructureNotFound(f"{ROOT_ELEMENT} element not found in XML", detail=list(tree.keys()))
    return data


def convert_tree(tree: Dict[str, Any]) -> str:
    data = locate_credit_transfer(tree)
    try:
        return build_mt103(normalize(data))
    except ConversionError:
        raise
    except Exception as e:
        logger.error("Conversion error: %s", e, exc_info=True)
        raise UnexpectedShape(str(e)) from e


def convert_xml(xml: Union[bytes, str]) -> str:
    logger.info("Received XML length: %d", len(xml or ""))
    try:
        tree = decode(xml)
    except ConversionError as e:
        logger.error("XML parse error: %s", e.message)
        raise
    except Exception as e:
        logger.error("XML parse error: %s", e, exc_info=True)
        raise DecodeFailure(str(e)) from e
    return convert_tree(tree)
