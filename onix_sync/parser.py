"""
ONIX Books Sync - ONIX 3.0 Parser
Extracts book records from ONIX 3.0 reference-tag XML files.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

import ftfy
from lxml import etree

from .models import ProductRecord
from .exceptions import ParserError

logger = logging.getLogger(__name__)


def first_match(
    elements: Iterable[etree._Element],
    predicate: Callable[[etree._Element], bool],
) -> Optional[etree._Element]:
    """Return the first element satisfying predicate, in document order."""
    for element in elements:
        if predicate(element):
            return element
    return None


def children(parent: Optional[etree._Element], name: str) -> List[etree._Element]:
    """Direct children with the given local name, in or out of a namespace."""
    if parent is None:
        return []
    return list(parent.iterchildren("{*}" + name))


def child(parent: Optional[etree._Element], *path: str) -> Optional[etree._Element]:
    """Follow path through the first matching child at each step."""
    node = parent
    for name in path:
        if node is None:
            return None
        node = next(node.iterchildren("{*}" + name), None)
    return node


def text_of(parent: Optional[etree._Element], *path: str) -> Optional[str]:
    """Text of the element at path, None if the path does not exist."""
    node = child(parent, *path)
    if node is None:
        return None
    return node.text or ""


def value_of(entry: Optional[etree._Element], *path: str) -> Optional[str]:
    """Text at path below a matched entry: None without a match, "" if the path is missing."""
    if entry is None:
        return None
    return text_of(entry, *path) or ""


def has_value(name: str, value: str) -> Callable[[etree._Element], bool]:
    """Predicate: the child element `name` exists and its text equals value."""
    def predicate(element: etree._Element) -> bool:
        return text_of(element, name) == value
    return predicate


class OnixParser:
    """
    Parses ONIX 3.0 product feeds into ProductRecord instances.

    Only reference tags are understood. Elements are matched by local name,
    so files with or without the ONIX 3.0 default namespace both work.

    Every multi-valued field is resolved by a first-match scan: when several
    entries qualify, only the first one in document order is used.
    """

    EBOOK_FORM_PREFIX = "D"
    ISBN13 = "03"                 # ProductIDType
    PRICE_CURRENCY = "EUR"
    PRICE_COUNTRY = "DE"
    FRONT_COVER = "01"            # ResourceContentType
    PROMOTIONAL_TEXT = "02"       # TextType
    DESCRIPTION = "03"
    BIOGRAPHICAL_NOTE = "04"
    TEXT_LANGUAGE = "01"          # LanguageRole

    def __init__(self, fix_text: bool = False):
        """
        Args:
            fix_text: Repair mojibake in text fields with ftfy
        """
        self.fix_text = fix_text
        self._xml_parser = etree.XMLParser(
            resolve_entities="internal",
            no_network=True,
            huge_tree=True,
        )

    def parse_file(self, filepath: Path) -> List[ProductRecord]:
        """
        Parse an ONIX file and return its non-ebook products.

        Args:
            filepath: Path to the ONIX 3.0 XML file

        Returns:
            List of ProductRecord in document order

        Raises:
            ParserError: If the file cannot be read or is not well-formed
        """
        filepath = Path(filepath)
        logger.debug(f"📖 Parsing file: {filepath}")

        try:
            content = filepath.read_bytes()
        except OSError as e:
            raise ParserError(f"Failed to read file: {e}", filename=str(filepath))

        return self.parse_bytes(content, filename=str(filepath))

    def parse_bytes(self, content: bytes, filename: str = None) -> List[ProductRecord]:
        """Parse an in-memory ONIX document."""
        try:
            root = etree.fromstring(content, parser=self._xml_parser)
        except etree.XMLSyntaxError as e:
            raise ParserError(f"Malformed XML: {e}", filename=filename)

        records = list(self.extract(root))
        logger.debug(f"✅ Extracted {len(records)} products from {filename or 'document'}")
        return records

    def extract(self, root: etree._Element) -> Iterator[ProductRecord]:
        """Yield a record for each non-ebook <Product> under root."""
        for product in children(root, "Product"):
            if self.is_ebook(product):
                reference = text_of(product, "RecordReference")
                logger.debug(f"Skipping ebook {reference}", extra={"record_reference": reference})
                continue
            yield self.extract_product(product)

    def is_ebook(self, product: etree._Element) -> bool:
        """ProductForm codes starting with D are digital editions."""
        form = text_of(product, "DescriptiveDetail", "ProductForm")
        return form is not None and form.startswith(self.EBOOK_FORM_PREFIX)

    def extract_product(self, product: etree._Element) -> ProductRecord:
        """Build a ProductRecord from one <Product> element."""
        descriptive = child(product, "DescriptiveDetail")
        collateral = child(product, "CollateralDetail")

        return ProductRecord(
            record_reference=text_of(product, "RecordReference") or "",
            notification_type=text_of(product, "NotificationType") or "",
            title=self._clean(
                text_of(descriptive, "TitleDetail", "TitleElement", "TitleText")
            ) or "",
            isbn=self._isbn(product),
            price=self._price(product),
            author=self._clean(self._authors(descriptive)),
            coverlink=self._coverlink(collateral),
            promotional_text=self._text_content(collateral, self.PROMOTIONAL_TEXT),
            description=self._text_content(collateral, self.DESCRIPTION),
            author_biography=self._text_content(collateral, self.BIOGRAPHICAL_NOTE),
            language=self._language(descriptive),
        )

    def _isbn(self, product: etree._Element) -> Optional[str]:
        identifier = first_match(
            children(product, "ProductIdentifier"),
            has_value("ProductIDType", self.ISBN13),
        )
        return value_of(identifier, "IDValue")

    def _price(self, product: etree._Element) -> Optional[str]:
        supply_detail = child(product, "ProductSupply", "SupplyDetail")

        def in_market(price: etree._Element) -> bool:
            if text_of(price, "CurrencyCode") != self.PRICE_CURRENCY:
                return False
            country = text_of(price, "CountryCode")
            return country is None or country == self.PRICE_COUNTRY

        price = first_match(children(supply_detail, "Price"), in_market)
        return value_of(price, "PriceAmount")

    def _authors(self, descriptive: Optional[etree._Element]) -> str:
        names = [
            text_of(contributor, "PersonName")
            for contributor in children(descriptive, "Contributor")
            if child(contributor, "PersonName") is not None
        ]
        return ", ".join(names)

    def _coverlink(self, collateral: Optional[etree._Element]) -> Optional[str]:
        # The match is decided by content type only: a front cover without
        # a ResourceVersion/ResourceLink leaves the cover empty.
        resource = first_match(
            children(collateral, "SupportingResource"),
            has_value("ResourceContentType", self.FRONT_COVER),
        )
        if resource is None:
            return None
        return text_of(resource, "ResourceVersion", "ResourceLink")

    def _text_content(self, collateral: Optional[etree._Element], text_type: str) -> Optional[str]:
        block = first_match(
            children(collateral, "TextContent"),
            has_value("TextType", text_type),
        )
        if block is None:
            return None
        text = child(block, "Text")
        if text is None:
            return ""
        # XHTML texts carry child markup; keep the text only
        return self._clean("".join(text.itertext()))

    def _language(self, descriptive: Optional[etree._Element]) -> Optional[str]:
        language = first_match(
            children(descriptive, "Language"),
            has_value("LanguageRole", self.TEXT_LANGUAGE),
        )
        return value_of(language, "LanguageCode")

    def _clean(self, value: Optional[str]) -> Optional[str]:
        if value and self.fix_text:
            return ftfy.fix_text(value)
        return value
