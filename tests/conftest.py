"""
ONIX Books Sync - Test Fixtures
Shared fixtures for pytest tests.
"""

import pytest
import tempfile
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from onix_sync.models import ProductRecord
from onix_sync.database import BookDatabase
from onix_sync.parser import OnixParser
from onix_sync.sync import BookSynchronizer


ONIX_NAMESPACE = "http://ns.editeur.org/onix/3.0/reference"


def wrap_products(*products: str, namespace: bool = True) -> str:
    """Wrap <Product> snippets in an ONIXMessage document."""
    xmlns = f' xmlns="{ONIX_NAMESPACE}"' if namespace else ""
    body = "\n".join(products)
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<ONIXMessage release="3.0"{xmlns}>
<Header>
<Sender><SenderName>Beispiel Verlag</SenderName></Sender>
<SentDateTime>20240101</SentDateTime>
</Header>
{body}
</ONIXMessage>
'''


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def make_onix():
    """Factory: build an ONIX document from <Product> snippets."""
    return wrap_products


@pytest.fixture
def full_product_xml() -> str:
    """Hardcover product with every extracted field present."""
    return '''<Product>
<RecordReference>com.beispiel.9783161484100</RecordReference>
<NotificationType>03</NotificationType>
<ProductIdentifier><ProductIDType>01</ProductIDType><IDValue>BV-4711</IDValue></ProductIdentifier>
<ProductIdentifier><ProductIDType>03</ProductIDType><IDValue>9783161484100</IDValue></ProductIdentifier>
<ProductIdentifier><ProductIDType>15</ProductIDType><IDValue>9783161484100</IDValue></ProductIdentifier>
<DescriptiveDetail>
<ProductComposition>00</ProductComposition>
<ProductForm>BB</ProductForm>
<TitleDetail>
<TitleType>01</TitleType>
<TitleElement><TitleElementLevel>01</TitleElementLevel><TitleText>Der Zauberberg</TitleText></TitleElement>
</TitleDetail>
<Contributor><SequenceNumber>1</SequenceNumber><ContributorRole>A01</ContributorRole><PersonName>Thomas Mann</PersonName></Contributor>
<Contributor><SequenceNumber>2</SequenceNumber><ContributorRole>B01</ContributorRole><PersonName>Hans Wysling</PersonName></Contributor>
<Language><LanguageRole>01</LanguageRole><LanguageCode>ger</LanguageCode></Language>
</DescriptiveDetail>
<CollateralDetail>
<TextContent><TextType>02</TextType><ContentAudience>00</ContentAudience><Text>Ein Klassiker.</Text></TextContent>
<TextContent><TextType>03</TextType><ContentAudience>00</ContentAudience><Text>Hans Castorp reist nach Davos.</Text></TextContent>
<TextContent><TextType>04</TextType><ContentAudience>00</ContentAudience><Text>Thomas Mann, geboren 1875 in Lübeck.</Text></TextContent>
<SupportingResource>
<ResourceContentType>01</ResourceContentType>
<ContentAudience>00</ContentAudience>
<ResourceMode>03</ResourceMode>
<ResourceVersion><ResourceForm>02</ResourceForm><ResourceLink>https://cover.example.com/9783161484100.jpg</ResourceLink></ResourceVersion>
</SupportingResource>
</CollateralDetail>
<ProductSupply>
<SupplyDetail>
<Supplier><SupplierRole>01</SupplierRole><SupplierName>Beispiel Verlag</SupplierName></Supplier>
<ProductAvailability>20</ProductAvailability>
<Price><PriceType>04</PriceType><PriceAmount>25.00</PriceAmount><CurrencyCode>EUR</CurrencyCode><CountryCode>DE</CountryCode></Price>
<Price><PriceType>04</PriceType><PriceAmount>25.70</PriceAmount><CurrencyCode>EUR</CurrencyCode><CountryCode>AT</CountryCode></Price>
</SupplyDetail>
</ProductSupply>
</Product>'''


@pytest.fixture
def ebook_product_xml() -> str:
    """EPUB edition, must never produce a record."""
    return '''<Product>
<RecordReference>com.beispiel.9783161484117</RecordReference>
<NotificationType>01</NotificationType>
<ProductIdentifier><ProductIDType>03</ProductIDType><IDValue>9783161484117</IDValue></ProductIdentifier>
<DescriptiveDetail>
<ProductForm>DG</ProductForm>
<TitleDetail><TitleType>01</TitleType><TitleElement><TitleElementLevel>01</TitleElementLevel><TitleText>Der Zauberberg (E-Book)</TitleText></TitleElement></TitleDetail>
</DescriptiveDetail>
</Product>'''


@pytest.fixture
def sample_onix_content(make_onix, full_product_xml, ebook_product_xml) -> str:
    """Document with a print edition, an ebook and a minimal product."""
    minimal = '''<Product>
<RecordReference>com.beispiel.minimal</RecordReference>
<NotificationType>01</NotificationType>
</Product>'''
    return make_onix(full_product_xml, ebook_product_xml, minimal)


@pytest.fixture
def sample_record() -> ProductRecord:
    """Sample ProductRecord for a New notification."""
    return ProductRecord(
        record_reference="com.beispiel.9783161484100",
        notification_type="01",
        title="Der Zauberberg",
        isbn="9783161484100",
        price="25.00",
        author="Thomas Mann",
        coverlink="https://cover.example.com/9783161484100.jpg",
        promotional_text="Ein Klassiker.",
        description="Hans Castorp reist nach Davos.",
        author_biography="Thomas Mann, geboren 1875 in Lübeck.",
        language="ger",
    )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def temp_database():
    """Create a temporary SQLite database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = BookDatabase.connect_sqlite(db_path)
    db.ensure_schema()
    yield db

    # Cleanup
    db.close()
    try:
        db_path.unlink()
    except OSError:
        pass


@pytest.fixture
def synchronizer(temp_database) -> BookSynchronizer:
    """Synchronizer bound to the temporary database."""
    return BookSynchronizer(temp_database)


@pytest.fixture
def parser() -> OnixParser:
    return OnixParser()


# =============================================================================
# FILE FIXTURES
# =============================================================================

@pytest.fixture
def sample_onix_file(sample_onix_content, tmp_path) -> Path:
    """Write the sample document to a temporary file."""
    onix_file = tmp_path / "feed_001.xml"
    onix_file.write_text(sample_onix_content, encoding="utf-8")
    return onix_file
