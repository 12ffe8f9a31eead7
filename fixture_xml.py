"""
fixture_xml.py - read typo3/testing-framework style XML fixtures
into a fixture_model.Dataset

Two layouts are understood:

nested
    <dataset><table><row><column>value</column>...</row>...</table>...</dataset>

record
    <dataset><table><column>value</column>...</table>...</dataset>
    where each table element is one row, as the testing framework writes them

Anything the conversion can't represent faithfully (CDATA, comments in
values, attributes like is-NULL or ref) raises UnsupportedError rather
than being dropped.
"""

import io
import sys
from collections import OrderedDict
from xml.sax import make_parser, handler, InputSource, SAXParseException

from fixture_model import (
    Dataset, Location, MalformedError, UnsupportedError)

# layout -> (table depth, row depth, column depth), root is depth 1
LAYOUTS = OrderedDict([
    ('nested', (2, 3, 4)),
    ('record', (2, 2, 3)),
])

XML_WHITESPACE = ' \t\r\n'


class FixtureHandler(handler.ContentHandler, handler.LexicalHandler):
    """SAX handler building a Dataset, see LAYOUTS for depths"""

    def __init__(self, layout='nested'):
        handler.ContentHandler.__init__(self)
        if layout not in LAYOUTS:
            raise ValueError("unknown layout '%s', expected one of %s" % (
                layout, ', '.join(LAYOUTS)))
        self.table_depth, self.row_depth, self.column_depth = LAYOUTS[layout]
        self.layout = layout
        self.path = []
        self.dataset = Dataset()
        self.table = None
        self.row = None
        self.text = None
        self.locator = None

    def setDocumentLocator(self, locator):
        self.locator = locator

    def location(self):
        if self.locator is None:
            return None
        return Location(self.locator.getLineNumber(),
                        self.locator.getColumnNumber())

    def in_column(self):
        return len(self.path) == self.column_depth

    def startElement(self, name, attrs):
        self.path.append(name)
        depth = len(self.path)

        # attributes on the root (xmlns, schema location) carry no data
        if depth > 1 and attrs.getLength():
            raise UnsupportedError(
                'attribute', self.location(), "%s on <%s>" % (
                    ', '.join(attrs.getNames()), name))
        if depth > self.column_depth:
            raise UnsupportedError(
                'nested element', self.location(),
                "<%s> inside <%s>" % (name, self.path[-2]))

        if depth == self.table_depth:
            self.table = self.dataset.add_table(name)
        if depth == self.row_depth:
            self.row = OrderedDict()
        if depth == self.column_depth:
            self.text = []

    def characters(self, content):
        if self.in_column():
            self.text.append(content)
        elif content.strip(XML_WHITESPACE):
            raise UnsupportedError(
                'text outside column', self.location(),
                "%r in <%s>" % (content.strip(XML_WHITESPACE), self.path[-1]))

    def endElement(self, name):
        depth = len(self.path)

        if depth == self.column_depth:
            if name in self.row:
                location = self.location()
                sys.stderr.write(
                    "Warning: duplicated column %s in table %s at line %d, "
                    "keeping last value\n" % (
                        name, self.table.name, location.line if location else 0))
            self.row[name] = ''.join(self.text)
            self.text = None
        if depth == self.row_depth:
            self.table.add_row(self.row)
            self.row = None
        if depth == self.table_depth:
            self.table = None

        del self.path[-1]

    def processingInstruction(self, target, data):
        if self.in_column():
            raise UnsupportedError(
                'processing instruction', self.location(), "<?%s?>" % target)

    # LexicalHandler

    def comment(self, content):
        if self.in_column():
            raise UnsupportedError(
                'comment', self.location(), "inside <%s>" % self.path[-1])

    def startCDATA(self):
        raise UnsupportedError('CDATA', self.location())

    def endCDATA(self):
        pass

    def startDTD(self, name, public_id, system_id):
        raise UnsupportedError(
            'document type declaration', self.location(), "<!DOCTYPE %s>" % name)

    def endDTD(self):
        pass


def make_reader(fixture_handler):
    """Return an expat SAX reader feeding `fixture_handler`"""
    reader = make_parser()
    reader.setFeature(handler.feature_namespaces, False)
    reader.setFeature(handler.feature_external_ges, False)
    reader.setContentHandler(fixture_handler)
    reader.setProperty(handler.property_lexical_handler, fixture_handler)
    return reader


def read_dataset(source, layout='nested'):
    """
    read_dataset - parse a fixture document

    :param source: file name, binary file object or xml.sax InputSource
    :param str layout: 'nested' or 'record', see LAYOUTS
    :return: tables read
    :rtype: fixture_model.Dataset
    :raises MalformedError: input is not well-formed XML
    :raises UnsupportedError: input uses CDATA, attributes etc.
    """
    fixture_handler = FixtureHandler(layout)
    reader = make_reader(fixture_handler)
    try:
        reader.parse(source)
    except SAXParseException as exc:
        raise MalformedError(
            exc.getMessage(),
            Location(exc.getLineNumber(), exc.getColumnNumber()))
    return fixture_handler.dataset


def parse(xml_text, layout='nested'):
    """Parse a fixture document held in a str or bytes, see read_dataset()"""
    source = InputSource()
    if isinstance(xml_text, bytes):
        source.setByteStream(io.BytesIO(xml_text))
    else:
        source.setCharacterStream(io.StringIO(xml_text))
    return read_dataset(source, layout)
